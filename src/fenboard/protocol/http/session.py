from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, Optional

from ...engine.position import Position


logger = logging.getLogger(__name__)


class PositionStore:
    """Thread-safe in-memory store of positions keyed by ``position_id``.

    Each stored Position is owned by its session; handlers replace it wholesale
    when a new FEN is applied.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._positions: Dict[str, Position] = {}

    def create(self, position: Optional[Position] = None) -> str:
        pid = str(uuid.uuid4())
        if position is None:
            position = Position.startpos()
        with self._lock:
            self._positions[pid] = position
        logger.info("position created", extra={"position_id": pid, "fen": position.to_fen()})
        return pid

    def get(self, position_id: str) -> Optional[Position]:
        with self._lock:
            return self._positions.get(position_id)

    def replace(self, position_id: str, position: Position) -> None:
        with self._lock:
            if position_id not in self._positions:
                raise KeyError(position_id)
            self._positions[position_id] = position
        logger.info(
            "position replaced", extra={"position_id": position_id, "fen": position.to_fen()}
        )

    def delete(self, position_id: str) -> bool:
        with self._lock:
            removed = self._positions.pop(position_id, None) is not None
        if removed:
            logger.info("position deleted", extra={"position_id": position_id})
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._positions)
