from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import uvicorn

from ..engine.attacks import is_square_attacked
from ..engine.legality import generate_legal_moves
from ..engine.move import str_to_square
from ..engine.position import STARTPOS_FEN, Position
from ..engine.types import Color


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fenboard", description="FEN board tools")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level (default: info)",
    )

    moves = sub.add_parser("moves", help="Print legal moves, one UCI move per line")
    moves.add_argument("--fen", default=STARTPOS_FEN, help="FEN string (default: startpos)")

    show = sub.add_parser("show", help="Dump the bitsets of a position")
    show.add_argument("--fen", default=STARTPOS_FEN, help="FEN string (default: startpos)")

    attacked = sub.add_parser("attacked", help="Report whether a square is attacked")
    attacked.add_argument("--fen", default=STARTPOS_FEN, help="FEN string (default: startpos)")
    attacked.add_argument("--square", required=True, help="Square such as e4")
    attacked.add_argument("--by", required=True, choices=["white", "black"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        uvicorn.run(
            "fenboard.protocol.http.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            log_level=args.log_level,
        )
        return 0

    try:
        pos = Position(args.fen)
        if args.command == "moves":
            for move in generate_legal_moves(pos):
                print(move.to_uci())
        elif args.command == "show":
            print(pos.describe())
        elif args.command == "attacked":
            sq = str_to_square(args.square)
            by = Color.WHITE if args.by == "white" else Color.BLACK
            print("yes" if is_square_attacked(pos, sq.rank, sq.file, by) else "no")
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
