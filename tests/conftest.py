import os
import sys

import pytest


# Ensure the repository's src/ is on sys.path for `from fenboard...` imports
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_PATH = os.path.abspath(os.path.join(REPO_ROOT, "src"))
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)


@pytest.fixture
def startpos():
    from fenboard.engine.position import Position

    return Position.startpos()
