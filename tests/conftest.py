import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

import pytest

from gemswap.components.game_config import GameConfig
from gemswap.world import create_game


@pytest.fixture
def session():
    game = create_game(GameConfig(), seed=1234)
    yield game
    game.close()


@pytest.fixture
def paced_session():
    game = create_game(GameConfig(rows=5, cols=5, await_animations=True), seed=99)
    yield game
    game.close()
