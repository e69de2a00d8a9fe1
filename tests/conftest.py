"""Shared fixtures."""

import pytest

from boards import make_session
from tilematch.game.session import GameSession


@pytest.fixture
def session() -> GameSession:
    """Session on BOARD_A with unique-kind refills."""
    return make_session()
