"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from tidymac.cleaner import Cleaner
from tidymac.config import Settings
from tidymac.scanner import Scanner
from tidymac.sudo import SudoSession

KIB = 1024
MIB = 1024 * KIB


@pytest.fixture
def settings():
    """Settings with no post-delete settle delay."""
    return Settings(settle_delay=0)


@pytest.fixture
def session():
    """A sudo session stand-in that never shells out."""
    return MagicMock(spec=SudoSession)


@pytest.fixture
def scanner(session, settings):
    return Scanner(session, settings, estimators=[])


@pytest.fixture
def cleaner(session, settings):
    return Cleaner(session, settings)


def write_file(path, size: int, fill: bytes = b"x") -> str:
    """Create a file of exactly ``size`` bytes, making parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes((fill * (size // len(fill) + 1))[:size])
    return str(path)
