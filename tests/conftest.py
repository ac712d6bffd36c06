from __future__ import annotations

from pathlib import Path

import pytest

from selfheal.config.loader import ConfigLoader
from selfheal.core.repository import ElementRepository
from tests.helpers import FakeClock


@pytest.fixture()
def suite_config():
    config_path = Path(__file__).resolve().parents[1] / "config" / "healing.json"
    return ConfigLoader.load(config_path)


@pytest.fixture()
def healing_config(suite_config):
    return suite_config.healing


@pytest.fixture()
def clock():
    return FakeClock(1_000.0)


@pytest.fixture()
def repository(healing_config, clock):
    return ElementRepository(healing_config, clock=clock)
