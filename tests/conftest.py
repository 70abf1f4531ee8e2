"""Shared fixtures for the game server tests."""

import random

import pytest

from invaders_server.config.settings import GameConfig
from invaders_server.models.entities import GameState
from invaders_server.services.game_service import GameService
from invaders_server.utils.helpers import IdGenerator

NEVER = 1e12


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def quiet_config():
    """Config where nothing spawns and enemies never shoot."""
    return GameConfig(
        enemy_spawn_interval=NEVER,
        bonus_spawn_interval=NEVER,
        boss_phase_interval=NEVER,
        enemy_fire_chance=0,
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def ids():
    return IdGenerator()


@pytest.fixture
def state(config):
    return GameState.new(config)


@pytest.fixture
def service(config, rng):
    return GameService(config, rng, now=0.0)


@pytest.fixture
def quiet_service(quiet_config, rng):
    return GameService(quiet_config, rng, now=0.0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fixed_random():
    """Factory for a random source pinned to one value."""
    return FixedRandom
