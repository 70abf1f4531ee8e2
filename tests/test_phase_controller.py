"""Tests for the Normal/Boss phase state machine."""

import pytest

from invaders_server.models.entities import Boss, Enemy, Projectile
from invaders_server.services.collision_resolver import CollisionResolver
from invaders_server.services.phase_controller import PhaseController
from invaders_server.services.spawn_scheduler import SpawnScheduler


@pytest.fixture
def controller(config, rng, ids):
    scheduler = SpawnScheduler(config, rng, ids)
    resolver = CollisionResolver(config, rng, ids)
    return PhaseController(config, scheduler, resolver, ids, now=0)


def enter_boss(controller, state, now=25000):
    controller.evaluate(state, now)
    assert state.boss is not None
    return state.boss


class TestTransitions:
    def test_starts_normal(self, controller, state):
        controller.evaluate(state, 24999)
        assert state.boss is None
        assert state.bossPhase is False

    def test_entry_spawns_boss_and_clears_enemies(self, controller, state):
        for i in range(4):
            state.enemies.append(Enemy(id=i, x=100, y=100, health=100, speed=1))

        boss = enter_boss(controller, state)

        assert state.bossPhase is True
        assert (boss.x, boss.y) == (400, 80)
        assert len(state.enemies) == 0
        assert controller.phase_start_time == 25000

    def test_no_volley_on_spawn_tick(self, controller, state):
        enter_boss(controller, state)
        controller.update_boss(state, 25000)
        assert len(state.projectiles) == 0

    def test_boss_kill_returns_to_normal(self, controller, state):
        boss = enter_boss(controller, state)
        for i in range(20):
            state.projectiles.append(
                Projectile(id=1000 + i, x=boss.x, y=boss.y, velocityX=0, velocityY=-8, isEnemy=False)
            )

        controller.update_boss(state, 30000)

        assert state.boss is None
        assert state.bossPhase is False
        assert state.score == 1000
        assert controller.phase_start_time == 30000
        assert all(p.isEnemy for p in state.projectiles)

    def test_no_immediate_reentry_after_kill(self, controller, state):
        boss = enter_boss(controller, state)
        boss.health = 50
        state.projectiles.append(
            Projectile(id=1, x=boss.x, y=boss.y, velocityX=0, velocityY=-8, isEnemy=False)
        )
        controller.update_boss(state, 40000)

        controller.evaluate(state, 40001)
        assert state.boss is None
        controller.evaluate(state, 64999)
        assert state.boss is None
        controller.evaluate(state, 65000)
        assert state.bossPhase is True

    def test_reset_rewinds_timers(self, controller, state):
        controller.reset(1234)
        assert controller.phase_start_time == 1234
        assert controller.last_boss_fire == 0

    def test_update_without_boss_is_noop(self, controller, state):
        controller.update_boss(state, 99999)
        assert len(state.projectiles) == 0
        assert state.score == 0


class TestBossBehaviour:
    @pytest.mark.parametrize("wave, interval", [(1, 1200), (2, 1170), (10, 930), (19, 660), (20, 650), (100, 650)])
    def test_fire_interval_shrinks_to_floor(self, controller, wave, interval):
        assert controller.fire_interval(wave) == interval

    def test_volley_fires_twin_cannons(self, controller, state):
        boss = enter_boss(controller, state)
        controller.update_boss(state, 26201)

        assert boss.x == 403
        left, right = state.projectiles
        assert (left.x, left.y) == (383, 120)
        assert (right.x, right.y) == (423, 120)
        for shot in (left, right):
            assert shot.isEnemy is True
            assert (shot.velocityX, shot.velocityY) == (0, 5)
        assert controller.last_boss_fire == 26201

    def test_volley_waits_for_interval(self, controller, state):
        enter_boss(controller, state)
        controller.update_boss(state, 26200)
        assert len(state.projectiles) == 0

    def test_patrol_reverses_at_edges(self, controller, state):
        boss = enter_boss(controller, state)
        boss.x = 738
        controller.update_boss(state, 25001)
        assert boss.direction == -1
        assert boss.x == 741

        boss.x = 62
        controller.update_boss(state, 25002)
        assert boss.direction == 1
        assert boss.x == 59

    def test_boss_volley_respects_projectile_cap(self, controller, state, config):
        enter_boss(controller, state)
        for i in range(config.max_projectiles):
            state.projectiles.append(
                Projectile(id=-i - 1, x=10, y=590, velocityX=0, velocityY=5, isEnemy=True)
            )
        controller.update_boss(state, 27000)

        assert len(state.projectiles) == config.max_projectiles
        assert state.projectiles[0].id == -3


def test_phase_flag_and_boss_move_together(controller, state):
    for now in range(0, 200000, 500):
        controller.evaluate(state, now)
        if state.bossPhase and now % 5000 == 0:
            state.boss.health = 0
            state.projectiles.append(
                Projectile(id=now, x=state.boss.x, y=state.boss.y, velocityX=0, velocityY=0, isEnemy=False)
            )
        controller.update_boss(state, now)
        assert state.bossPhase == (state.boss is not None)
        assert isinstance(state.boss, (Boss, type(None)))
