# invaders_server/services/phase_controller.py
"""Normal/Boss phase state machine and boss behaviour."""

import logging

from invaders_server.config.settings import GameConfig
from invaders_server.models.entities import Boss, GameState, Projectile
from invaders_server.utils.helpers import IdGenerator
from .collision_resolver import CollisionResolver
from .spawn_scheduler import SpawnScheduler

logger = logging.getLogger(__name__)


class PhaseController:
    """Owns the phase timer and every transition between phases.

    ``state.boss`` and ``state.bossPhase`` are only ever written together,
    here, so a boss exists exactly while the boss phase is active.
    """

    def __init__(
        self,
        config: GameConfig,
        scheduler: SpawnScheduler,
        resolver: CollisionResolver,
        ids: IdGenerator,
        now: float = 0.0,
    ):
        self.config = config
        self.scheduler = scheduler
        self.resolver = resolver
        self.ids = ids
        self.phase_start_time = now
        self.last_boss_fire = 0.0

    def reset(self, now: float):
        """Rewind the phase timer and the boss fire cursor."""
        self.phase_start_time = now
        self.last_boss_fire = 0.0

    def restart_timer(self, now: float):
        """Push the next boss fight a full interval away."""
        self.phase_start_time = now

    def evaluate(self, state: GameState, now: float):
        """Enter the boss phase if the scheduler says it is due."""
        boss = self.scheduler.maybe_enter_boss_phase(state, now, self.phase_start_time)
        if boss is not None:
            self._enter_boss_phase(state, boss, now)

    def _enter_boss_phase(self, state: GameState, boss: Boss, now: float):
        state.boss = boss
        state.bossPhase = True
        state.enemies.clear()
        self.phase_start_time = now
        # No volley on the spawn tick.
        self.last_boss_fire = now
        logger.info("Boss %s spawned (wave %d)", boss.id, state.wave)

    def _exit_boss_phase(self, state: GameState, now: float):
        state.score += self.config.award(self.config.boss_kill_score)
        state.boss = None
        state.bossPhase = False
        self.phase_start_time = now
        logger.info("Boss defeated, score now %d", state.score)

    def fire_interval(self, wave: int) -> float:
        """Boss volley interval for a wave, never below the floor."""
        cfg = self.config
        return max(
            cfg.boss_min_fire_rate,
            cfg.boss_fire_rate - (wave - 1) * cfg.boss_fire_rate_per_wave,
        )

    def update_boss(self, state: GameState, now: float):
        """Patrol, fire and take hits. May end the boss phase."""
        boss = state.boss
        if not state.bossPhase or boss is None:
            return

        cfg = self.config
        boss.x += boss.speed * boss.direction
        if boss.x >= cfg.width - cfg.boss_patrol_margin:
            boss.direction = -1
        elif boss.x <= cfg.boss_patrol_margin:
            boss.direction = 1

        if now - self.last_boss_fire > self.fire_interval(state.wave):
            for offset in (-cfg.boss_cannon_offset_x, cfg.boss_cannon_offset_x):
                state.projectiles.append(
                    Projectile(
                        id=self.ids.next_id(),
                        x=boss.x + offset,
                        y=boss.y + cfg.boss_cannon_offset_y,
                        velocityX=0,
                        velocityY=cfg.enemy_projectile_speed,
                        isEnemy=True,
                    )
                )
            self.last_boss_fire = now

        if self.resolver.resolve_boss_hits(state, boss):
            self._exit_boss_phase(state, now)
