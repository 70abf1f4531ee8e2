# invaders_server/services/spawn_scheduler.py
"""Time-gated creation of enemies, bonuses and bosses."""

import random
from typing import Optional

from invaders_server.config.settings import GameConfig
from invaders_server.models.entities import Bonus, Boss, Enemy, GameState
from invaders_server.utils.helpers import IdGenerator

BONUS_TYPES = ("shield", "health")


class SpawnScheduler:
    """Decides when new entities appear.

    Every gate follows the same rule: fire once ``now - cursor > interval``,
    then move the cursor to ``now``. Cursors start at 0, so with a wall-clock
    ``now`` the first enemy and bonus appear on the first tick.
    """

    def __init__(self, config: GameConfig, rng: random.Random, ids: IdGenerator):
        self.config = config
        self.rng = rng
        self.ids = ids
        self.last_enemy_spawn = 0.0
        self.last_bonus_spawn = 0.0

    def reset(self):
        """Rewind all spawn cursors."""
        self.last_enemy_spawn = 0.0
        self.last_bonus_spawn = 0.0

    def enemy_interval(self, intensity: float) -> float:
        """Current enemy spawn interval in ms."""
        return self.config.enemy_spawn_interval / min(
            self.config.enemy_intensity_cap, intensity
        )

    def enemy_speed(self, wave: int) -> float:
        """Per-enemy speed for a wave, with a capped bonus."""
        cfg = self.config
        return cfg.enemy_base_speed + min(
            wave * cfg.enemy_speed_per_wave, cfg.enemy_max_speed_bonus
        )

    def maybe_spawn_enemy(self, state: GameState, now: float) -> Optional[Enemy]:
        """Spawn an enemy above the top edge if the enemy gate is open."""
        if state.bossPhase:
            return None
        if now - self.last_enemy_spawn <= self.enemy_interval(state.intensity):
            return None

        cfg = self.config
        margin = cfg.arena_margin
        enemy = Enemy(
            id=self.ids.next_id(),
            x=self.rng.random() * (cfg.width - 2 * margin) + margin,
            y=-margin,
            health=cfg.enemy_health,
            speed=self.enemy_speed(state.wave),
        )
        state.enemies.append(enemy)
        self.last_enemy_spawn = now
        return enemy

    def maybe_spawn_bonus(self, state: GameState, now: float) -> Optional[Bonus]:
        """Drop a shield or health bonus if the bonus gate is open."""
        if now - self.last_bonus_spawn <= self.config.bonus_spawn_interval:
            return None

        cfg = self.config
        bonus_type = BONUS_TYPES[0] if self.rng.random() > 0.5 else BONUS_TYPES[1]
        bonus = Bonus(
            id=self.ids.next_id(),
            x=self.rng.random() * (cfg.width - 2 * cfg.bonus_spawn_margin)
            + cfg.bonus_spawn_margin,
            y=-cfg.arena_margin,
            type=bonus_type,
            speed=cfg.bonus_speed,
        )
        state.bonuses.append(bonus)
        self.last_bonus_spawn = now
        return bonus

    def maybe_enter_boss_phase(
        self, state: GameState, now: float, phase_start_time: float
    ) -> Optional[Boss]:
        """Build a boss once a full normal phase has elapsed.

        The caller owns the phase transition; this only decides and creates.
        """
        if state.bossPhase or state.boss is not None:
            return None
        if now - phase_start_time < self.config.boss_phase_interval:
            return None

        cfg = self.config
        return Boss(
            id=self.ids.next_id(),
            x=cfg.width / 2,
            y=cfg.boss_spawn_y,
            health=cfg.boss_health,
            maxHealth=cfg.boss_health,
            direction=1,
            speed=cfg.boss_speed,
        )
