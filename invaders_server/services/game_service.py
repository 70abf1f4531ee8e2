# invaders_server/services/game_service.py
"""Core game logic and state management."""

import math
import random
from typing import Optional

from invaders_server.config.settings import GameConfig, DEFAULT_CONFIG
from invaders_server.models.entities import GameState, PlayerInput, Projectile
from invaders_server.utils.helpers import IdGenerator, clamp
from .collision_resolver import CollisionResolver
from .phase_controller import PhaseController
from .spawn_scheduler import SpawnScheduler


class GameService:
    """Main game service that owns one game state and advances it per tick."""

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        now: float = 0.0,
    ):
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.ids = IdGenerator()

        self.scheduler = SpawnScheduler(config, self.rng, self.ids)
        self.resolver = CollisionResolver(config, self.rng, self.ids)
        self.phase = PhaseController(
            config, self.scheduler, self.resolver, self.ids, now=now
        )

        self.state = GameState.new(config)
        self.input = PlayerInput()
        self.last_shoot_time = 0.0

    def reset(self, now: float):
        """Discard the current game and start over, rewinding every cursor."""
        self.state = GameState.new(self.config)
        self.input = PlayerInput()
        self.last_shoot_time = 0.0
        self.scheduler.reset()
        self.phase.reset(now)

    def apply_input(self, player_input: PlayerInput):
        """Replace the current input snapshot."""
        self.input = player_input

    def resume(
        self,
        score: float,
        now: float,
        wave: Optional[float] = None,
        intensity: Optional[float] = None,
    ) -> bool:
        """Restore progress from a previous connection.

        Only a fresh game (score 0) accepts a positive score; anything else
        is ignored. Returns whether the resume was applied.
        """
        state = self.state
        if score <= 0 or state.score != 0:
            return False

        state.score = int(math.floor(score))
        if wave is not None:
            state.wave = max(1, int(math.floor(wave)))
        if intensity is not None:
            state.intensity = clamp(intensity, 1, 3)
        self.phase.restart_timer(now)
        return True

    def step(self, now: float):
        """Advance the simulation by one tick. ``now`` is in milliseconds."""
        state = self.state
        resolver = self.resolver

        self.phase.evaluate(state, now)
        self._expire_shield(now)
        self._move_player()
        self._maybe_shoot(now)

        if state.bossPhase:
            self.phase.update_boss(state, now)
        else:
            self.scheduler.maybe_spawn_enemy(state, now)
        self.scheduler.maybe_spawn_bonus(state, now)

        resolver.resolve_bonuses(state, now)
        resolver.resolve_projectiles(state)
        resolver.resolve_enemies(state)
        resolver.resolve_bullet_hits(state)

        self._update_derived()

    def _expire_shield(self, now: float):
        player = self.state.player
        if player.shieldActive and (
            player.shieldEndTime is None or now >= player.shieldEndTime
        ):
            player.shieldActive = False
            player.shieldEndTime = None

    def _move_player(self):
        cfg = self.config
        player = self.state.player
        current = self.input
        low_x, high_x = cfg.arena_margin, cfg.width - cfg.arena_margin
        low_y, high_y = cfg.arena_margin, cfg.height - cfg.arena_margin

        if current.left:
            player.x = clamp(player.x - cfg.player_speed, low_x, high_x)
        if current.right:
            player.x = clamp(player.x + cfg.player_speed, low_x, high_x)
        if current.up:
            player.y = clamp(player.y - cfg.player_speed, low_y, high_y)
        if current.down:
            player.y = clamp(player.y + cfg.player_speed, low_y, high_y)

    def _maybe_shoot(self, now: float):
        cfg = self.config
        if not self.input.shoot or now - self.last_shoot_time <= cfg.shoot_cooldown:
            return
        player = self.state.player
        self.state.projectiles.append(
            Projectile(
                id=self.ids.next_id(),
                x=player.x,
                y=player.y - cfg.muzzle_offset,
                velocityX=0,
                velocityY=-cfg.projectile_speed,
                isEnemy=False,
            )
        )
        self.last_shoot_time = now

    def _update_derived(self):
        # Both are pure functions of score.
        state = self.state
        state.intensity = min(3, 1 + (state.score // 1000) * 0.5)
        state.wave = state.score // 500 + 1

    # Getter methods for game state
    def get_state(self) -> dict:
        """Get the current game state as a snapshot dictionary."""
        return self.state.to_dict()
