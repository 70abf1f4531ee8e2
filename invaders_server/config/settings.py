# invaders_server/config/settings.py
"""Game configuration constants and settings."""

import os
from dataclasses import dataclass, fields

# Arena settings
GAME_WIDTH = 800
GAME_HEIGHT = 600
ARENA_MARGIN = 20  # player clamp and off-screen despawn margin

# Player settings
PLAYER_SPEED = 5
PLAYER_MAX_HEALTH = 100
PLAYER_START_OFFSET = 100  # distance from bottom edge
SHOOT_COOLDOWN = 200  # ms
SHIELD_DURATION = 10000  # ms
HEALTH_BONUS_AMOUNT = 15

# Projectile settings
PROJECTILE_SPEED = 8
ENEMY_PROJECTILE_SPEED = 5
MUZZLE_OFFSET = 20  # shots spawn this far ahead of the shooter

# Enemy settings
ENEMY_SPAWN_INTERVAL = 2000  # ms, divided by min(ENEMY_INTENSITY_CAP, intensity)
ENEMY_INTENSITY_CAP = 1.5
ENEMY_HEALTH = 100
ENEMY_BASE_SPEED = 1
ENEMY_SPEED_PER_WAVE = 0.15
ENEMY_MAX_SPEED_BONUS = 2
ENEMY_FIRE_CHANCE = 0.01
ENEMY_FIRE_CEILING = 5 / 6  # fraction of arena height where enemies may still fire
ENEMY_KILL_SCORE = 100

# Bonus settings
BONUS_SPAWN_INTERVAL = 8000  # ms
BONUS_SPEED = 2
BONUS_SPAWN_MARGIN = 30

# Boss settings
BOSS_PHASE_INTERVAL = 25000  # ms
BOSS_HEALTH = 1000
BOSS_SPEED = 3
BOSS_SPAWN_Y = 80
BOSS_PATROL_MARGIN = 60
BOSS_FIRE_RATE = 1200  # ms
BOSS_FIRE_RATE_PER_WAVE = 30  # ms shaved off per wave
BOSS_MIN_FIRE_RATE = 650  # ms
BOSS_CANNON_OFFSET_X = 20
BOSS_CANNON_OFFSET_Y = 40
BOSS_KILL_SCORE = 1000

# Damage and collision radii
BULLET_DAMAGE = 50
PROJECTILE_DAMAGE = 10
CONTACT_DAMAGE = 10
PLAYER_HIT_RADIUS = 25
SHIELD_CATCH_RADIUS = 35  # wider than PLAYER_HIT_RADIUS
PLAYER_CONTACT_RADIUS = 40
BULLET_ENEMY_RADIUS = 30
BULLET_BOSS_RADIUS = 50
BONUS_PICKUP_RADIUS = 35

# Hard caps to keep CPU and memory bounded
MAX_ENEMIES = 25
MAX_PROJECTILES = 200
MAX_BONUSES = 8

# Server settings
UPDATE_RATE = 60  # simulation ticks per second
WEBSOCKET_UPDATE_INTERVAL = 50  # ms between state pushes
OUTBOX_SIZE = 8  # pending outbound messages per session
PERF_LOG_INTERVAL = 10000  # ms

HOST = os.environ.get("INVADERS_HOST", "0.0.0.0")
PORT = int(os.environ.get("INVADERS_PORT", "9999"))
LOG_LEVEL = os.environ.get("INVADERS_LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class GameConfig:
    """Per-session tuning parameters. Defaults mirror the module constants."""

    width: float = GAME_WIDTH
    height: float = GAME_HEIGHT
    arena_margin: float = ARENA_MARGIN

    player_speed: float = PLAYER_SPEED
    player_max_health: int = PLAYER_MAX_HEALTH
    player_start_offset: float = PLAYER_START_OFFSET
    shoot_cooldown: float = SHOOT_COOLDOWN
    shield_duration: float = SHIELD_DURATION
    health_bonus_amount: int = HEALTH_BONUS_AMOUNT

    projectile_speed: float = PROJECTILE_SPEED
    enemy_projectile_speed: float = ENEMY_PROJECTILE_SPEED
    muzzle_offset: float = MUZZLE_OFFSET

    enemy_spawn_interval: float = ENEMY_SPAWN_INTERVAL
    enemy_intensity_cap: float = ENEMY_INTENSITY_CAP
    enemy_health: int = ENEMY_HEALTH
    enemy_base_speed: float = ENEMY_BASE_SPEED
    enemy_speed_per_wave: float = ENEMY_SPEED_PER_WAVE
    enemy_max_speed_bonus: float = ENEMY_MAX_SPEED_BONUS
    enemy_fire_chance: float = ENEMY_FIRE_CHANCE
    enemy_fire_ceiling: float = ENEMY_FIRE_CEILING
    enemy_kill_score: int = ENEMY_KILL_SCORE

    bonus_spawn_interval: float = BONUS_SPAWN_INTERVAL
    bonus_speed: float = BONUS_SPEED
    bonus_spawn_margin: float = BONUS_SPAWN_MARGIN

    boss_phase_interval: float = BOSS_PHASE_INTERVAL
    boss_health: int = BOSS_HEALTH
    boss_speed: float = BOSS_SPEED
    boss_spawn_y: float = BOSS_SPAWN_Y
    boss_patrol_margin: float = BOSS_PATROL_MARGIN
    boss_fire_rate: float = BOSS_FIRE_RATE
    boss_fire_rate_per_wave: float = BOSS_FIRE_RATE_PER_WAVE
    boss_min_fire_rate: float = BOSS_MIN_FIRE_RATE
    boss_cannon_offset_x: float = BOSS_CANNON_OFFSET_X
    boss_cannon_offset_y: float = BOSS_CANNON_OFFSET_Y
    boss_kill_score: int = BOSS_KILL_SCORE

    bullet_damage: int = BULLET_DAMAGE
    projectile_damage: int = PROJECTILE_DAMAGE
    contact_damage: int = CONTACT_DAMAGE
    player_hit_radius: float = PLAYER_HIT_RADIUS
    shield_catch_radius: float = SHIELD_CATCH_RADIUS
    player_contact_radius: float = PLAYER_CONTACT_RADIUS
    bullet_enemy_radius: float = BULLET_ENEMY_RADIUS
    bullet_boss_radius: float = BULLET_BOSS_RADIUS
    bonus_pickup_radius: float = BONUS_PICKUP_RADIUS

    max_enemies: int = MAX_ENEMIES
    max_projectiles: int = MAX_PROJECTILES
    max_bonuses: int = MAX_BONUSES

    score_multiplier: float = 1.0

    update_rate: float = UPDATE_RATE
    state_push_interval: float = WEBSOCKET_UPDATE_INTERVAL

    @property
    def tick_interval(self) -> float:
        """Simulation tick length in milliseconds."""
        return 1000 / self.update_rate

    def award(self, points: int) -> int:
        """Scale a score award by the mission multiplier."""
        return int(round(points * self.score_multiplier))


DEFAULT_CONFIG = GameConfig()


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def get_game_config(config: GameConfig = DEFAULT_CONFIG):
    """Get the complete game configuration as a dictionary."""
    return {_camel_case(f.name): getattr(config, f.name) for f in fields(config)}
