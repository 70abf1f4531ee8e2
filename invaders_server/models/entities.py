# invaders_server/models/entities.py
"""Game entity models and data classes."""

from dataclasses import dataclass, asdict
from typing import Optional

from invaders_server.config.settings import GameConfig, DEFAULT_CONFIG
from .entity_list import EntityList


@dataclass
class Player:
    """Represents the player ship."""

    x: float
    y: float
    health: float
    shieldActive: bool = False
    shieldEndTime: Optional[float] = None


@dataclass
class Enemy:
    """Represents a descending enemy ship."""

    id: int
    x: float
    y: float
    health: float
    speed: float


@dataclass
class Projectile:
    """Represents a shot fired by the player, an enemy or the boss."""

    id: int
    x: float
    y: float
    velocityX: float
    velocityY: float
    isEnemy: bool


@dataclass
class Bonus:
    """Represents a falling power-up."""

    id: int
    x: float
    y: float
    type: str  # "shield" | "health"
    speed: float


@dataclass
class Boss:
    """Represents the boss that patrols the top of the arena."""

    id: int
    x: float
    y: float
    health: float
    maxHealth: float
    direction: int  # 1 = right, -1 = left
    speed: float


@dataclass(frozen=True)
class PlayerInput:
    """Latest known control state. Replaced whole, never merged."""

    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    shoot: bool = False


@dataclass
class GameState:
    """Aggregate root holding every entity of one session."""

    player: Player
    enemies: EntityList[Enemy]
    projectiles: EntityList[Projectile]
    bonuses: EntityList[Bonus]
    boss: Optional[Boss] = None
    bossPhase: bool = False
    score: int = 0
    wave: int = 1
    gameOver: bool = False
    intensity: float = 1

    @classmethod
    def new(cls, config: GameConfig = DEFAULT_CONFIG) -> "GameState":
        """Create a fresh state with the player at the bottom center."""
        return cls(
            player=Player(
                x=config.width / 2,
                y=config.height - config.player_start_offset,
                health=config.player_max_health,
            ),
            enemies=EntityList(config.max_enemies),
            projectiles=EntityList(config.max_projectiles),
            bonuses=EntityList(config.max_bonuses),
        )

    def to_dict(self) -> dict:
        """Serialize to the snapshot shape sent to clients."""
        return {
            "player": asdict(self.player),
            "enemies": [asdict(enemy) for enemy in self.enemies],
            "projectiles": [asdict(proj) for proj in self.projectiles],
            "bonuses": [asdict(bonus) for bonus in self.bonuses],
            "boss": asdict(self.boss) if self.boss is not None else None,
            "bossPhase": self.bossPhase,
            "score": self.score,
            "wave": self.wave,
            "gameOver": self.gameOver,
            "intensity": self.intensity,
        }

    @classmethod
    def from_dict(cls, data: dict, config: GameConfig = DEFAULT_CONFIG) -> "GameState":
        """Rebuild a state from a snapshot produced by to_dict()."""
        boss = data.get("boss")
        return cls(
            player=Player(**data["player"]),
            enemies=EntityList(
                config.max_enemies, (Enemy(**e) for e in data["enemies"])
            ),
            projectiles=EntityList(
                config.max_projectiles, (Projectile(**p) for p in data["projectiles"])
            ),
            bonuses=EntityList(
                config.max_bonuses, (Bonus(**b) for b in data["bonuses"])
            ),
            boss=Boss(**boss) if boss is not None else None,
            bossPhase=data["bossPhase"],
            score=data["score"],
            wave=data["wave"],
            gameOver=data["gameOver"],
            intensity=data["intensity"],
        )
