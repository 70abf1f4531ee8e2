# invaders_server/config/missions.py
"""Mission profiles selectable by the client at connect time."""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from .settings import GameConfig, DEFAULT_CONFIG


@dataclass(frozen=True)
class Mission:
    """A named difficulty profile layered over the default game config."""

    id: str
    name: str
    description: str
    containerCount: int
    difficulty: str  # "normal" | "hard"
    enemySpawnRate: int  # frames between enemy spawns
    duration: int  # seconds
    scoreMultiplier: float
    objectives: List[str] = field(default_factory=list)
    maxEnemies: Optional[int] = None
    maxProjectiles: Optional[int] = None
    maxBonuses: Optional[int] = None

    def apply(self, config: GameConfig = DEFAULT_CONFIG) -> GameConfig:
        """Return a copy of config tuned for this mission."""
        overrides = {
            "enemy_spawn_interval": self.enemySpawnRate * config.tick_interval,
            "score_multiplier": self.scoreMultiplier,
        }
        if self.maxEnemies is not None:
            overrides["max_enemies"] = self.maxEnemies
        if self.maxProjectiles is not None:
            overrides["max_projectiles"] = self.maxProjectiles
        if self.maxBonuses is not None:
            overrides["max_bonuses"] = self.maxBonuses
        return replace(config, **overrides)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "containerCount": self.containerCount,
            "difficulty": self.difficulty,
            "objectives": list(self.objectives),
            "enemySpawnRate": self.enemySpawnRate,
            "duration": self.duration,
            "scoreMultiplier": self.scoreMultiplier,
        }


MISSIONS: List[Mission] = [
    Mission(
        id="single-container",
        name="RECONNAISSANCE",
        description="Single-node deployment mission. Perfect for testing basic container orchestration.",
        containerCount=1,
        difficulty="normal",
        objectives=[
            "Survive 1 minute",
            "Destroy 25 enemies",
            "Maintain hull integrity above 50%",
        ],
        enemySpawnRate=60,
        duration=60,
        scoreMultiplier=1.0,
    ),
    Mission(
        id="multi-container",
        name="ASSAULT PROTOCOL",
        description="Triple-node distributed deployment. Demonstrates advanced horizontal scaling and load balancing.",
        containerCount=3,
        difficulty="hard",
        objectives=[
            "Survive 1 minute of intense combat",
            "Destroy 50 enemies",
            "Handle high-frequency enemy waves",
            "Test distributed processing limits",
        ],
        enemySpawnRate=25,
        duration=60,
        scoreMultiplier=3.0,
        maxEnemies=50,
        maxProjectiles=350,
        maxBonuses=12,
    ),
]

_MISSIONS_BY_ID: Dict[str, Mission] = {mission.id: mission for mission in MISSIONS}


def get_mission_by_id(mission_id: Optional[str]) -> Optional[Mission]:
    """Look up a mission, returning None for unknown or missing ids."""
    if not mission_id:
        return None
    return _MISSIONS_BY_ID.get(mission_id)
