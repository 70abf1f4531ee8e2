# invaders_server/services/collision_resolver.py
"""Distance-threshold collision passes and their effects."""

import random

from invaders_server.config.settings import GameConfig
from invaders_server.models.entities import Boss, GameState, Projectile
from invaders_server.utils.helpers import IdGenerator, is_in_arena, is_within


class CollisionResolver:
    """Resolves all entity interactions for one tick.

    Passes are independent methods but must run in the order the stepper
    calls them: boss hits, bonus pickup, projectiles, enemies, bullet hits.
    """

    def __init__(self, config: GameConfig, rng: random.Random, ids: IdGenerator):
        self.config = config
        self.rng = rng
        self.ids = ids

    def damage_player(self, state: GameState, amount: float):
        """Apply damage, clamping at zero and flagging game over."""
        player = state.player
        player.health = max(0, player.health - amount)
        if player.health <= 0:
            state.gameOver = True

    def resolve_boss_hits(self, state: GameState, boss: Boss) -> bool:
        """Apply player bullets to the boss.

        Returns True as soon as the boss is destroyed; remaining bullets are
        left untouched so nothing acts on a dead boss.
        """
        cfg = self.config
        for proj in reversed(state.projectiles.snapshot()):
            if proj.isEnemy or not is_within(proj, boss, cfg.bullet_boss_radius):
                continue
            boss.health -= cfg.bullet_damage
            state.projectiles.remove(proj)
            if boss.health <= 0:
                return True
        return False

    def resolve_bonuses(self, state: GameState, now: float):
        """Move bonuses down and let the player pick them up."""
        cfg = self.config
        player = state.player

        def keep(bonus) -> bool:
            bonus.y += bonus.speed
            if is_within(bonus, player, cfg.bonus_pickup_radius):
                if bonus.type == "shield":
                    player.shieldActive = True
                    player.shieldEndTime = now + cfg.shield_duration
                elif bonus.type == "health":
                    player.health = min(
                        cfg.player_max_health, player.health + cfg.health_bonus_amount
                    )
                return False
            return bonus.y < cfg.height + cfg.arena_margin

        state.bonuses.retain(keep)

    def resolve_projectiles(self, state: GameState):
        """Advance projectiles and apply enemy fire to the player."""
        cfg = self.config
        player = state.player

        def keep(proj: Projectile) -> bool:
            proj.x += proj.velocityX
            proj.y += proj.velocityY
            if proj.isEnemy:
                if player.shieldActive:
                    if is_within(proj, player, cfg.shield_catch_radius):
                        return False
                elif is_within(proj, player, cfg.player_hit_radius):
                    self.damage_player(state, cfg.projectile_damage)
                    return False
            return is_in_arena(proj.x, proj.y, cfg.width, cfg.height, cfg.arena_margin)

        state.projectiles.retain(keep)

    def resolve_enemies(self, state: GameState):
        """Advance enemies, roll their fire chance and apply ramming damage."""
        cfg = self.config
        player = state.player
        fire_ceiling = cfg.height * cfg.enemy_fire_ceiling

        def keep(enemy) -> bool:
            enemy.y += enemy.speed
            if 0 < enemy.y < fire_ceiling and self.rng.random() < cfg.enemy_fire_chance:
                state.projectiles.append(
                    Projectile(
                        id=self.ids.next_id(),
                        x=enemy.x,
                        y=enemy.y + cfg.muzzle_offset,
                        velocityX=0,
                        velocityY=cfg.enemy_projectile_speed,
                        isEnemy=True,
                    )
                )
            if is_within(enemy, player, cfg.player_contact_radius):
                if not player.shieldActive:
                    self.damage_player(state, cfg.contact_damage)
                return False
            return enemy.y < cfg.height + cfg.arena_margin

        state.enemies.retain(keep)

    def resolve_bullet_hits(self, state: GameState):
        """Let each player bullet damage at most one enemy."""
        cfg = self.config
        for proj in reversed(state.projectiles.snapshot()):
            if proj.isEnemy:
                continue
            for enemy in reversed(state.enemies.snapshot()):
                if not is_within(proj, enemy, cfg.bullet_enemy_radius):
                    continue
                enemy.health -= cfg.bullet_damage
                state.projectiles.remove(proj)
                if enemy.health <= 0:
                    state.score += cfg.award(cfg.enemy_kill_score)
                    state.enemies.remove(enemy)
                break
