from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from nexus.application.services.balance_tables import (
    DAMAGE_VARIANCE_MAX,
    DAMAGE_VARIANCE_MIN,
    DEFEND_RESTORE,
    ENCOUNTER_DANGER_DIVISOR,
    ENEMY_DEFEND_RESTORE,
    ENEMY_FLEE_CHANCE,
    ENEMY_FLEE_SALVAGE_RATE,
    ENEMY_RECHARGE,
    FLEE_MAX_CHANCE,
    FLEE_SPEED_DIVISOR,
    HEAVY_ATTACK_ACCURACY_MULTIPLIER,
    HEAVY_ATTACK_DAMAGE_MULTIPLIER,
    REPAIR_ENERGY_COST,
    REPAIR_HULL_RESTORE,
    enemy_scaling,
    heavy_attack_cost,
    round_half_up,
)
from nexus.application.services.random_service import RandomService
from nexus.domain.models.combat import (
    CombatAction,
    CombatActor,
    CombatLogEntry,
    CombatResult,
    CombatState,
)
from nexus.domain.models.ship import AiBehaviour, EnemyShip, EnemyTemplate, Ship, ShipWeapon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackOutcome:
    hit: bool
    shield_damage: int
    hull_damage: int

    @property
    def total(self) -> int:
        return self.shield_damage + self.hull_damage


@dataclass
class CombatTurn:
    state: CombatState
    ship_updates: Dict[str, int] = field(default_factory=dict)


@dataclass
class _Vitals:
    """Working copy of the player ship's combat resources for one round."""

    hull: int
    max_hull: int
    shields: int
    max_shields: int
    energy: int
    max_energy: int

    @classmethod
    def of(cls, ship: Ship) -> "_Vitals":
        return cls(ship.hull, ship.max_hull, ship.shields, ship.max_shields, ship.energy, ship.max_energy)

    def updates_against(self, ship: Ship) -> Dict[str, int]:
        updates: Dict[str, int] = {}
        for key in ("hull", "shields", "energy"):
            value = getattr(self, key)
            if value != getattr(ship, key):
                updates[key] = value
        return updates


class CombatService:
    def __init__(self, rng: RandomService, templates: Sequence[EnemyTemplate]) -> None:
        if not templates:
            raise ValueError("CombatService requires at least one enemy template")
        self.rng = rng
        self.templates = list(templates)

    def should_encounter_enemy(self, danger_level: int) -> bool:
        return self.rng.random_chance(int(danger_level) / ENCOUNTER_DANGER_DIVISOR)

    def generate_enemy(self, danger_level: int, template_name: Optional[str] = None) -> EnemyShip:
        template: Optional[EnemyTemplate] = None
        if template_name:
            needle = template_name.strip().lower()
            template = next((row for row in self.templates if needle in row.name.lower()), None)
        if template is None:
            suitable = [row for row in self.templates if row.difficulty <= int(danger_level) + 2]
            template = self.rng.random_choice(suitable) if suitable else self.templates[0]

        scaling = enemy_scaling(danger_level)
        hull = round_half_up(template.max_hull * scaling)
        shields = round_half_up(template.max_shields * scaling)
        return EnemyShip(
            id=self.rng.uuid(),
            name=template.name,
            description=template.description,
            hull=hull,
            max_hull=hull,
            shields=shields,
            max_shields=shields,
            energy=template.max_energy,
            max_energy=template.max_energy,
            weapons=list(template.weapons),
            credits=round_half_up(template.credits * scaling),
            xp=round_half_up(template.xp * scaling),
            ai=template.ai,
            faction=template.faction,
        )

    def init_combat(self, enemy: EnemyShip) -> CombatState:
        intro = CombatLogEntry(
            round=0,
            actor=CombatActor.ENEMY,
            action="appear",
            message=f"{enemy.name} engages! {enemy.description}".strip(),
        )
        return CombatState(
            active=True,
            enemy=enemy,
            round=1,
            log=[intro],
            player_turn=True,
            result=CombatResult.PENDING,
        )

    def resolve_attack(self, weapon: ShipWeapon, target_shields: int, is_heavy: bool = False) -> AttackOutcome:
        accuracy = weapon.accuracy * (HEAVY_ATTACK_ACCURACY_MULTIPLIER if is_heavy else 1.0)
        if not self.rng.random_chance(accuracy):
            return AttackOutcome(hit=False, shield_damage=0, hull_damage=0)

        base = weapon.damage * (HEAVY_ATTACK_DAMAGE_MULTIPLIER if is_heavy else 1.0)
        damage = round_half_up(base * self.rng.random_float(DAMAGE_VARIANCE_MIN, DAMAGE_VARIANCE_MAX))
        shield_damage = min(max(0, int(target_shields)), damage)
        return AttackOutcome(hit=True, shield_damage=shield_damage, hull_damage=damage - shield_damage)

    def execute_player_action(self, state: CombatState, ship: Ship, action: CombatAction) -> CombatTurn:
        """Resolve one round. The ship is read, never written; see ``CombatTurn.ship_updates``."""
        if not state.active or state.enemy is None or state.is_terminal or not state.player_turn:
            return CombatTurn(state=state)

        action = CombatAction(action)
        enemy = replace(state.enemy, weapons=list(state.enemy.weapons))
        log = list(state.log)
        vitals = _Vitals.of(ship)
        round_no = state.round

        if action in (CombatAction.ATTACK, CombatAction.HEAVY_ATTACK):
            self._player_attack(enemy, vitals, ship, action == CombatAction.HEAVY_ATTACK, round_no, log)
        elif action == CombatAction.DEFEND:
            shield_gain = min(DEFEND_RESTORE, vitals.max_shields - vitals.shields)
            energy_gain = min(DEFEND_RESTORE, vitals.max_energy - vitals.energy)
            vitals.shields += max(0, shield_gain)
            vitals.energy += max(0, energy_gain)
            log.append(
                CombatLogEntry(
                    round_no,
                    CombatActor.PLAYER,
                    "defend",
                    f"Shields reinforced (+{max(0, shield_gain)}), energy recovered (+{max(0, energy_gain)}).",
                )
            )
        elif action == CombatAction.REPAIR:
            if vitals.energy >= REPAIR_ENERGY_COST:
                vitals.energy -= REPAIR_ENERGY_COST
                restored = max(0, min(REPAIR_HULL_RESTORE, vitals.max_hull - vitals.hull))
                vitals.hull += restored
                log.append(CombatLogEntry(round_no, CombatActor.PLAYER, "repair", f"Emergency repairs restore {restored} hull."))
            else:
                log.append(CombatLogEntry(round_no, CombatActor.PLAYER, "repair", "Not enough energy for repairs!"))
        elif action == CombatAction.FLEE:
            chance = min(FLEE_MAX_CHANCE, ship.speed / FLEE_SPEED_DIVISOR)
            if self.rng.random_chance(chance):
                log.append(CombatLogEntry(round_no, CombatActor.PLAYER, "flee", "You punch the engines and escape!"))
                fled = replace(state, enemy=enemy, log=log, active=False, player_turn=False, result=CombatResult.FLED)
                return CombatTurn(state=fled, ship_updates=vitals.updates_against(ship))
            log.append(CombatLogEntry(round_no, CombatActor.PLAYER, "flee", "Escape attempt failed!"))
        else:
            log.append(CombatLogEntry(round_no, CombatActor.PLAYER, "special", "No special system is installed."))

        if enemy.hull <= 0:
            log.append(CombatLogEntry(round_no, CombatActor.PLAYER, "victory", f"{enemy.name} is destroyed!"))
            won = replace(
                state,
                enemy=enemy,
                log=log,
                active=False,
                player_turn=False,
                result=CombatResult.VICTORY,
                reward_credits=enemy.credits,
                reward_xp=enemy.xp,
            )
            return CombatTurn(state=won, ship_updates=vitals.updates_against(ship))

        enemy_fled = self._enemy_turn(enemy, vitals, round_no, log)
        if enemy_fled:
            salvage = round_half_up(enemy.credits * ENEMY_FLEE_SALVAGE_RATE)
            retreated = replace(
                state,
                enemy=enemy,
                log=log,
                active=False,
                player_turn=False,
                result=CombatResult.VICTORY,
                reward_credits=salvage,
                reward_xp=enemy.xp,
                enemy_fled=True,
            )
            return CombatTurn(state=retreated, ship_updates=vitals.updates_against(ship))

        if vitals.hull <= 0:
            vitals.hull = 0
            log.append(CombatLogEntry(round_no, CombatActor.ENEMY, "defeat", "Your hull has been breached!"))
            lost = replace(state, enemy=enemy, log=log, active=False, player_turn=False, result=CombatResult.DEFEAT)
            return CombatTurn(state=lost, ship_updates=vitals.updates_against(ship))

        logger.debug("Combat round %s resolved against %s", round_no, enemy.name)
        ongoing = replace(state, enemy=enemy, log=log, round=round_no + 1, player_turn=True)
        return CombatTurn(state=ongoing, ship_updates=vitals.updates_against(ship))

    def _player_attack(
        self,
        enemy: EnemyShip,
        vitals: _Vitals,
        ship: Ship,
        is_heavy: bool,
        round_no: int,
        log: List[CombatLogEntry],
    ) -> None:
        action_name = "heavy_attack" if is_heavy else "attack"
        if not ship.weapons:
            log.append(CombatLogEntry(round_no, CombatActor.PLAYER, action_name, "No weapons are fitted!"))
            return
        weapon = ship.weapons[0]
        cost = heavy_attack_cost(weapon.energy_cost) if is_heavy else int(weapon.energy_cost)
        if vitals.energy < cost:
            log.append(CombatLogEntry(round_no, CombatActor.PLAYER, action_name, "Not enough energy to fire!"))
            return

        vitals.energy -= cost
        outcome = self.resolve_attack(weapon, enemy.shields, is_heavy=is_heavy)
        if not outcome.hit:
            log.append(CombatLogEntry(round_no, CombatActor.PLAYER, action_name, f"Your {weapon.name} misses!", damage=0))
            return
        enemy.shields = max(0, enemy.shields - outcome.shield_damage)
        enemy.hull = max(0, enemy.hull - outcome.hull_damage)
        label = "Heavy strike" if is_heavy else "Hit"
        log.append(
            CombatLogEntry(
                round_no,
                CombatActor.PLAYER,
                action_name,
                f"{label} with {weapon.name} for {outcome.total} damage.",
                damage=outcome.total,
            )
        )

    def choose_enemy_action(self, enemy: EnemyShip) -> CombatAction:
        hull_pct = enemy.hull_ratio
        ai = AiBehaviour(enemy.ai)

        if ai == AiBehaviour.AGGRESSIVE:
            if hull_pct < 0.15:
                return CombatAction.FLEE if self.rng.random_chance(0.5) else CombatAction.ATTACK
            return CombatAction.ATTACK if self.rng.random_chance(0.85) else CombatAction.DEFEND
        if ai == AiBehaviour.DEFENSIVE:
            if hull_pct < 0.3:
                return CombatAction.FLEE if self.rng.random_chance(0.4) else CombatAction.DEFEND
            return CombatAction.ATTACK if self.rng.random_chance(0.5) else CombatAction.DEFEND
        if ai == AiBehaviour.COWARDLY:
            if hull_pct < 0.5:
                return CombatAction.FLEE
            return CombatAction.ATTACK if self.rng.random_chance(0.6) else CombatAction.DEFEND

        if hull_pct < 0.2:
            return CombatAction.FLEE if self.rng.random_chance(0.3) else CombatAction.ATTACK
        if enemy.max_shields > 0 and enemy.shields < enemy.max_shields * 0.3:
            return CombatAction.DEFEND if self.rng.random_chance(0.6) else CombatAction.ATTACK
        return CombatAction.ATTACK if self.rng.random_chance(0.7) else CombatAction.DEFEND

    def _enemy_turn(self, enemy: EnemyShip, vitals: _Vitals, round_no: int, log: List[CombatLogEntry]) -> bool:
        """Apply the enemy reaction. Returns True when the enemy escapes."""
        action = self.choose_enemy_action(enemy)

        if action == CombatAction.FLEE:
            if self.rng.random_chance(ENEMY_FLEE_CHANCE):
                log.append(CombatLogEntry(round_no, CombatActor.ENEMY, "flee", f"{enemy.name} breaks off and flees! You salvage debris."))
                return True
            log.append(CombatLogEntry(round_no, CombatActor.ENEMY, "flee", f"{enemy.name} tries to flee but fails!"))
            return False

        if action == CombatAction.DEFEND:
            enemy.shields = min(enemy.max_shields, enemy.shields + ENEMY_DEFEND_RESTORE)
            enemy.energy = min(enemy.max_energy, enemy.energy + ENEMY_DEFEND_RESTORE)
            log.append(CombatLogEntry(round_no, CombatActor.ENEMY, "defend", f"{enemy.name} raises its shields."))
            return False

        weapon = self.rng.random_choice(enemy.weapons) if enemy.weapons else None
        if weapon is None or enemy.energy < weapon.energy_cost:
            enemy.energy = min(enemy.max_energy, enemy.energy + ENEMY_RECHARGE)
            log.append(CombatLogEntry(round_no, CombatActor.ENEMY, "recharge", f"{enemy.name} recharges its weapons."))
            return False

        enemy.energy -= weapon.energy_cost
        outcome = self.resolve_attack(weapon, vitals.shields)
        if not outcome.hit:
            log.append(CombatLogEntry(round_no, CombatActor.ENEMY, "attack", f"{enemy.name}'s {weapon.name} misses!", damage=0))
            return False
        vitals.shields = max(0, vitals.shields - outcome.shield_damage)
        vitals.hull = max(0, vitals.hull - outcome.hull_damage)
        log.append(
            CombatLogEntry(
                round_no,
                CombatActor.ENEMY,
                "attack",
                f"{enemy.name} hits with {weapon.name} for {outcome.total} damage.",
                damage=outcome.total,
            )
        )
        return False
