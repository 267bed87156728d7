from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from nexus.application.services.balance_tables import SAVE_FORMAT_VERSION
from nexus.domain.models.combat import CombatActor, CombatLogEntry, CombatResult, CombatState
from nexus.domain.models.galaxy import Coordinates, Planet, PlanetType, StarSystem, StarType
from nexus.domain.models.market import CargoItem, MarketData, MarketListing, TradeKind, TradeRecord, Trend
from nexus.domain.models.player import Player, PlayerStats
from nexus.domain.models.ship import AiBehaviour, EnemyShip, Ship, ShipClass, ShipWeapon, WeaponType
from nexus.domain.models.story import Quest, QuestStatus


class SnapshotVersionError(ValueError):
    """Raised when a save was written by an unsupported format version."""


@dataclass
class RestoredGame:
    player: Player
    systems: Dict[str, StarSystem]
    markets: Dict[str, MarketData]
    current_chapter: int
    quests: Dict[str, Quest]
    flags: Dict[str, Any]
    completed_events: List[str]
    combat: CombatState
    tick: int
    timestamp: int = 0
    skipped_quests: List[str] = field(default_factory=list)


def _weapon_to_dict(weapon: ShipWeapon) -> Dict[str, Any]:
    return {
        "name": weapon.name,
        "damage": weapon.damage,
        "energy_cost": weapon.energy_cost,
        "accuracy": weapon.accuracy,
        "type": weapon.type.value,
    }


def _weapon_from_dict(row: Mapping[str, Any]) -> ShipWeapon:
    return ShipWeapon(
        name=str(row["name"]),
        damage=int(row["damage"]),
        energy_cost=int(row["energy_cost"]),
        accuracy=float(row["accuracy"]),
        type=WeaponType(row.get("type", WeaponType.ENERGY.value)),
    )


def _ship_to_dict(ship: Ship) -> Dict[str, Any]:
    return {
        "name": ship.name,
        "ship_class": ship.ship_class.value,
        "hull": ship.hull,
        "max_hull": ship.max_hull,
        "shields": ship.shields,
        "max_shields": ship.max_shields,
        "energy": ship.energy,
        "max_energy": ship.max_energy,
        "fuel": ship.fuel,
        "max_fuel": ship.max_fuel,
        "cargo_capacity": ship.cargo_capacity,
        "speed": ship.speed,
        "weapons": [_weapon_to_dict(weapon) for weapon in ship.weapons],
        "upgrades": list(ship.upgrades),
    }


def _ship_from_dict(row: Mapping[str, Any]) -> Ship:
    return Ship(
        name=str(row["name"]),
        ship_class=ShipClass(row["ship_class"]),
        hull=int(row["hull"]),
        max_hull=int(row["max_hull"]),
        shields=int(row["shields"]),
        max_shields=int(row["max_shields"]),
        energy=int(row["energy"]),
        max_energy=int(row["max_energy"]),
        fuel=int(row["fuel"]),
        max_fuel=int(row["max_fuel"]),
        cargo_capacity=int(row["cargo_capacity"]),
        speed=int(row["speed"]),
        weapons=[_weapon_from_dict(weapon) for weapon in row.get("weapons", [])],
        upgrades=[str(upgrade_id) for upgrade_id in row.get("upgrades", [])],
    )


def player_to_dict(player: Player) -> Dict[str, Any]:
    stats = player.stats
    return {
        "name": player.name,
        "credits": player.credits,
        "xp": player.xp,
        "level": player.level,
        "ship": _ship_to_dict(player.ship),
        "cargo": [{"commodity_id": item.commodity_id, "quantity": item.quantity} for item in player.cargo],
        "current_system": player.current_system,
        "visited_systems": list(player.visited_systems),
        "reputation": dict(player.reputation),
        "flags": dict(player.flags),
        "stats": {
            "systems_visited": stats.systems_visited,
            "trades_completed": stats.trades_completed,
            "combats_won": stats.combats_won,
            "combats_lost": stats.combats_lost,
            "credits_earned": stats.credits_earned,
            "credits_spent": stats.credits_spent,
            "distance_traveled": stats.distance_traveled,
            "quests_completed": stats.quests_completed,
        },
        "trade_history": [
            {
                "commodity_id": record.commodity_id,
                "quantity": record.quantity,
                "price_per_unit": record.price_per_unit,
                "system_id": record.system_id,
                "kind": record.kind.value,
                "tick": record.tick,
            }
            for record in player.trade_history
        ],
    }


def player_from_dict(row: Mapping[str, Any]) -> Player:
    stats_row = row.get("stats", {})
    return Player(
        name=str(row["name"]),
        ship=_ship_from_dict(row["ship"]),
        credits=int(row["credits"]),
        xp=int(row["xp"]),
        level=int(row["level"]),
        cargo=[CargoItem(str(item["commodity_id"]), int(item["quantity"])) for item in row.get("cargo", [])],
        current_system=str(row["current_system"]),
        visited_systems=[str(system_id) for system_id in row.get("visited_systems", [])],
        reputation={str(key): int(value) for key, value in row.get("reputation", {}).items()},
        flags=dict(row.get("flags", {})),
        stats=PlayerStats(**{key: int(value) for key, value in stats_row.items() if key in PlayerStats.__dataclass_fields__}),
        trade_history=[
            TradeRecord(
                commodity_id=str(record["commodity_id"]),
                quantity=int(record["quantity"]),
                price_per_unit=int(record["price_per_unit"]),
                system_id=str(record["system_id"]),
                kind=TradeKind(record["kind"]),
                tick=int(record["tick"]),
            )
            for record in row.get("trade_history", [])
        ],
    )


def _system_to_dict(system: StarSystem) -> Dict[str, Any]:
    return {
        "id": system.id,
        "name": system.name,
        "star_type": system.star_type.value,
        "coordinates": {"x": system.coordinates.x, "y": system.coordinates.y},
        "danger_level": system.danger_level,
        "tech_level": system.tech_level,
        "connections": list(system.connections),
        "faction": system.faction,
        "planets": [
            {
                "id": planet.id,
                "name": planet.name,
                "type": planet.type.value,
                "description": planet.description,
                "population": planet.population,
                "has_station": planet.has_station,
            }
            for planet in system.planets
        ],
        "description": system.description,
        "discovered": system.discovered,
        "has_trade_post": system.has_trade_post,
        "has_shipyard": system.has_shipyard,
        "lore": system.lore,
    }


def _system_from_dict(row: Mapping[str, Any]) -> StarSystem:
    coordinates = row.get("coordinates", {})
    return StarSystem(
        id=str(row["id"]),
        name=str(row["name"]),
        star_type=StarType(row["star_type"]),
        coordinates=Coordinates(float(coordinates.get("x", 0)), float(coordinates.get("y", 0))),
        danger_level=int(row["danger_level"]),
        tech_level=int(row["tech_level"]),
        connections=[str(system_id) for system_id in row.get("connections", [])],
        faction=row.get("faction"),
        planets=[
            Planet(
                id=str(planet["id"]),
                name=str(planet["name"]),
                type=PlanetType(planet["type"]),
                description=str(planet.get("description", "")),
                population=int(planet.get("population", 0)),
                has_station=bool(planet.get("has_station", False)),
            )
            for planet in row.get("planets", [])
        ],
        description=str(row.get("description", "")),
        discovered=bool(row.get("discovered", False)),
        has_trade_post=bool(row.get("has_trade_post", False)),
        has_shipyard=bool(row.get("has_shipyard", False)),
        lore=str(row.get("lore", "")),
    )


def _market_to_dict(market: MarketData) -> Dict[str, Any]:
    return {
        "system_id": market.system_id,
        "last_updated": market.last_updated,
        "listings": [
            {
                "commodity_id": listing.commodity_id,
                "price": listing.price,
                "supply": listing.supply,
                "demand": listing.demand,
                "trend": listing.trend.value,
            }
            for listing in market.listings
        ],
    }


def _market_from_dict(row: Mapping[str, Any]) -> MarketData:
    return MarketData(
        system_id=str(row["system_id"]),
        last_updated=int(row.get("last_updated", 0)),
        listings=[
            MarketListing(
                commodity_id=str(listing["commodity_id"]),
                price=max(1, int(listing["price"])),
                supply=max(0, int(listing["supply"])),
                demand=max(0, int(listing["demand"])),
                trend=Trend(listing.get("trend", Trend.STABLE.value)),
            )
            for listing in row.get("listings", [])
        ],
    )


def _quest_state_to_dict(quest: Quest) -> Dict[str, Any]:
    return {
        "id": quest.id,
        "status": quest.status.value,
        "objectives": [
            {"id": objective.id, "current": objective.current, "completed": objective.completed}
            for objective in quest.objectives
        ],
    }


def _enemy_to_dict(enemy: EnemyShip) -> Dict[str, Any]:
    return {
        "id": enemy.id,
        "name": enemy.name,
        "description": enemy.description,
        "hull": enemy.hull,
        "max_hull": enemy.max_hull,
        "shields": enemy.shields,
        "max_shields": enemy.max_shields,
        "energy": enemy.energy,
        "max_energy": enemy.max_energy,
        "weapons": [_weapon_to_dict(weapon) for weapon in enemy.weapons],
        "credits": enemy.credits,
        "xp": enemy.xp,
        "ai": enemy.ai.value,
        "faction": enemy.faction,
    }


def _enemy_from_dict(row: Mapping[str, Any]) -> EnemyShip:
    return EnemyShip(
        id=str(row["id"]),
        name=str(row["name"]),
        description=str(row.get("description", "")),
        hull=int(row["hull"]),
        max_hull=int(row["max_hull"]),
        shields=int(row["shields"]),
        max_shields=int(row["max_shields"]),
        energy=int(row["energy"]),
        max_energy=int(row["max_energy"]),
        weapons=[_weapon_from_dict(weapon) for weapon in row.get("weapons", [])],
        credits=int(row["credits"]),
        xp=int(row["xp"]),
        ai=AiBehaviour(row.get("ai", AiBehaviour.BALANCED.value)),
        faction=row.get("faction"),
    )


def combat_to_dict(state: CombatState) -> Dict[str, Any]:
    return {
        "active": state.active,
        "enemy": _enemy_to_dict(state.enemy) if state.enemy is not None else None,
        "round": state.round,
        "player_turn": state.player_turn,
        "result": state.result.value,
        "reward_credits": state.reward_credits,
        "reward_xp": state.reward_xp,
        "enemy_fled": state.enemy_fled,
        "log": [
            {
                "round": entry.round,
                "actor": entry.actor.value,
                "action": entry.action,
                "message": entry.message,
                "damage": entry.damage,
            }
            for entry in state.log
        ],
    }


def combat_from_dict(row: Optional[Mapping[str, Any]]) -> CombatState:
    if not row:
        return CombatState()
    enemy_row = row.get("enemy")
    return CombatState(
        active=bool(row.get("active", False)),
        enemy=_enemy_from_dict(enemy_row) if enemy_row else None,
        round=int(row.get("round", 0)),
        player_turn=bool(row.get("player_turn", False)),
        result=CombatResult(row.get("result", CombatResult.PENDING.value)),
        reward_credits=int(row.get("reward_credits", 0)),
        reward_xp=int(row.get("reward_xp", 0)),
        enemy_fled=bool(row.get("enemy_fled", False)),
        log=[
            CombatLogEntry(
                round=int(entry["round"]),
                actor=CombatActor(entry["actor"]),
                action=str(entry["action"]),
                message=str(entry["message"]),
                damage=entry.get("damage"),
            )
            for entry in row.get("log", [])
        ],
    )


def to_snapshot(
    *,
    player: Player,
    systems: Mapping[str, StarSystem],
    markets: Mapping[str, MarketData],
    current_chapter: int,
    quests: Mapping[str, Quest],
    flags: Mapping[str, Any],
    completed_events: List[str],
    combat: CombatState,
    tick: int,
    timestamp: int,
) -> Dict[str, Any]:
    return {
        "version": SAVE_FORMAT_VERSION,
        "timestamp": int(timestamp),
        "player": player_to_dict(player),
        "galaxy": {
            "systems": [_system_to_dict(system) for system in systems.values()],
            "markets": [_market_to_dict(market) for market in markets.values()],
        },
        "story": {
            "current_chapter": int(current_chapter),
            "quests": [_quest_state_to_dict(quest) for quest in quests.values()],
            "flags": dict(flags),
            "completed_events": list(completed_events),
        },
        "combat": combat_to_dict(combat),
        "tick": int(tick),
    }


def _section(snapshot: Mapping[str, Any], key: str, *, required: bool = False) -> Mapping[str, Any]:
    if key not in snapshot and not required:
        return {}
    value = snapshot.get(key)
    if not isinstance(value, Mapping):
        raise ValueError(f"Snapshot section {key!r} must be an object, got {type(value).__name__}")
    return value


def from_snapshot(snapshot: Mapping[str, Any], quest_templates: Mapping[str, Quest]) -> RestoredGame:
    """Rebuild game state from a snapshot; quest definitions come from content, progress from the save."""
    if not isinstance(snapshot, Mapping):
        raise ValueError("Snapshot must be a JSON object")
    version = int(snapshot.get("version", 0) or 0)
    if version != SAVE_FORMAT_VERSION:
        raise SnapshotVersionError(f"Save format version {version} is not supported (expected {SAVE_FORMAT_VERSION})")

    galaxy = _section(snapshot, "galaxy")
    story = _section(snapshot, "story")
    player = _section(snapshot, "player", required=True)

    quests: Dict[str, Quest] = {quest_id: copy.deepcopy(quest) for quest_id, quest in quest_templates.items()}
    skipped: List[str] = []
    for row in story.get("quests", []):
        quest = quests.get(str(row.get("id")))
        if quest is None:
            skipped.append(str(row.get("id")))
            continue
        quest.status = QuestStatus(row.get("status", quest.status.value))
        progress = {str(item["id"]): item for item in row.get("objectives", [])}
        for objective in quest.objectives:
            saved = progress.get(objective.id)
            if saved is None:
                continue
            objective.current = min(objective.required, max(0, int(saved.get("current", 0))))
            objective.completed = bool(saved.get("completed", False)) or objective.current >= objective.required

    systems = {system.id: system for system in (_system_from_dict(row) for row in galaxy.get("systems", []))}
    markets = {market.system_id: market for market in (_market_from_dict(row) for row in galaxy.get("markets", []))}

    return RestoredGame(
        player=player_from_dict(player),
        systems=systems,
        markets=markets,
        current_chapter=int(story.get("current_chapter", 1)),
        quests=quests,
        flags=dict(story.get("flags", {})),
        completed_events=[str(event_id) for event_id in story.get("completed_events", [])],
        combat=combat_from_dict(snapshot.get("combat")),
        tick=int(snapshot.get("tick", 0)),
        timestamp=int(snapshot.get("timestamp", 0) or 0),
        skipped_quests=skipped,
    )
