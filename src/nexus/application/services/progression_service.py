from __future__ import annotations

from typing import Callable, List, Mapping, Optional

from nexus.application.services.balance_tables import (
    REFUEL_COST_PER_UNIT,
    REPAIR_COST_PER_HULL,
    round_half_up,
    xp_required_for_level,
)
from nexus.domain.events import LevelUpEvent, ReputationChangedEvent
from nexus.domain.models.faction import clamp_reputation
from nexus.domain.models.market import CargoItem, TradeRecord
from nexus.domain.models.player import FlagValue, Player
from nexus.domain.models.ship import SHIP_MUTABLE_FIELDS, ShipUpgrade

_CURRENT_TRACKS_MAX = {
    "max_shields": "shields",
    "max_hull": "hull",
    "max_energy": "energy",
}
_PLAIN_UPGRADE_STATS = {"speed", "cargo_capacity", "max_fuel"}


class ProgressionService:
    """Owns every mutation of the player record."""

    def __init__(self, player: Player, event_publisher: Optional[Callable[[object], None]] = None) -> None:
        self.player = player
        self._event_publisher = event_publisher

    def _publish(self, event: object) -> None:
        if self._event_publisher is not None:
            self._event_publisher(event)

    def add_credits(self, amount: int) -> int:
        amount = int(amount)
        self.player.credits += amount
        if amount > 0:
            self.player.stats.credits_earned += amount
        elif amount < 0:
            self.player.stats.credits_spent += abs(amount)
        return self.player.credits

    def add_xp(self, amount: int) -> int:
        """Add xp and level up as many times as it covers. Returns levels gained."""
        player = self.player
        player.xp += max(0, int(amount))
        gained = 0
        while player.xp >= xp_required_for_level(player.level):
            player.xp -= xp_required_for_level(player.level)
            player.level += 1
            gained += 1
            self._publish(LevelUpEvent(from_level=player.level - 1, to_level=player.level, xp=player.xp))
        return gained

    def add_reputation(self, faction_id: str, delta: int) -> int:
        before = int(self.player.reputation.get(faction_id, 0))
        after = clamp_reputation(before + int(delta))
        self.player.reputation[faction_id] = after
        if after != before:
            self._publish(ReputationChangedEvent(faction_id=faction_id, delta=after - before, score_after=after))
        return after

    def reputation(self, faction_id: str) -> int:
        return int(self.player.reputation.get(faction_id, 0))

    def set_flag(self, key: str, value: FlagValue = True) -> None:
        self.player.flags[str(key)] = value

    def get_flag(self, key: str) -> Optional[FlagValue]:
        return self.player.flags.get(str(key))

    def has_flag(self, key: str) -> bool:
        return bool(self.player.flags.get(str(key)))

    def update_ship(self, updates: Mapping[str, int]) -> None:
        unknown = set(updates) - SHIP_MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown ship fields: {sorted(unknown)}")
        for key, value in updates.items():
            setattr(self.player.ship, key, int(value))

    def cargo_used(self) -> int:
        return sum(int(item.quantity) for item in self.player.cargo)

    def cargo_space(self) -> int:
        return int(self.player.ship.cargo_capacity) - self.cargo_used()

    def update_cargo(self, cargo: List[CargoItem]) -> None:
        self.player.cargo = [item for item in cargo if int(item.quantity) > 0]

    def add_trade_record(self, record: TradeRecord) -> None:
        self.player.trade_history.append(record)
        self.player.stats.trades_completed += 1

    def set_current_system(self, system_id: str) -> bool:
        """Move the player. Returns True on a first visit."""
        self.player.current_system = system_id
        if system_id in self.player.visited_systems:
            return False
        self.player.visited_systems.append(system_id)
        self.player.stats.systems_visited += 1
        return True

    def add_distance(self, distance: float) -> None:
        self.player.stats.distance_traveled += round_half_up(distance)

    def record_combat_win(self) -> None:
        self.player.stats.combats_won += 1

    def record_combat_loss(self) -> None:
        self.player.stats.combats_lost += 1

    def record_quest_complete(self) -> None:
        self.player.stats.quests_completed += 1

    def install_upgrade(self, upgrade: ShipUpgrade) -> bool:
        ship = self.player.ship
        if self.player.credits < upgrade.cost or upgrade.id in ship.upgrades:
            return False
        stat = upgrade.effect.stat
        if stat not in _CURRENT_TRACKS_MAX and stat not in _PLAIN_UPGRADE_STATS:
            raise ValueError(f"Unsupported upgrade stat: {stat}")

        self.add_credits(-upgrade.cost)
        ship.upgrades.append(upgrade.id)
        value = int(upgrade.effect.value)
        setattr(ship, stat, getattr(ship, stat) + value)
        current = _CURRENT_TRACKS_MAX.get(stat)
        if current is not None:
            setattr(ship, current, getattr(ship, current) + value)
        return True

    def refuel_cost(self) -> int:
        ship = self.player.ship
        return round_half_up(max(0, ship.max_fuel - ship.fuel) * REFUEL_COST_PER_UNIT)

    def refuel(self) -> bool:
        ship = self.player.ship
        cost = self.refuel_cost()
        if ship.fuel >= ship.max_fuel or self.player.credits < cost:
            return False
        self.add_credits(-cost)
        ship.fuel = ship.max_fuel
        return True

    def repair_cost(self) -> int:
        ship = self.player.ship
        return round_half_up(max(0, ship.max_hull - ship.hull) * REPAIR_COST_PER_HULL)

    def repair(self) -> bool:
        ship = self.player.ship
        cost = self.repair_cost()
        if ship.hull >= ship.max_hull or self.player.credits < cost:
            return False
        self.add_credits(-cost)
        ship.hull = ship.max_hull
        ship.shields = ship.max_shields
        return True
