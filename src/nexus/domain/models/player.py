from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

from nexus.domain.models.market import CargoItem, TradeRecord
from nexus.domain.models.ship import Ship

FlagValue = Union[bool, str, int]

STARTING_SYSTEM_ID = "nexus_prime"
STARTING_CREDITS = 1000


@dataclass
class PlayerStats:
    systems_visited: int = 1
    trades_completed: int = 0
    combats_won: int = 0
    combats_lost: int = 0
    credits_earned: int = 0
    credits_spent: int = 0
    distance_traveled: int = 0
    quests_completed: int = 0


@dataclass
class Player:
    name: str
    ship: Ship
    credits: int = STARTING_CREDITS
    xp: int = 0
    level: int = 1
    cargo: List[CargoItem] = field(default_factory=list)
    current_system: str = STARTING_SYSTEM_ID
    visited_systems: List[str] = field(default_factory=lambda: [STARTING_SYSTEM_ID])
    reputation: Dict[str, int] = field(default_factory=dict)
    flags: Dict[str, FlagValue] = field(default_factory=dict)
    stats: PlayerStats = field(default_factory=PlayerStats)
    trade_history: List[TradeRecord] = field(default_factory=list)

    def cargo_quantity(self, commodity_id: str) -> int:
        for item in self.cargo:
            if item.commodity_id == commodity_id:
                return int(item.quantity)
        return 0
