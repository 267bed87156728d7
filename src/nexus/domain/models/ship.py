from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ShipClass(str, Enum):
    SCOUT = "scout"
    TRADER = "trader"
    FIGHTER = "fighter"
    EXPLORER = "explorer"
    CRUISER = "cruiser"
    DREADNOUGHT = "dreadnought"


class WeaponType(str, Enum):
    KINETIC = "kinetic"
    ENERGY = "energy"
    MISSILE = "missile"


class UpgradeSlot(str, Enum):
    WEAPON = "weapon"
    SHIELD = "shield"
    ENGINE = "engine"
    CARGO = "cargo"
    SPECIAL = "special"


class AiBehaviour(str, Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    COWARDLY = "cowardly"


@dataclass(frozen=True)
class ShipWeapon:
    name: str
    damage: int
    energy_cost: int
    accuracy: float
    type: WeaponType = WeaponType.ENERGY


@dataclass
class Ship:
    name: str
    ship_class: ShipClass
    hull: int
    max_hull: int
    shields: int
    max_shields: int
    energy: int
    max_energy: int
    fuel: int
    max_fuel: int
    cargo_capacity: int
    speed: int
    weapons: List[ShipWeapon] = field(default_factory=list)
    upgrades: List[str] = field(default_factory=list)


# Fields a partial ship update may touch.
SHIP_MUTABLE_FIELDS = frozenset(
    {
        "hull",
        "max_hull",
        "shields",
        "max_shields",
        "energy",
        "max_energy",
        "fuel",
        "max_fuel",
        "cargo_capacity",
        "speed",
    }
)


@dataclass(frozen=True)
class UpgradeEffect:
    stat: str
    value: int


@dataclass(frozen=True)
class ShipUpgrade:
    id: str
    name: str
    slot: UpgradeSlot
    cost: int
    effect: UpgradeEffect
    required_tech: int = 1
    description: str = ""


@dataclass(frozen=True)
class EnemyTemplate:
    name: str
    description: str
    max_hull: int
    max_shields: int
    max_energy: int
    weapons: tuple[ShipWeapon, ...]
    credits: int
    xp: int
    ai: AiBehaviour
    faction: Optional[str] = None

    @property
    def difficulty(self) -> float:
        return (self.max_hull + self.max_shields) / 50


@dataclass
class EnemyShip:
    id: str
    name: str
    hull: int
    max_hull: int
    shields: int
    max_shields: int
    energy: int
    max_energy: int
    weapons: List[ShipWeapon]
    credits: int
    xp: int
    ai: AiBehaviour
    faction: Optional[str] = None
    description: str = ""

    @property
    def hull_ratio(self) -> float:
        if self.max_hull <= 0:
            return 0.0
        return self.hull / self.max_hull
