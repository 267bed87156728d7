from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ActionResult:
    messages: List[str] = field(default_factory=list)
    ok: bool = True


@dataclass(frozen=True)
class TravelPlan:
    origin_id: str
    target_id: str
    fuel_cost: int
    distance: float


@dataclass
class TravelOutcome:
    kind: str
    system_id: str
    tick: int
    event_id: Optional[str] = None
    enemy_name: Optional[str] = None
    messages: List[str] = field(default_factory=list)


@dataclass
class ShipView:
    name: str
    ship_class: str
    hull: int
    max_hull: int
    shields: int
    max_shields: int
    energy: int
    max_energy: int
    fuel: int
    max_fuel: int
    cargo_used: int
    cargo_capacity: int
    speed: int
    upgrades: List[str] = field(default_factory=list)


@dataclass
class StatusView:
    name: str
    credits: int
    level: int
    xp: int
    next_level_xp: int
    system_id: str
    system_name: str
    tick: int
    chapter: int
    ship: ShipView
    reputation: Dict[str, str] = field(default_factory=dict)
    active_quests: List[str] = field(default_factory=list)
    refuel_cost: int = 0
    repair_cost: int = 0


@dataclass
class MarketRowView:
    commodity_id: str
    name: str
    price: int
    supply: int
    demand: int
    trend: str
    held: int
    illegal: bool = False


@dataclass
class RouteView:
    system_id: str
    name: str
    fuel_cost: int
    danger_level: int
    tech_level: int
    faction: Optional[str]
    visited: bool
