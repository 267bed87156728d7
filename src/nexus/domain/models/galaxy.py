from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class StarType(str, Enum):
    YELLOW_DWARF = "yellow_dwarf"
    RED_GIANT = "red_giant"
    BLUE_GIANT = "blue_giant"
    WHITE_DWARF = "white_dwarf"
    NEUTRON_STAR = "neutron_star"
    BINARY_STAR = "binary_star"
    PULSAR = "pulsar"


class PlanetType(str, Enum):
    TERRESTRIAL = "terrestrial"
    GAS_GIANT = "gas_giant"
    ICE_WORLD = "ice_world"
    VOLCANIC = "volcanic"
    OCEAN = "ocean"
    DESERT = "desert"
    ARTIFICIAL_HABITAT = "artificial_habitat"


@dataclass(frozen=True)
class Coordinates:
    x: float
    y: float

    def distance_to(self, other: "Coordinates") -> float:
        return math.hypot(float(other.x) - float(self.x), float(other.y) - float(self.y))


@dataclass
class Planet:
    id: str
    name: str
    type: PlanetType
    description: str = ""
    population: int = 0
    has_station: bool = False


@dataclass
class StarSystem:
    id: str
    name: str
    star_type: StarType
    coordinates: Coordinates
    danger_level: int
    tech_level: int
    connections: List[str] = field(default_factory=list)
    faction: Optional[str] = None
    planets: List[Planet] = field(default_factory=list)
    description: str = ""
    discovered: bool = False
    has_trade_post: bool = False
    has_shipyard: bool = False
    lore: str = ""

    def is_connected_to(self, system_id: str) -> bool:
        return str(system_id) in self.connections
