from __future__ import annotations

import copy
from typing import Dict, List, Optional, Sequence

from nexus.application.services.balance_tables import fuel_cost_for_distance
from nexus.application.services.economy_service import EconomyService
from nexus.domain.models.galaxy import StarSystem
from nexus.domain.models.market import MarketData


class GalaxyService:
    def __init__(self, economy: EconomyService, systems: Sequence[StarSystem]) -> None:
        self.economy = economy
        self._templates = list(systems)
        self.systems: Dict[str, StarSystem] = {}
        self.markets: Dict[str, MarketData] = {}

    def init(self) -> None:
        self.systems = {system.id: copy.deepcopy(system) for system in self._templates}
        self.markets = {}
        for system in self.systems.values():
            if system.discovered and system.has_trade_post:
                self.markets[system.id] = self.economy.generate_market(system)

    def restore(self, systems: Dict[str, StarSystem], markets: Dict[str, MarketData]) -> None:
        self.systems = dict(systems)
        self.markets = dict(markets)

    def get_system(self, system_id: str) -> Optional[StarSystem]:
        return self.systems.get(system_id)

    def get_market(self, system_id: str) -> Optional[MarketData]:
        return self.markets.get(system_id)

    def discovered_systems(self) -> List[StarSystem]:
        return [system for system in self.systems.values() if system.discovered]

    def get_connections(self, system_id: str) -> List[StarSystem]:
        system = self.systems.get(system_id)
        if system is None:
            return []
        neighbours = (self.systems.get(neighbour_id) for neighbour_id in system.connections)
        return [row for row in neighbours if row is not None and row.discovered]

    def distance(self, from_id: str, to_id: str) -> float:
        origin = self.systems[from_id]
        target = self.systems[to_id]
        return origin.coordinates.distance_to(target.coordinates)

    def get_travel_cost(self, from_id: str, to_id: str) -> int:
        return fuel_cost_for_distance(self.distance(from_id, to_id))

    def discover_system(self, system_id: str) -> bool:
        system = self.systems.get(system_id)
        if system is None:
            return False
        newly = not system.discovered
        system.discovered = True
        if system.has_trade_post and system_id not in self.markets:
            self.markets[system_id] = self.economy.generate_market(system)
        return newly

    def discover_connected_systems(self, system_id: str) -> List[str]:
        system = self.systems.get(system_id)
        if system is None:
            return []
        return [neighbour for neighbour in system.connections if self.discover_system(neighbour)]

    def tick_markets(self, tick: int) -> None:
        for market in self.markets.values():
            self.economy.update_market_prices(market, tick)

    def update_market_after_trade(self, system_id: str, commodity_id: str, delta: int) -> None:
        market = self.markets.get(system_id)
        if market is None:
            return
        listing = market.listing_for(commodity_id)
        if listing is not None:
            listing.supply = max(0, listing.supply + int(delta))
