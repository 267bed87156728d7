from __future__ import annotations

from typing import List, Optional, Sequence

from nexus.application.dtos import MarketRowView, RouteView, ShipView, StatusView
from nexus.application.services.balance_tables import xp_required_for_level
from nexus.domain.models.faction import reputation_tier
from nexus.domain.models.galaxy import StarSystem
from nexus.domain.models.market import CommodityDef, MarketData
from nexus.domain.models.player import Player
from nexus.domain.models.story import Quest


def to_ship_view(player: Player) -> ShipView:
    ship = player.ship
    return ShipView(
        name=ship.name,
        ship_class=ship.ship_class.value,
        hull=ship.hull,
        max_hull=ship.max_hull,
        shields=ship.shields,
        max_shields=ship.max_shields,
        energy=ship.energy,
        max_energy=ship.max_energy,
        fuel=ship.fuel,
        max_fuel=ship.max_fuel,
        cargo_used=sum(item.quantity for item in player.cargo),
        cargo_capacity=ship.cargo_capacity,
        speed=ship.speed,
        upgrades=list(ship.upgrades),
    )


def to_status_view(
    *,
    player: Player,
    system: Optional[StarSystem],
    tick: int,
    chapter: int,
    active_quests: Sequence[Quest],
    refuel_cost: int,
    repair_cost: int,
) -> StatusView:
    return StatusView(
        name=player.name,
        credits=player.credits,
        level=player.level,
        xp=player.xp,
        next_level_xp=xp_required_for_level(player.level),
        system_id=player.current_system,
        system_name=system.name if system is not None else player.current_system,
        tick=tick,
        chapter=chapter,
        ship=to_ship_view(player),
        reputation={
            faction_id: f"{score:+d} ({reputation_tier(score).value})"
            for faction_id, score in sorted(player.reputation.items())
        },
        active_quests=[quest.title for quest in active_quests],
        refuel_cost=refuel_cost,
        repair_cost=repair_cost,
    )


def to_market_rows(market: MarketData, commodities: dict[str, CommodityDef], player: Player) -> List[MarketRowView]:
    rows: List[MarketRowView] = []
    for listing in market.listings:
        commodity = commodities.get(listing.commodity_id)
        rows.append(
            MarketRowView(
                commodity_id=listing.commodity_id,
                name=commodity.name if commodity is not None else listing.commodity_id,
                price=listing.price,
                supply=listing.supply,
                demand=listing.demand,
                trend=listing.trend.value,
                held=player.cargo_quantity(listing.commodity_id),
                illegal=bool(commodity is not None and commodity.illegal),
            )
        )
    return rows


def to_route_view(system: StarSystem, *, fuel_cost: int, visited: bool) -> RouteView:
    return RouteView(
        system_id=system.id,
        name=system.name,
        fuel_cost=fuel_cost,
        danger_level=system.danger_level,
        tech_level=system.tech_level,
        faction=system.faction,
        visited=visited,
    )
