from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from nexus.application.services.balance_tables import (
    CONTRABAND_AVAILABILITY_CHANCE,
    CORE_WORLD_LUXURIES,
    FRONTIER_DISCOUNT_GOODS,
    HIGH_TECH_GOODS,
    LOW_TECH_PREMIUM_GOODS,
    OVERSUPPLY_DEMAND_THRESHOLD,
    OVERSUPPLY_DISCOUNT,
    RAW_MATERIALS,
    SCARCITY_SUPPLY_THRESHOLD,
    SCARCITY_SURCHARGE,
    STABLE_DRIFT_RATE,
    STANDARD_SELL_RATE,
    TREND_DRIFT_RATE,
    TREND_FLIP_CHANCE,
    round_half_up,
)
from nexus.application.services.random_service import RandomService
from nexus.domain.models.galaxy import StarSystem
from nexus.domain.models.market import (
    CargoItem,
    CommodityDef,
    MarketData,
    MarketListing,
    TradeKind,
    TradeRecord,
    Trend,
)

_TRENDS = (Trend.RISING, Trend.FALLING, Trend.STABLE)


class TradeRejection(str, Enum):
    INVALID_QUANTITY = "invalid quantity"
    INSUFFICIENT_CARGO_SPACE = "insufficient cargo space"
    INSUFFICIENT_CREDITS = "insufficient credits"
    INSUFFICIENT_SUPPLY = "insufficient supply"
    INSUFFICIENT_CARGO = "insufficient cargo"


@dataclass(frozen=True)
class TradeCheck:
    ok: bool
    reason: Optional[TradeRejection] = None


def cargo_used(cargo: Iterable[CargoItem]) -> int:
    return sum(int(item.quantity) for item in cargo)


class EconomyService:
    def __init__(self, rng: RandomService, commodities: Sequence[CommodityDef]) -> None:
        self.rng = rng
        self._commodities = {commodity.id: commodity for commodity in commodities}

    def commodity(self, commodity_id: str) -> Optional[CommodityDef]:
        return self._commodities.get(commodity_id)

    def price_modifier(self, system: StarSystem, commodity_id: str) -> float:
        modifier = 1.0
        tech = int(system.tech_level)
        danger = int(system.danger_level)

        if tech >= 8 and commodity_id in HIGH_TECH_GOODS:
            modifier *= 0.7
        if tech <= 4 and commodity_id in LOW_TECH_PREMIUM_GOODS:
            modifier *= 1.5
        if danger >= 6 and commodity_id in FRONTIER_DISCOUNT_GOODS:
            modifier *= 0.8
        if danger <= 2 and commodity_id in CORE_WORLD_LUXURIES:
            modifier *= 1.3
        if commodity_id in RAW_MATERIALS:
            modifier *= 0.6 if tech <= 5 else 1.2
        return modifier

    def generate_market(self, system: StarSystem) -> MarketData:
        listings: List[MarketListing] = []
        for commodity in self._commodities.values():
            if commodity.is_contraband_in(system.faction):
                if not self.rng.random_chance(CONTRABAND_AVAILABILITY_CHANCE):
                    continue

            modifier = self.price_modifier(system, commodity.id)
            volatility_range = commodity.base_price * commodity.volatility
            raw_price = commodity.base_price * modifier + self.rng.random_float(-volatility_range, volatility_range)
            supply_bias = 1.5 if modifier < 1 else 0.7
            demand_bias = 1.5 if modifier > 1 else 0.7

            listings.append(
                MarketListing(
                    commodity_id=commodity.id,
                    price=max(1, round_half_up(raw_price)),
                    supply=max(0, round_half_up(self.rng.random_float(5, 50) * supply_bias)),
                    demand=max(0, round_half_up(self.rng.random_float(5, 50) * demand_bias)),
                    trend=self.rng.random_choice(_TRENDS),
                )
            )
        return MarketData(system_id=system.id, listings=listings, last_updated=0)

    def update_market_prices(self, market: MarketData, tick: int) -> MarketData:
        for listing in market.listings:
            commodity = self._commodities.get(listing.commodity_id)
            if commodity is None:
                continue
            base = commodity.base_price

            if listing.trend == Trend.RISING:
                delta = self.rng.random_float(0, base * TREND_DRIFT_RATE)
            elif listing.trend == Trend.FALLING:
                delta = self.rng.random_float(-base * TREND_DRIFT_RATE, 0)
            else:
                delta = self.rng.random_float(-base * STABLE_DRIFT_RATE, base * STABLE_DRIFT_RATE)

            if listing.supply > 0:
                supply_change = round_half_up(self.rng.random_float(-3, 5))
            else:
                supply_change = round_half_up(self.rng.random_float(0, 5))
            demand_change = round_half_up(self.rng.random_float(-3, 3))

            if self.rng.random_chance(TREND_FLIP_CHANCE):
                listing.trend = self.rng.random_choice(_TRENDS)

            listing.price = max(1, round_half_up(listing.price + delta))
            listing.supply = max(0, listing.supply + supply_change)
            listing.demand = max(0, listing.demand + demand_change)
        market.last_updated = int(tick)
        return market

    @staticmethod
    def buy_price(listing: MarketListing, quantity: int) -> int:
        surcharge = SCARCITY_SURCHARGE if listing.supply < SCARCITY_SUPPLY_THRESHOLD else 1.0
        return round_half_up(listing.price * int(quantity) * surcharge)

    @staticmethod
    def sell_price(listing: MarketListing, quantity: int) -> int:
        rate = OVERSUPPLY_DISCOUNT if listing.demand < OVERSUPPLY_DEMAND_THRESHOLD else STANDARD_SELL_RATE
        return round_half_up(listing.price * int(quantity) * rate)

    def can_buy(
        self,
        credits: int,
        cargo: Sequence[CargoItem],
        cargo_capacity: int,
        listing: MarketListing,
        quantity: int,
    ) -> TradeCheck:
        quantity = int(quantity)
        if quantity <= 0:
            return TradeCheck(False, TradeRejection.INVALID_QUANTITY)
        if cargo_used(cargo) + quantity > int(cargo_capacity):
            return TradeCheck(False, TradeRejection.INSUFFICIENT_CARGO_SPACE)
        if int(credits) < self.buy_price(listing, quantity):
            return TradeCheck(False, TradeRejection.INSUFFICIENT_CREDITS)
        if quantity > listing.supply:
            return TradeCheck(False, TradeRejection.INSUFFICIENT_SUPPLY)
        return TradeCheck(True)

    @staticmethod
    def can_sell(cargo: Sequence[CargoItem], listing: MarketListing, quantity: int) -> TradeCheck:
        quantity = int(quantity)
        if quantity <= 0:
            return TradeCheck(False, TradeRejection.INVALID_QUANTITY)
        held = sum(int(item.quantity) for item in cargo if item.commodity_id == listing.commodity_id)
        if held < quantity:
            return TradeCheck(False, TradeRejection.INSUFFICIENT_CARGO)
        return TradeCheck(True)

    @staticmethod
    def apply_buy(cargo: Sequence[CargoItem], commodity_id: str, quantity: int) -> List[CargoItem]:
        updated = [CargoItem(item.commodity_id, item.quantity) for item in cargo]
        for item in updated:
            if item.commodity_id == commodity_id:
                item.quantity += int(quantity)
                return updated
        updated.append(CargoItem(commodity_id=commodity_id, quantity=int(quantity)))
        return updated

    @staticmethod
    def apply_sell(cargo: Sequence[CargoItem], commodity_id: str, quantity: int) -> List[CargoItem]:
        updated: List[CargoItem] = []
        for item in cargo:
            remaining = item.quantity - int(quantity) if item.commodity_id == commodity_id else item.quantity
            if remaining > 0:
                updated.append(CargoItem(item.commodity_id, remaining))
        return updated

    @staticmethod
    def create_trade_record(
        commodity_id: str,
        quantity: int,
        price_per_unit: int,
        system_id: str,
        kind: TradeKind,
        tick: int,
    ) -> TradeRecord:
        return TradeRecord(
            commodity_id=commodity_id,
            quantity=int(quantity),
            price_per_unit=int(price_per_unit),
            system_id=system_id,
            kind=TradeKind(kind),
            tick=int(tick),
        )
