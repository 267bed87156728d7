from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CommodityCategory(str, Enum):
    RAW_MATERIALS = "raw_materials"
    TECHNOLOGY = "technology"
    LUXURY = "luxury"
    CONTRABAND = "contraband"


class Trend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class TradeKind(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class CommodityDef:
    id: str
    name: str
    category: CommodityCategory
    base_price: int
    volatility: float
    description: str = ""
    illegal: bool = False
    legal_in: tuple[str, ...] = ()

    def is_contraband_in(self, faction_id: Optional[str]) -> bool:
        """True when the commodity is illegal under the given controlling faction.

        Lawless systems have no one to enforce the ban.
        """
        if not self.illegal or faction_id is None:
            return False
        return faction_id not in self.legal_in


@dataclass
class MarketListing:
    commodity_id: str
    price: int
    supply: int
    demand: int
    trend: Trend = Trend.STABLE


@dataclass
class MarketData:
    system_id: str
    listings: List[MarketListing] = field(default_factory=list)
    last_updated: int = 0

    def listing_for(self, commodity_id: str) -> Optional[MarketListing]:
        for listing in self.listings:
            if listing.commodity_id == commodity_id:
                return listing
        return None


@dataclass
class CargoItem:
    commodity_id: str
    quantity: int


@dataclass(frozen=True)
class TradeRecord:
    commodity_id: str
    quantity: int
    price_per_unit: int
    system_id: str
    kind: TradeKind
    tick: int
