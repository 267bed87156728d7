from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from nexus.domain.models.faction import Faction
from nexus.domain.models.galaxy import StarSystem
from nexus.domain.models.market import CommodityDef
from nexus.domain.models.ship import EnemyTemplate, Ship, ShipClass, ShipUpgrade
from nexus.domain.models.story import Chapter, Contact, GameEvent, Quest


class SaveStoreError(RuntimeError):
    """Raised by a save store when it cannot satisfy a request."""


@dataclass(frozen=True)
class SaveSlotInfo:
    slot: str
    timestamp: int
    version: int


class ContentRepository(ABC):
    @abstractmethod
    def list_commodities(self) -> List[CommodityDef]:
        raise NotImplementedError

    @abstractmethod
    def list_factions(self) -> List[Faction]:
        raise NotImplementedError

    @abstractmethod
    def list_systems(self) -> List[StarSystem]:
        raise NotImplementedError

    @abstractmethod
    def starter_ship(self, ship_class: ShipClass) -> Ship:
        raise NotImplementedError

    @abstractmethod
    def list_upgrades(self) -> List[ShipUpgrade]:
        raise NotImplementedError

    @abstractmethod
    def list_enemy_templates(self) -> List[EnemyTemplate]:
        raise NotImplementedError

    @abstractmethod
    def list_quests(self) -> List[Quest]:
        raise NotImplementedError

    @abstractmethod
    def list_chapters(self) -> List[Chapter]:
        raise NotImplementedError

    @abstractmethod
    def list_events(self) -> List[GameEvent]:
        raise NotImplementedError

    @abstractmethod
    def list_contacts(self) -> List[Contact]:
        raise NotImplementedError

    def get_commodity(self, commodity_id: str) -> Optional[CommodityDef]:
        for commodity in self.list_commodities():
            if commodity.id == commodity_id:
                return commodity
        return None

    def get_upgrade(self, upgrade_id: str) -> Optional[ShipUpgrade]:
        for upgrade in self.list_upgrades():
            if upgrade.id == upgrade_id:
                return upgrade
        return None

    def get_contact(self, contact_id: str) -> Optional[Contact]:
        for contact in self.list_contacts():
            if contact.id == contact_id:
                return contact
        return None


class SaveRepository(ABC):
    @abstractmethod
    def save(self, snapshot: Dict[str, Any], slot: str = "auto") -> None:
        raise NotImplementedError

    @abstractmethod
    def load(self, slot: str = "auto") -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, slot: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list(self) -> List[SaveSlotInfo]:
        raise NotImplementedError

    def has_save(self, slot: str = "auto") -> bool:
        """Convenience check built on list()."""
        return any(info.slot == slot for info in self.list())
