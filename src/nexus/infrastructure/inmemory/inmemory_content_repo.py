from __future__ import annotations

import copy
from typing import List

from nexus.domain.models.faction import Faction
from nexus.domain.models.galaxy import StarSystem
from nexus.domain.models.market import CommodityDef
from nexus.domain.models.ship import EnemyTemplate, Ship, ShipClass, ShipUpgrade
from nexus.domain.models.story import Chapter, Contact, GameEvent, Quest
from nexus.domain.repositories import ContentRepository
from nexus.infrastructure.content.economy_tables import COMMODITIES, FACTIONS
from nexus.infrastructure.content.galaxy_tables import STAR_SYSTEMS
from nexus.infrastructure.content.ship_tables import ENEMY_TEMPLATES, STARTER_SHIPS, UPGRADES
from nexus.infrastructure.content.story_tables import CHAPTERS, CONTACTS, EVENTS, QUESTS


class InMemoryContentRepository(ContentRepository):
    """Serves the built-in content tables.

    Mutable records (systems, ships, quests) are deep-copied on every call so
    one game can never leak state into the tables another game starts from.
    """

    def list_commodities(self) -> List[CommodityDef]:
        return list(COMMODITIES)

    def list_factions(self) -> List[Faction]:
        return list(FACTIONS)

    def list_systems(self) -> List[StarSystem]:
        return [copy.deepcopy(system) for system in STAR_SYSTEMS.values()]

    def starter_ship(self, ship_class: ShipClass) -> Ship:
        try:
            template = STARTER_SHIPS[ShipClass(ship_class)]
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown ship class: {ship_class}") from exc
        return copy.deepcopy(template)

    def list_upgrades(self) -> List[ShipUpgrade]:
        return list(UPGRADES)

    def list_enemy_templates(self) -> List[EnemyTemplate]:
        return list(ENEMY_TEMPLATES)

    def list_quests(self) -> List[Quest]:
        return [copy.deepcopy(quest) for quest in QUESTS]

    def list_chapters(self) -> List[Chapter]:
        return list(CHAPTERS)

    def list_events(self) -> List[GameEvent]:
        return list(EVENTS)

    def list_contacts(self) -> List[Contact]:
        return list(CONTACTS)
