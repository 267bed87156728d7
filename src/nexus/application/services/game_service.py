from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from nexus.application.dtos import ActionResult, MarketRowView, RouteView, StatusView, TravelOutcome, TravelPlan
from nexus.application.mappers.snapshot_mapper import SnapshotVersionError, from_snapshot, to_snapshot
from nexus.application.mappers.view_mapper import to_market_rows, to_route_view, to_status_view
from nexus.application.services.balance_tables import (
    DEFAULT_SAVE_SLOT,
    DEFEAT_CREDIT_PENALTY_RATE,
    DEFEAT_HULL_RECOVERY_RATE,
    round_half_up,
)
from nexus.application.services.combat_service import CombatService
from nexus.application.services.dialogue_service import DialogueService
from nexus.application.services.economy_service import EconomyService
from nexus.application.services.event_bus import EventBus
from nexus.application.services.galaxy_service import GalaxyService
from nexus.application.services.notifications import NotificationCenter, Severity
from nexus.application.services.progression_service import ProgressionService
from nexus.application.services.random_service import RandomService
from nexus.application.services.story_service import StoryService
from nexus.domain.events import ChapterAdvancedEvent, CombatEnded, SystemVisited, TickAdvanced, TradeCompleted
from nexus.domain.models.combat import CombatAction, CombatResult, CombatState
from nexus.domain.models.market import TradeKind
from nexus.domain.models.player import Player
from nexus.domain.models.ship import ShipClass, ShipUpgrade
from nexus.domain.models.story import Contact, DialogueNode
from nexus.domain.repositories import ContentRepository, SaveRepository, SaveSlotInfo, SaveStoreError

logger = logging.getLogger(__name__)


class GameService:
    """Orchestration root: owns the player, galaxy, story, combat state and tick counter."""

    def __init__(
        self,
        content: ContentRepository,
        save_repo: SaveRepository,
        *,
        rng: Optional[RandomService] = None,
        event_bus: Optional[EventBus] = None,
        notifications: Optional[NotificationCenter] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.content = content
        self.save_repo = save_repo
        self.rng = rng or RandomService()
        self.event_bus = event_bus or EventBus()
        self.notifications = notifications or NotificationCenter()
        self._clock = clock

        self._commodities = {commodity.id: commodity for commodity in content.list_commodities()}
        self.economy = EconomyService(self.rng, list(self._commodities.values()))
        self.combat_service = CombatService(self.rng, content.list_enemy_templates())
        self.galaxy = GalaxyService(self.economy, content.list_systems())
        self.progression = ProgressionService(self._new_player("Captain", ShipClass.SCOUT), event_publisher=self.event_bus.publish)
        self.story = StoryService(
            self.progression,
            self.rng,
            quests=content.list_quests(),
            chapters=content.list_chapters(),
            events=content.list_events(),
            event_publisher=self.event_bus.publish,
        )
        self.dialogue = DialogueService(self.progression, self.story.apply_consequences)
        self.combat = CombatState()
        self.tick = 0
        self.started = False
        self._pending_travel: Optional[TravelPlan] = None
        self._intro_pending = False
        self.event_bus.subscribe(ChapterAdvancedEvent, self._on_chapter_advanced)

    @property
    def player(self) -> Player:
        return self.progression.player

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notifications.notify(message, severity)

    def _new_player(self, name: str, ship_class: ShipClass) -> Player:
        reputation = {faction.id: faction.base_reputation for faction in self.content.list_factions()}
        return Player(name=name.strip() or "Captain", ship=self.content.starter_ship(ship_class), reputation=reputation)

    def new_game(self, name: str, ship_class: ShipClass = ShipClass.SCOUT) -> ActionResult:
        self.progression.player = self._new_player(name, ShipClass(ship_class))
        self.galaxy.init()
        self.story.init()
        self.dialogue.end()
        self.combat = CombatState()
        self.tick = 0
        self._pending_travel = None
        self._intro_pending = False
        self.started = True
        self.start_chapter_dialogue()
        message = f"Welcome aboard the {self.player.ship.name}, Captain {self.player.name}."
        self.notify(message, Severity.SUCCESS)
        return ActionResult(messages=[message])

    # Travel

    def _reject_travel(self, message: str) -> None:
        logger.debug("Travel rejected: %s", message)
        self.notify(message, Severity.WARNING)

    def begin_travel(self, target_id: str) -> Optional[TravelPlan]:
        player = self.player
        origin = self.galaxy.get_system(player.current_system)
        if self.combat.active:
            self._reject_travel("Cannot travel while in combat.")
            return None
        if self.story.active_event is not None:
            self._reject_travel("Resolve the current event before travelling.")
            return None
        if self._pending_travel is not None:
            self._reject_travel("Already in transit.")
            return None
        if origin is None or self.galaxy.get_system(target_id) is None or not origin.is_connected_to(target_id):
            self._reject_travel("No route to that system.")
            return None

        fuel_cost = self.galaxy.get_travel_cost(origin.id, target_id)
        if player.ship.fuel < fuel_cost:
            self._reject_travel("Not enough fuel for this journey.")
            return None

        distance = self.galaxy.distance(origin.id, target_id)
        self.progression.update_ship({"fuel": player.ship.fuel - fuel_cost})
        self.progression.add_distance(distance)
        self._pending_travel = TravelPlan(origin_id=origin.id, target_id=target_id, fuel_cost=fuel_cost, distance=distance)
        return self._pending_travel

    def complete_travel(self, plan: TravelPlan) -> TravelOutcome:
        if plan != self._pending_travel:
            raise ValueError("That journey is not in progress")
        self._pending_travel = None

        target_id = plan.target_id
        first_visit = self.progression.set_current_system(target_id)
        self.galaxy.discover_system(target_id)
        self.galaxy.discover_connected_systems(target_id)
        self.tick += 1
        self.galaxy.tick_markets(self.tick)
        self.event_bus.publish(TickAdvanced(tick_after=self.tick))
        self.event_bus.publish(SystemVisited(system_id=target_id, first_visit=first_visit, tick=self.tick))
        self.story.on_system_visited(target_id)

        system = self.galaxy.get_system(target_id)
        outcome = TravelOutcome(kind="arrival", system_id=target_id, tick=self.tick)
        event = self.story.try_random_event(system)
        if event is not None:
            outcome.kind = "event"
            outcome.event_id = event.id
            outcome.messages.append(f"Event: {event.title}")
            self.notify(f"Event: {event.title}", Severity.WARNING)
        elif self.combat_service.should_encounter_enemy(system.danger_level):
            enemy = self.combat_service.generate_enemy(system.danger_level)
            self.combat = self.combat_service.init_combat(enemy)
            outcome.kind = "combat"
            outcome.enemy_name = enemy.name
            outcome.messages.append(f"Hostile contact: {enemy.name}!")
            self.notify(f"Hostile contact: {enemy.name}!", Severity.DANGER)
        else:
            message = f"Arrived at {system.name}. Fuel -{plan.fuel_cost}."
            outcome.messages.append(message)
            self.notify(message, Severity.INFO)

        self._autosave()
        return outcome

    def travel_to_system(self, target_id: str) -> Optional[TravelOutcome]:
        plan = self.begin_travel(target_id)
        if plan is None:
            return None
        return self.complete_travel(plan)

    # Trade

    def _trade_guard(self) -> Optional[str]:
        if self.combat.active:
            return "Cannot trade while in combat."
        if self.galaxy.get_market(self.player.current_system) is None:
            return "No trading post in this system."
        return None

    def _trade_rejected(self, message: str) -> ActionResult:
        self.notify(message, Severity.WARNING)
        return ActionResult(messages=[message], ok=False)

    def buy(self, commodity_id: str, quantity: int) -> ActionResult:
        blocked = self._trade_guard()
        if blocked:
            return self._trade_rejected(blocked)
        player = self.player
        market = self.galaxy.get_market(player.current_system)
        listing = market.listing_for(commodity_id)
        if listing is None:
            return self._trade_rejected("That commodity is not traded here.")

        check = self.economy.can_buy(player.credits, player.cargo, player.ship.cargo_capacity, listing, quantity)
        if not check.ok:
            return self._trade_rejected(f"Cannot buy: {check.reason.value}.")

        cost = self.economy.buy_price(listing, quantity)
        unit_price = listing.price
        self.progression.add_credits(-cost)
        self.progression.update_cargo(self.economy.apply_buy(player.cargo, commodity_id, quantity))
        self.galaxy.update_market_after_trade(market.system_id, commodity_id, -int(quantity))
        self.progression.add_trade_record(
            self.economy.create_trade_record(commodity_id, quantity, unit_price, market.system_id, TradeKind.BUY, self.tick)
        )
        self.story.on_trade_completed(cost)
        self.event_bus.publish(
            TradeCompleted(market.system_id, commodity_id, int(quantity), cost, TradeKind.BUY.value, self.tick)
        )
        message = f"Bought {int(quantity)}x {self._commodity_name(commodity_id)} for {cost} CR"
        self.notify(message, Severity.SUCCESS)
        return ActionResult(messages=[message])

    def sell(self, commodity_id: str, quantity: int) -> ActionResult:
        blocked = self._trade_guard()
        if blocked:
            return self._trade_rejected(blocked)
        player = self.player
        market = self.galaxy.get_market(player.current_system)
        listing = market.listing_for(commodity_id)
        if listing is None:
            return self._trade_rejected("That commodity is not traded here.")

        check = self.economy.can_sell(player.cargo, listing, quantity)
        if not check.ok:
            return self._trade_rejected(f"Cannot sell: {check.reason.value}.")

        revenue = self.economy.sell_price(listing, quantity)
        unit_price = listing.price
        self.progression.add_credits(revenue)
        self.progression.update_cargo(self.economy.apply_sell(player.cargo, commodity_id, quantity))
        self.galaxy.update_market_after_trade(market.system_id, commodity_id, int(quantity))
        self.progression.add_trade_record(
            self.economy.create_trade_record(commodity_id, quantity, unit_price, market.system_id, TradeKind.SELL, self.tick)
        )
        self.story.on_trade_completed(revenue)
        self.event_bus.publish(
            TradeCompleted(market.system_id, commodity_id, int(quantity), revenue, TradeKind.SELL.value, self.tick)
        )
        message = f"Sold {int(quantity)}x {self._commodity_name(commodity_id)} for {revenue} CR"
        self.notify(message, Severity.SUCCESS)
        return ActionResult(messages=[message])

    def _commodity_name(self, commodity_id: str) -> str:
        commodity = self._commodities.get(commodity_id)
        return commodity.name if commodity is not None else commodity_id

    # Combat

    def combat_action(self, action: CombatAction) -> ActionResult:
        state = self.combat
        if not state.active or not state.player_turn:
            return ActionResult(messages=["No battle in progress."], ok=False)

        seen = len(state.log)
        turn = self.combat_service.execute_player_action(state, self.player.ship, CombatAction(action))
        self.progression.update_ship(turn.ship_updates)
        self.combat = turn.state
        messages = [entry.message for entry in turn.state.log[seen:]]

        result = turn.state.result
        if result == CombatResult.VICTORY:
            self.progression.add_credits(turn.state.reward_credits)
            self.progression.add_xp(turn.state.reward_xp)
            self.progression.record_combat_win()
            self.notify(f"Victory! +{turn.state.reward_credits} CR, +{turn.state.reward_xp} XP", Severity.SUCCESS)
        elif result == CombatResult.DEFEAT:
            self.progression.record_combat_loss()
            self.notify("Your ship has been disabled.", Severity.DANGER)
        elif result == CombatResult.FLED:
            self.notify("You escaped the engagement.", Severity.INFO)

        if turn.state.is_terminal and turn.state.enemy is not None:
            self.event_bus.publish(CombatEnded(turn.state.enemy.name, result.value, turn.state.round))
        return ActionResult(messages=messages)

    def finish_combat(self) -> ActionResult:
        state = self.combat
        if state.enemy is None:
            return ActionResult(messages=["No battle to finish."], ok=False)
        if not state.is_terminal:
            return ActionResult(messages=["The battle is still raging."], ok=False)

        messages: List[str] = []
        if state.result == CombatResult.DEFEAT:
            ship = self.player.ship
            self.progression.update_ship({"hull": round_half_up(ship.max_hull * DEFEAT_HULL_RECOVERY_RATE), "shields": 0})
            penalty = max(0, round_half_up(self.player.credits * DEFEAT_CREDIT_PENALTY_RATE))
            self.progression.add_credits(-penalty)
            message = f"Salvage crews tow you to safety. Lost {penalty} CR."
            messages.append(message)
            self.notify(message, Severity.DANGER)
        elif state.result == CombatResult.VICTORY:
            self.story.on_combat_won()

        self.combat = CombatState()
        self._autosave()
        return ActionResult(messages=messages)

    # Story

    def resolve_event_choice(self, choice_index: int) -> ActionResult:
        try:
            outcome = self.story.resolve_event(choice_index)
        except ValueError as exc:
            self.notify(str(exc), Severity.WARNING)
            return ActionResult(messages=[str(exc)], ok=False)
        self.notify(outcome, Severity.INFO)
        self._autosave()
        return ActionResult(messages=[outcome])

    def _on_chapter_advanced(self, event: ChapterAdvancedEvent) -> None:
        if self.dialogue.active:
            self._intro_pending = True
        else:
            self.start_chapter_dialogue()

    def start_chapter_dialogue(self) -> Optional[DialogueNode]:
        chapter = self.story.current_chapter_def()
        if chapter is None or not chapter.intro_dialogue:
            return None
        return self.dialogue.start(list(chapter.intro_dialogue), topic=f"chapter_{chapter.id}")

    def contacts_here(self) -> List[Contact]:
        return [contact for contact in self.content.list_contacts() if contact.system_id == self.player.current_system]

    def start_contact_dialogue(self, contact_id: str) -> Optional[DialogueNode]:
        contact = self.content.get_contact(contact_id)
        if contact is None or contact.system_id != self.player.current_system:
            self.notify("Nobody by that name answers your hail.", Severity.WARNING)
            return None
        return self.dialogue.start(
            list(contact.nodes),
            topic=contact.id,
            on_complete=lambda: self.story.on_dialogue_completed(contact.id),
        )

    def choose_dialogue_option(self, option_id: str) -> Optional[DialogueNode]:
        node = self.dialogue.select_option(option_id)
        if node is None and self._intro_pending:
            self._intro_pending = False
            return self.start_chapter_dialogue()
        return node if node is not None else self.dialogue.current_node()

    # Ship services

    def refuel(self) -> ActionResult:
        cost = self.progression.refuel_cost()
        if self.progression.refuel():
            message = f"Ship refueled for {cost} CR."
            self.notify(message, Severity.SUCCESS)
            return ActionResult(messages=[message])
        message = "Tanks are already full." if cost == 0 else f"Refuelling costs {cost} CR; you cannot afford it."
        self.notify(message, Severity.WARNING)
        return ActionResult(messages=[message], ok=False)

    def repair(self) -> ActionResult:
        cost = self.progression.repair_cost()
        if self.progression.repair():
            message = f"Ship repaired for {cost} CR."
            self.notify(message, Severity.SUCCESS)
            return ActionResult(messages=[message])
        message = "Hull is already intact." if cost == 0 else f"Repairs cost {cost} CR; you cannot afford them."
        self.notify(message, Severity.WARNING)
        return ActionResult(messages=[message], ok=False)

    def available_upgrades(self) -> List[ShipUpgrade]:
        system = self.galaxy.get_system(self.player.current_system)
        if system is None or not system.has_shipyard:
            return []
        installed = set(self.player.ship.upgrades)
        return [
            upgrade
            for upgrade in self.content.list_upgrades()
            if upgrade.required_tech <= system.tech_level and upgrade.id not in installed
        ]

    def install_upgrade(self, upgrade_id: str) -> ActionResult:
        upgrade = next((row for row in self.available_upgrades() if row.id == upgrade_id), None)
        if upgrade is None:
            message = "That upgrade is not offered here."
        elif self.progression.install_upgrade(upgrade):
            message = f"Installed {upgrade.name}!"
            self.notify(message, Severity.SUCCESS)
            return ActionResult(messages=[message])
        else:
            message = f"{upgrade.name} costs {upgrade.cost} CR; you cannot afford it."
        self.notify(message, Severity.WARNING)
        return ActionResult(messages=[message], ok=False)

    # Persistence

    def _snapshot(self) -> dict:
        return to_snapshot(
            player=self.player,
            systems=self.galaxy.systems,
            markets=self.galaxy.markets,
            current_chapter=self.story.current_chapter,
            quests=self.story.quests,
            flags=self.story.flags,
            completed_events=self.story.completed_events,
            combat=self.combat,
            tick=self.tick,
            timestamp=int(self._clock()),
        )

    def _autosave(self) -> None:
        try:
            self.save_repo.save(self._snapshot(), DEFAULT_SAVE_SLOT)
        except (SaveStoreError, OSError, ValueError) as exc:
            logger.warning("Autosave failed: %s", exc)
            self.notify("Autosave failed.", Severity.WARNING)

    def save_game(self, slot: str = DEFAULT_SAVE_SLOT) -> bool:
        try:
            self.save_repo.save(self._snapshot(), slot)
        except (SaveStoreError, OSError, ValueError) as exc:
            logger.warning("Save to slot %s failed: %s", slot, exc)
            self.notify(f"Save failed: {exc}", Severity.DANGER)
            return False
        self.notify(f"Game saved to slot '{slot}'.", Severity.SUCCESS)
        return True

    def load_game(self, slot: str = DEFAULT_SAVE_SLOT) -> bool:
        try:
            snapshot = self.save_repo.load(slot)
        except (SaveStoreError, OSError, ValueError) as exc:
            logger.warning("Load from slot %s failed: %s", slot, exc)
            self.notify(f"Load failed: {exc}", Severity.DANGER)
            return False
        if snapshot is None:
            self.notify(f"No saved game in slot '{slot}'.", Severity.WARNING)
            return False

        try:
            restored = from_snapshot(snapshot, self.story.quest_templates())
        except SnapshotVersionError as exc:
            self.notify(str(exc), Severity.WARNING)
            return False
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Save slot %s is unreadable: %s", slot, exc)
            self.notify("Save data is corrupt and could not be loaded.", Severity.DANGER)
            return False

        self.progression.player = restored.player
        self.galaxy.restore(restored.systems, restored.markets)
        self.story.quests = restored.quests
        self.story.current_chapter = restored.current_chapter
        self.story.flags = restored.flags
        self.story.completed_events = restored.completed_events
        self.story.active_event = None
        self.dialogue.end()
        self._intro_pending = False
        self.combat = restored.combat
        self.tick = restored.tick
        self._pending_travel = None
        self.started = True
        if restored.skipped_quests:
            logger.warning("Ignored unknown quests in save: %s", ", ".join(restored.skipped_quests))
        self.notify(f"Game loaded from slot '{slot}'.", Severity.SUCCESS)
        return True

    def delete_save(self, slot: str) -> bool:
        try:
            deleted = self.save_repo.delete(slot)
        except (SaveStoreError, OSError) as exc:
            self.notify(f"Delete failed: {exc}", Severity.DANGER)
            return False
        if not deleted:
            self.notify(f"No saved game in slot '{slot}'.", Severity.WARNING)
        return deleted

    def list_saves(self) -> List[SaveSlotInfo]:
        try:
            return self.save_repo.list()
        except (SaveStoreError, OSError) as exc:
            self.notify(f"Could not list saves: {exc}", Severity.WARNING)
            return []

    # Views

    def status_view(self) -> StatusView:
        return to_status_view(
            player=self.player,
            system=self.galaxy.get_system(self.player.current_system),
            tick=self.tick,
            chapter=self.story.current_chapter,
            active_quests=self.story.active_quests(),
            refuel_cost=self.progression.refuel_cost(),
            repair_cost=self.progression.repair_cost(),
        )

    def market_view(self) -> List[MarketRowView]:
        market = self.galaxy.get_market(self.player.current_system)
        if market is None:
            return []
        return to_market_rows(market, self._commodities, self.player)

    def galaxy_view(self) -> List[RouteView]:
        current = self.player.current_system
        return [
            to_route_view(
                system,
                fuel_cost=self.galaxy.get_travel_cost(current, system.id),
                visited=system.id in self.player.visited_systems,
            )
            for system in self.galaxy.get_connections(current)
        ]
