from __future__ import annotations

import copy
import logging
from typing import Callable, Dict, List, Optional, Sequence

from nexus.application.services.balance_tables import EVENT_TRIGGER_CHANCE
from nexus.application.services.progression_service import ProgressionService
from nexus.application.services.random_service import RandomService
from nexus.domain.events import ChapterAdvancedEvent, QuestCompletedEvent
from nexus.domain.models.galaxy import StarSystem
from nexus.domain.models.player import FlagValue
from nexus.domain.models.story import (
    Chapter,
    Consequence,
    CreditsConsequence,
    FlagConsequence,
    GameEvent,
    ItemConsequence,
    ObjectiveType,
    Quest,
    QuestConsequence,
    QuestStatus,
    ReputationConsequence,
    XpConsequence,
)

logger = logging.getLogger(__name__)

CREDITS_THRESHOLD_TARGET = "credits_500"


def chapter_complete_flag(chapter: int) -> str:
    return f"chapter_{int(chapter)}_complete"


class StoryService:
    def __init__(
        self,
        progression: ProgressionService,
        rng: RandomService,
        *,
        quests: Sequence[Quest],
        chapters: Sequence[Chapter],
        events: Sequence[GameEvent],
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self.progression = progression
        self.rng = rng
        self._quest_templates = list(quests)
        self._chapters = {chapter.id: chapter for chapter in chapters}
        self._events = list(events)
        self._event_publisher = event_publisher
        self.quests: Dict[str, Quest] = {}
        self.current_chapter = 1
        self.flags: Dict[str, FlagValue] = {}
        self.completed_events: List[str] = []
        self.active_event: Optional[GameEvent] = None

    def _publish(self, event: object) -> None:
        if self._event_publisher is not None:
            self._event_publisher(event)

    def init(self) -> None:
        self.quests = {quest.id: copy.deepcopy(quest) for quest in self._quest_templates}
        self.current_chapter = 1
        self.flags = {}
        self.completed_events = []
        self.active_event = None
        for quest in self.quests.values():
            if quest.chapter == 1 and quest.status == QuestStatus.AVAILABLE:
                quest.status = QuestStatus.ACTIVE

    def get_quest(self, quest_id: str) -> Optional[Quest]:
        return self.quests.get(quest_id)

    def active_quests(self) -> List[Quest]:
        return [quest for quest in self.quests.values() if quest.status == QuestStatus.ACTIVE]

    def main_quests(self) -> List[Quest]:
        return [quest for quest in self.quests.values() if quest.is_main]

    def current_chapter_def(self) -> Optional[Chapter]:
        return self._chapters.get(self.current_chapter)

    def activate_quest(self, quest_id: str) -> bool:
        quest = self.quests.get(quest_id)
        if quest is None:
            logger.warning("Cannot activate unknown quest %s", quest_id)
            return False
        if quest.status not in (QuestStatus.LOCKED, QuestStatus.AVAILABLE):
            return False
        quest.status = QuestStatus.ACTIVE
        return True

    def apply_consequences(self, consequences: Sequence[Consequence]) -> None:
        for consequence in consequences:
            if isinstance(consequence, CreditsConsequence):
                self.progression.add_credits(consequence.amount)
            elif isinstance(consequence, XpConsequence):
                self.progression.add_xp(consequence.amount)
            elif isinstance(consequence, ReputationConsequence):
                self.progression.add_reputation(consequence.faction, consequence.delta)
            elif isinstance(consequence, FlagConsequence):
                self.flags[consequence.key] = consequence.value
                self.progression.set_flag(consequence.key, consequence.value)
            elif isinstance(consequence, QuestConsequence):
                self.activate_quest(consequence.quest_id)
            elif isinstance(consequence, ItemConsequence):
                logger.warning("Item consequence %s ignored; inventory items are not modelled", consequence.item_id)
            else:
                raise TypeError(f"Unknown consequence kind: {type(consequence).__name__}")

    def update_quest_objective(self, quest_id: str, objective_id: str, progress: int) -> bool:
        quest = self.quests.get(quest_id)
        if quest is None or quest.status != QuestStatus.ACTIVE:
            return False
        objective = quest.objective(objective_id)
        if objective is None:
            logger.warning("Quest %s has no objective %s", quest_id, objective_id)
            return False
        changed = objective.advance(progress)
        if changed and quest.all_objectives_completed:
            self.complete_quest(quest_id)
        return changed

    def complete_quest(self, quest_id: str) -> bool:
        quest = self.quests.get(quest_id)
        if quest is None or quest.status == QuestStatus.COMPLETED:
            return False
        quest.status = QuestStatus.COMPLETED
        self.apply_consequences(quest.rewards)
        self.progression.record_quest_complete()
        self._publish(QuestCompletedEvent(quest_id=quest.id, chapter=quest.chapter))
        self.check_chapter_progression()
        return True

    def check_chapter_progression(self) -> bool:
        advanced = False
        while self._chapter_flag_set(self.current_chapter) and self.current_chapter + 1 in self._chapters:
            previous = self.current_chapter
            self.current_chapter += 1
            for quest in self.quests.values():
                if quest.chapter == self.current_chapter and quest.status == QuestStatus.LOCKED:
                    quest.status = QuestStatus.ACTIVE
            self._publish(ChapterAdvancedEvent(from_chapter=previous, to_chapter=self.current_chapter))
            advanced = True
        return advanced

    def _chapter_flag_set(self, chapter: int) -> bool:
        key = chapter_complete_flag(chapter)
        return bool(self.flags.get(key)) or self.progression.has_flag(key)

    def _advance_objectives(self, objective_type: ObjectiveType, targets: set[str], amount: int = 1) -> None:
        for quest in list(self.active_quests()):
            for objective in quest.objectives:
                if objective.type != objective_type or objective.completed:
                    continue
                if objective.target in targets:
                    self.update_quest_objective(quest.id, objective.id, amount)

    def on_system_visited(self, system_id: str) -> None:
        self._advance_objectives(ObjectiveType.TRAVEL, {system_id, "any"})
        self._advance_objectives(ObjectiveType.EXPLORE, {system_id, "new_systems"})

    def on_trade_completed(self, credits: int) -> None:
        self._advance_objectives(ObjectiveType.TRADE, {"any"})
        self._advance_objectives(ObjectiveType.TRADE, {CREDITS_THRESHOLD_TARGET}, amount=int(credits))

    def on_combat_won(self) -> None:
        for quest in list(self.active_quests()):
            for objective in quest.objectives:
                if objective.type == ObjectiveType.COMBAT and not objective.completed:
                    self.update_quest_objective(quest.id, objective.id, 1)

    def on_dialogue_completed(self, contact_id: str) -> None:
        self._advance_objectives(ObjectiveType.DIALOGUE, {contact_id})

    def eligible_events(self, system: StarSystem) -> List[GameEvent]:
        eligible: List[GameEvent] = []
        for event in self._events:
            if event.id in self.completed_events:
                continue
            condition = event.condition
            if condition is not None:
                if condition.min_danger is not None and system.danger_level < condition.min_danger:
                    continue
                if condition.max_danger is not None and system.danger_level > condition.max_danger:
                    continue
                if condition.faction is not None and system.faction != condition.faction:
                    continue
                if condition.flag is not None and not (self.flags.get(condition.flag) or self.progression.has_flag(condition.flag)):
                    continue
            eligible.append(event)
        return eligible

    def try_random_event(self, system: StarSystem) -> Optional[GameEvent]:
        if self.active_event is not None:
            return None
        if not self.rng.random_chance(EVENT_TRIGGER_CHANCE):
            return None
        eligible = self.eligible_events(system)
        if not eligible:
            return None
        self.active_event = self.rng.random_choice(eligible)
        return self.active_event

    def resolve_event(self, choice_index: int) -> str:
        event = self.active_event
        if event is None:
            raise ValueError("No event is awaiting a decision")
        if not 0 <= int(choice_index) < len(event.choices):
            raise ValueError(f"Choice {choice_index} is out of range for event {event.id}")
        choice = event.choices[int(choice_index)]
        self.apply_consequences(choice.consequences)
        self.completed_events.append(event.id)
        self.active_event = None
        return choice.outcome

    def event_by_id(self, event_id: str) -> Optional[GameEvent]:
        return next((event for event in self._events if event.id == event_id), None)

    def quest_templates(self) -> Dict[str, Quest]:
        return {quest.id: quest for quest in self._quest_templates}
