from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from nexus.domain.models.player import FlagValue


class QuestStatus(str, Enum):
    LOCKED = "locked"
    AVAILABLE = "available"
    ACTIVE = "active"
    COMPLETED = "completed"
    # Declared for content authors; nothing transitions a quest here yet.
    FAILED = "failed"


class ObjectiveType(str, Enum):
    TRAVEL = "travel"
    TRADE = "trade"
    COMBAT = "combat"
    DIALOGUE = "dialogue"
    EXPLORE = "explore"


class EventType(str, Enum):
    ENCOUNTER = "encounter"
    DISCOVERY = "discovery"
    DISTRESS = "distress"
    ANOMALY = "anomaly"
    MARKET = "market"
    STORY = "story"


@dataclass(frozen=True)
class ReputationConsequence:
    faction: str
    delta: int


@dataclass(frozen=True)
class CreditsConsequence:
    amount: int


@dataclass(frozen=True)
class XpConsequence:
    amount: int


@dataclass(frozen=True)
class FlagConsequence:
    key: str
    value: FlagValue = True


@dataclass(frozen=True)
class QuestConsequence:
    quest_id: str


@dataclass(frozen=True)
class ItemConsequence:
    item_id: str


Consequence = Union[
    ReputationConsequence,
    CreditsConsequence,
    XpConsequence,
    FlagConsequence,
    QuestConsequence,
    ItemConsequence,
]


@dataclass
class QuestObjective:
    id: str
    description: str
    type: ObjectiveType
    target: str
    required: int = 1
    current: int = 0
    completed: bool = False

    def advance(self, amount: int) -> bool:
        """Add progress, clamped at the requirement. Returns True if anything changed."""
        if self.completed or amount <= 0:
            return False
        self.current = min(self.required, self.current + int(amount))
        if self.current >= self.required:
            self.completed = True
        return True


@dataclass
class Quest:
    id: str
    title: str
    description: str
    chapter: int
    status: QuestStatus
    objectives: List[QuestObjective] = field(default_factory=list)
    rewards: List[Consequence] = field(default_factory=list)
    is_main: bool = False

    @property
    def all_objectives_completed(self) -> bool:
        return all(objective.completed for objective in self.objectives)

    def objective(self, objective_id: str) -> Optional[QuestObjective]:
        for objective in self.objectives:
            if objective.id == objective_id:
                return objective
        return None


@dataclass(frozen=True)
class DialogueRequirement:
    faction: Optional[str] = None
    min_reputation: Optional[int] = None
    stat_key: Optional[str] = None
    stat_min: Optional[int] = None
    flag: Optional[str] = None
    item: Optional[str] = None


@dataclass(frozen=True)
class DialogueOption:
    id: str
    text: str
    next_node_id: Optional[str] = None
    consequences: tuple[Consequence, ...] = ()
    requires: Optional[DialogueRequirement] = None


@dataclass(frozen=True)
class DialogueNode:
    id: str
    speaker: str
    text: str
    options: tuple[DialogueOption, ...] = ()


@dataclass(frozen=True)
class ChapterUnlock:
    chapter: Optional[int] = None
    flag: Optional[str] = None


@dataclass(frozen=True)
class Chapter:
    id: int
    title: str
    description: str
    quests: tuple[str, ...] = ()
    intro_dialogue: tuple[DialogueNode, ...] = ()
    unlock_condition: Optional[ChapterUnlock] = None


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    system_id: str
    nodes: tuple[DialogueNode, ...]

    @property
    def start_node_id(self) -> str:
        return self.nodes[0].id


@dataclass(frozen=True)
class EventChoice:
    text: str
    outcome: str
    consequences: tuple[Consequence, ...] = ()


@dataclass(frozen=True)
class EventCondition:
    min_danger: Optional[int] = None
    max_danger: Optional[int] = None
    faction: Optional[str] = None
    flag: Optional[str] = None


@dataclass(frozen=True)
class GameEvent:
    id: str
    title: str
    description: str
    type: EventType
    choices: tuple[EventChoice, ...]
    condition: Optional[EventCondition] = None
