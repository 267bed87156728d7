from dataclasses import dataclass


@dataclass
class TickAdvanced:
    tick_after: int


@dataclass
class SystemVisited:
    system_id: str
    first_visit: bool
    tick: int


@dataclass
class TradeCompleted:
    system_id: str
    commodity_id: str
    quantity: int
    credits: int
    kind: str
    tick: int


@dataclass
class CombatEnded:
    enemy_name: str
    result: str
    round_number: int


@dataclass
class ReputationChangedEvent:
    faction_id: str
    delta: int
    score_after: int


@dataclass
class LevelUpEvent:
    from_level: int
    to_level: int
    xp: int


@dataclass
class QuestCompletedEvent:
    quest_id: str
    chapter: int


@dataclass
class ChapterAdvancedEvent:
    from_chapter: int
    to_chapter: int
