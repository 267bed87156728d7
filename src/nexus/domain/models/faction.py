from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

REPUTATION_MIN = -100
REPUTATION_MAX = 100


class ReputationTier(str, Enum):
    HOSTILE = "hostile"
    UNFRIENDLY = "unfriendly"
    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    ALLIED = "allied"


@dataclass(frozen=True)
class Faction:
    id: str
    name: str
    base_reputation: int = 0
    description: str = ""
    motto: str = ""
    leader: str = ""
    traits: List[str] = field(default_factory=list)


def clamp_reputation(score: int) -> int:
    return max(REPUTATION_MIN, min(REPUTATION_MAX, int(score)))


def reputation_tier(reputation_score: int) -> ReputationTier:
    score = int(reputation_score)
    if score <= -60:
        return ReputationTier.HOSTILE
    if score <= -20:
        return ReputationTier.UNFRIENDLY
    if score <= 20:
        return ReputationTier.NEUTRAL
    if score <= 60:
        return ReputationTier.FRIENDLY
    return ReputationTier.ALLIED
