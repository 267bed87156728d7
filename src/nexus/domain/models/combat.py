from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from nexus.domain.models.ship import EnemyShip


class CombatAction(str, Enum):
    ATTACK = "attack"
    HEAVY_ATTACK = "heavy_attack"
    DEFEND = "defend"
    REPAIR = "repair"
    SPECIAL = "special"
    FLEE = "flee"


class CombatResult(str, Enum):
    PENDING = "pending"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


class CombatActor(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"


@dataclass(frozen=True)
class CombatLogEntry:
    round: int
    actor: CombatActor
    action: str
    message: str
    damage: Optional[int] = None


@dataclass
class CombatState:
    active: bool = False
    enemy: Optional[EnemyShip] = None
    round: int = 0
    log: List[CombatLogEntry] = field(default_factory=list)
    player_turn: bool = False
    result: CombatResult = CombatResult.PENDING
    reward_credits: int = 0
    reward_xp: int = 0
    enemy_fled: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.result != CombatResult.PENDING
