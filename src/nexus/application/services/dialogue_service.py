from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from nexus.application.services.progression_service import ProgressionService
from nexus.domain.models.story import Consequence, DialogueNode, DialogueOption, DialogueRequirement

logger = logging.getLogger(__name__)

ConsequenceApplier = Callable[[Sequence[Consequence]], None]


class DialogueService:
    """Walks a dialogue node graph by explicit id jumps."""

    def __init__(self, progression: ProgressionService, apply_consequences: ConsequenceApplier) -> None:
        self.progression = progression
        self._apply_consequences = apply_consequences
        self._nodes: Dict[str, DialogueNode] = {}
        self._current_id: Optional[str] = None
        self._on_complete: Optional[Callable[[], None]] = None
        self.topic: Optional[str] = None

    @property
    def active(self) -> bool:
        return self._current_id is not None

    def start(
        self,
        nodes: Sequence[DialogueNode],
        start_id: Optional[str] = None,
        *,
        topic: Optional[str] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> Optional[DialogueNode]:
        if not nodes:
            logger.warning("Dialogue %s has no nodes", topic or "<untitled>")
            return None
        self._nodes = {node.id: node for node in nodes}
        first = start_id or nodes[0].id
        if first not in self._nodes:
            logger.warning("Dialogue start node %s not found", first)
            self._reset()
            return None
        self._current_id = first
        self._on_complete = on_complete
        self.topic = topic
        return self._nodes[first]

    def current_node(self) -> Optional[DialogueNode]:
        if self._current_id is None:
            return None
        return self._nodes.get(self._current_id)

    def available_options(self) -> List[DialogueOption]:
        node = self.current_node()
        if node is None:
            return []
        return [option for option in node.options if self.requirement_met(option.requires)]

    def requirement_met(self, requirement: Optional[DialogueRequirement]) -> bool:
        if requirement is None:
            return True
        if requirement.item:
            # Inventory items are not modelled, so item gates never open.
            return False
        if requirement.faction and requirement.min_reputation is not None:
            if self.progression.reputation(requirement.faction) < int(requirement.min_reputation):
                return False
        if requirement.flag and not self.progression.has_flag(requirement.flag):
            return False
        if requirement.stat_key and requirement.stat_min is not None:
            if self._stat_value(requirement.stat_key) < int(requirement.stat_min):
                return False
        return True

    def _stat_value(self, key: str) -> int:
        player = self.progression.player
        if key in {"level", "credits", "xp"}:
            return int(getattr(player, key))
        return int(getattr(player.stats, key, 0) or 0)

    def select_option(self, option_id: str) -> Optional[DialogueNode]:
        """Apply the option's consequences and move on. Returns the next node or None when finished."""
        node = self.current_node()
        if node is None:
            logger.warning("Option %s selected with no active dialogue", option_id)
            return None
        option = next((row for row in self.available_options() if row.id == option_id), None)
        if option is None:
            logger.warning("Dialogue option %s not found on node %s", option_id, node.id)
            return node

        if option.consequences:
            self._apply_consequences(option.consequences)

        next_id = option.next_node_id
        if next_id is None:
            self._finish()
            return None
        if next_id not in self._nodes:
            logger.warning("Dialogue node %s referenced by %s not found; ending dialogue", next_id, option.id)
            self._finish()
            return None
        self._current_id = next_id
        return self._nodes[next_id]

    def end(self) -> None:
        self._reset()

    def _finish(self) -> None:
        callback = self._on_complete
        self._reset()
        if callback is not None:
            callback()

    def _reset(self) -> None:
        self._nodes = {}
        self._current_id = None
        self._on_complete = None
        self.topic = None
