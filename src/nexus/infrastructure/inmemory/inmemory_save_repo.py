from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from nexus.domain.repositories import SaveRepository, SaveSlotInfo


class InMemorySaveRepository(SaveRepository):
    def __init__(self) -> None:
        self._slots: Dict[str, Dict[str, Any]] = {}

    def save(self, snapshot: Dict[str, Any], slot: str = "auto") -> None:
        self._slots[str(slot)] = copy.deepcopy(snapshot)

    def load(self, slot: str = "auto") -> Optional[Dict[str, Any]]:
        stored = self._slots.get(str(slot))
        return copy.deepcopy(stored) if stored is not None else None

    def delete(self, slot: str) -> bool:
        return self._slots.pop(str(slot), None) is not None

    def list(self) -> List[SaveSlotInfo]:
        return [
            SaveSlotInfo(slot=slot, timestamp=int(data.get("timestamp", 0)), version=int(data.get("version", 0)))
            for slot, data in sorted(self._slots.items())
        ]
