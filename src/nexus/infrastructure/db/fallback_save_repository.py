from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from nexus.domain.repositories import SaveRepository, SaveSlotInfo, SaveStoreError

logger = logging.getLogger(__name__)


class FallbackSaveRepository(SaveRepository):
    """Two-tier store: every request goes to ``primary`` first, then ``fallback``."""

    def __init__(self, primary: SaveRepository, fallback: SaveRepository) -> None:
        self.primary = primary
        self.fallback = fallback

    def save(self, snapshot: Dict[str, Any], slot: str = "auto") -> None:
        try:
            self.primary.save(snapshot, slot)
            return
        except SaveStoreError as exc:
            logger.warning("Primary save store failed for slot %s: %s", slot, exc)
        try:
            self.fallback.save(snapshot, slot)
        except SaveStoreError as exc:
            logger.warning("Fallback save store failed for slot %s: %s", slot, exc)
            raise SaveStoreError(f"No save store accepted slot {slot}") from exc

    def load(self, slot: str = "auto") -> Optional[Dict[str, Any]]:
        primary_failed = False
        try:
            snapshot = self.primary.load(slot)
            if snapshot is not None:
                return snapshot
        except SaveStoreError as exc:
            primary_failed = True
            logger.warning("Primary save store could not load slot %s: %s", slot, exc)
        try:
            return self.fallback.load(slot)
        except SaveStoreError as exc:
            logger.warning("Fallback save store could not load slot %s: %s", slot, exc)
            if primary_failed:
                raise SaveStoreError(f"No save store could load slot {slot}") from exc
            return None

    def delete(self, slot: str) -> bool:
        deleted = False
        failures = 0
        for tier in (self.primary, self.fallback):
            try:
                deleted = tier.delete(slot) or deleted
            except SaveStoreError as exc:
                failures += 1
                logger.warning("Save store could not delete slot %s: %s", slot, exc)
        if failures == 2:
            raise SaveStoreError(f"No save store could delete slot {slot}")
        return deleted

    def list(self) -> List[SaveSlotInfo]:
        newest: Dict[str, SaveSlotInfo] = {}
        failures = 0
        for tier in (self.primary, self.fallback):
            try:
                infos = tier.list()
            except SaveStoreError as exc:
                failures += 1
                logger.warning("Save store could not list slots: %s", exc)
                continue
            for info in infos:
                current = newest.get(info.slot)
                if current is None or info.timestamp > current.timestamp:
                    newest[info.slot] = info
        if failures == 2:
            raise SaveStoreError("No save store could list slots")
        return [newest[slot] for slot in sorted(newest)]
