from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from nexus.domain.repositories import SaveRepository, SaveSlotInfo, SaveStoreError

_SLOT_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
_SUFFIX = ".json"


class FileSaveRepository(SaveRepository):
    """Fallback save store: one JSON document per slot under ``root_dir``."""

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_slot(self, slot: str) -> Path:
        name = str(slot)
        if _SLOT_PATTERN.match(name) is None:
            raise SaveStoreError(f"Invalid save slot name: {slot!r}")
        return self.root_dir / f"{name}{_SUFFIX}"

    def save(self, snapshot: Dict[str, Any], slot: str = "auto") -> None:
        path = self._path_for_slot(slot)
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_text(json.dumps(snapshot, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise SaveStoreError(f"Could not write {path.name}: {exc}") from exc

    def load(self, slot: str = "auto") -> Optional[Dict[str, Any]]:
        path = self._path_for_slot(slot)
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SaveStoreError(f"Could not read {path.name}: {exc}") from exc
        if not isinstance(payload, dict):
            raise SaveStoreError(f"{path.name} does not hold a snapshot")
        return payload

    def delete(self, slot: str) -> bool:
        path = self._path_for_slot(slot)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise SaveStoreError(f"Could not delete {path.name}: {exc}") from exc
        return True

    def list(self) -> List[SaveSlotInfo]:
        infos: List[SaveSlotInfo] = []
        for path in sorted(self.root_dir.glob(f"*{_SUFFIX}")):
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                continue
            if not isinstance(payload, dict):
                continue
            infos.append(
                SaveSlotInfo(
                    slot=path.stem,
                    timestamp=int(payload.get("timestamp", 0)),
                    version=int(payload.get("version", 0)),
                )
            )
        return infos
