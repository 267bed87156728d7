from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from nexus.domain.repositories import SaveRepository, SaveSlotInfo, SaveStoreError
from .connection import SessionLocal


class SqlSaveRepository(SaveRepository):
    """Primary save store: one row per slot holding the snapshot as JSON."""

    def ensure_schema(self) -> None:
        try:
            with SessionLocal.begin() as session:
                session.execute(
                    text(
                        """
                        CREATE TABLE IF NOT EXISTS save_slot (
                            slot VARCHAR(64) PRIMARY KEY,
                            saved_at BIGINT NOT NULL,
                            version INTEGER NOT NULL,
                            payload_json TEXT NOT NULL
                        )
                        """
                    )
                )
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not prepare save_slot table: {exc}") from exc

    def save(self, snapshot: Dict[str, Any], slot: str = "auto") -> None:
        payload = json.dumps(snapshot)
        params = {
            "slot": str(slot),
            "saved_at": int(snapshot.get("timestamp", 0)),
            "version": int(snapshot.get("version", 0)),
            "payload": payload,
        }
        try:
            with SessionLocal.begin() as session:
                session.execute(text("DELETE FROM save_slot WHERE slot = :slot"), {"slot": params["slot"]})
                session.execute(
                    text(
                        """
                        INSERT INTO save_slot (slot, saved_at, version, payload_json)
                        VALUES (:slot, :saved_at, :version, :payload)
                        """
                    ),
                    params,
                )
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not write slot {slot}: {exc}") from exc

    def load(self, slot: str = "auto") -> Optional[Dict[str, Any]]:
        try:
            with SessionLocal() as session:
                row = session.execute(
                    text("SELECT payload_json FROM save_slot WHERE slot = :slot"),
                    {"slot": str(slot)},
                ).first()
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not read slot {slot}: {exc}") from exc
        if row is None:
            return None
        try:
            payload = json.loads(row.payload_json)
        except json.JSONDecodeError as exc:
            raise SaveStoreError(f"Slot {slot} holds a corrupt payload") from exc
        if not isinstance(payload, dict):
            raise SaveStoreError(f"Slot {slot} does not hold a snapshot")
        return payload

    def delete(self, slot: str) -> bool:
        try:
            with SessionLocal.begin() as session:
                result = session.execute(text("DELETE FROM save_slot WHERE slot = :slot"), {"slot": str(slot)})
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not delete slot {slot}: {exc}") from exc
        return bool(result.rowcount)

    def list(self) -> List[SaveSlotInfo]:
        try:
            with SessionLocal() as session:
                rows = session.execute(
                    text("SELECT slot, saved_at, version FROM save_slot ORDER BY slot")
                ).all()
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not list save slots: {exc}") from exc
        return [SaveSlotInfo(slot=str(row.slot), timestamp=int(row.saved_at), version=int(row.version)) for row in rows]
