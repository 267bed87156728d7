import sys
import tempfile
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from nexus.domain.repositories import SaveRepository, SaveSlotInfo, SaveStoreError
from nexus.infrastructure.db.fallback_save_repository import FallbackSaveRepository
from nexus.infrastructure.db.file.file_save_repository import FileSaveRepository
from nexus.infrastructure.inmemory.inmemory_save_repo import InMemorySaveRepository


def _snapshot(timestamp: int = 100, credits: int = 1000) -> dict:
    return {"version": 1, "timestamp": timestamp, "player": {"credits": credits}}


class _BrokenSaveRepository(SaveRepository):
    def save(self, snapshot, slot="auto"):
        raise SaveStoreError("primary offline")

    def load(self, slot="auto"):
        raise SaveStoreError("primary offline")

    def delete(self, slot):
        raise SaveStoreError("primary offline")

    def list(self):
        raise SaveStoreError("primary offline")


class FileSaveRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name) / "saves"
        self.repo = FileSaveRepository(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_save_load_overwrite_and_delete(self) -> None:
        self.repo.save(_snapshot(credits=10), "slot_1")
        self.repo.save(_snapshot(credits=20), "slot_1")

        self.assertEqual(20, self.repo.load("slot_1")["player"]["credits"])
        self.assertEqual([], list(self.root.glob("*.tmp")))
        self.assertTrue(self.repo.has_save("slot_1"))
        self.assertTrue(self.repo.delete("slot_1"))
        self.assertFalse(self.repo.delete("slot_1"))
        self.assertIsNone(self.repo.load("slot_1"))

    def test_list_skips_unreadable_files(self) -> None:
        self.repo.save(_snapshot(timestamp=5), "beta")
        self.repo.save(_snapshot(timestamp=9), "alpha")
        (self.root / "junk.json").write_text("{not json", encoding="utf-8")

        self.assertEqual(
            [SaveSlotInfo("alpha", 9, 1), SaveSlotInfo("beta", 5, 1)],
            self.repo.list(),
        )

    def test_slot_names_cannot_escape_the_directory(self) -> None:
        for slot in ("../evil", "", "a/b", "x" * 65):
            with self.assertRaises(SaveStoreError):
                self.repo.save(_snapshot(), slot)

    def test_corrupt_or_non_object_payload_raises(self) -> None:
        (self.root / "bad.json").write_text("[1, 2]", encoding="utf-8")
        (self.root / "worse.json").write_text("{", encoding="utf-8")
        with self.assertRaises(SaveStoreError):
            self.repo.load("bad")
        with self.assertRaises(SaveStoreError):
            self.repo.load("worse")


class InMemorySaveRepositoryTests(unittest.TestCase):
    def test_snapshots_are_isolated_copies(self) -> None:
        repo = InMemorySaveRepository()
        snapshot = _snapshot()
        repo.save(snapshot, "auto")
        snapshot["player"]["credits"] = 0

        loaded = repo.load("auto")
        loaded["player"]["credits"] = -1

        self.assertEqual(1000, repo.load("auto")["player"]["credits"])
        self.assertEqual([SaveSlotInfo("auto", 100, 1)], repo.list())


class FallbackSaveRepositoryTests(unittest.TestCase):
    def test_primary_is_used_when_healthy(self) -> None:
        primary, fallback = InMemorySaveRepository(), InMemorySaveRepository()
        repo = FallbackSaveRepository(primary, fallback)

        repo.save(_snapshot(), "auto")

        self.assertIsNotNone(primary.load("auto"))
        self.assertIsNone(fallback.load("auto"))

    def test_failed_primary_degrades_to_fallback(self) -> None:
        fallback = InMemorySaveRepository()
        repo = FallbackSaveRepository(_BrokenSaveRepository(), fallback)

        with self.assertLogs("nexus.infrastructure.db.fallback_save_repository", level="WARNING"):
            repo.save(_snapshot(credits=42), "auto")
            loaded = repo.load("auto")
            listed = repo.list()
            deleted = repo.delete("auto")

        self.assertEqual(42, loaded["player"]["credits"])
        self.assertEqual(["auto"], [info.slot for info in listed])
        self.assertTrue(deleted)

    def test_load_falls_through_when_primary_has_no_slot(self) -> None:
        primary, fallback = InMemorySaveRepository(), InMemorySaveRepository()
        fallback.save(_snapshot(credits=7), "old")
        repo = FallbackSaveRepository(primary, fallback)

        self.assertEqual(7, repo.load("old")["player"]["credits"])
        self.assertIsNone(repo.load("never"))

    def test_list_keeps_newest_copy_of_each_slot(self) -> None:
        primary, fallback = InMemorySaveRepository(), InMemorySaveRepository()
        primary.save(_snapshot(timestamp=10), "auto")
        fallback.save(_snapshot(timestamp=30), "auto")
        fallback.save(_snapshot(timestamp=5), "manual")

        listed = FallbackSaveRepository(primary, fallback).list()

        self.assertEqual([SaveSlotInfo("auto", 30, 1), SaveSlotInfo("manual", 5, 1)], listed)

    def test_both_tiers_failing_raises(self) -> None:
        repo = FallbackSaveRepository(_BrokenSaveRepository(), _BrokenSaveRepository())
        with self.assertLogs("nexus.infrastructure.db.fallback_save_repository", level="WARNING"):
            for call in (lambda: repo.save(_snapshot()), lambda: repo.load(), lambda: repo.delete("auto"), repo.list):
                with self.assertRaises(SaveStoreError):
                    call()


if __name__ == "__main__":
    unittest.main()
