import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from nexus.application.services.event_bus import EventBus
from nexus.application.services.notification_handlers import register_notification_handlers
from nexus.application.services.notifications import NotificationCenter, Severity
from nexus.domain.events import ChapterAdvancedEvent, LevelUpEvent, QuestCompletedEvent, ReputationChangedEvent


class EventBusTests(unittest.TestCase):
    def test_publish_notifies_all_handlers_for_event_type(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        class ExampleEvent:
            pass

        bus.subscribe(ExampleEvent, lambda evt: seen.append("first"))
        bus.subscribe(ExampleEvent, lambda evt: seen.append("second"))

        bus.publish(ExampleEvent())

        self.assertEqual(["first", "second"], seen)

    def test_publish_honors_priority_order(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        class ExampleEvent:
            pass

        bus.subscribe(ExampleEvent, lambda evt: seen.append("normal"), priority=100)
        bus.subscribe(ExampleEvent, lambda evt: seen.append("early"), priority=10)

        bus.publish(ExampleEvent())

        self.assertEqual(["early", "normal"], seen)

    def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        class ExampleEvent:
            pass

        def _boom(evt: object) -> None:
            raise RuntimeError("handler failed")

        bus.subscribe(ExampleEvent, _boom, priority=1)
        bus.subscribe(ExampleEvent, lambda evt: seen.append("after"))

        with self.assertLogs("nexus.application.services.event_bus", level="ERROR"):
            bus.publish(ExampleEvent())

        self.assertEqual(["after"], seen)
        self.assertEqual(1, len(bus.last_publish_errors()))

    def test_unsubscribe_and_history(self) -> None:
        bus = EventBus()
        seen: list[object] = []
        handler = seen.append
        bus.subscribe(LevelUpEvent, handler)

        self.assertTrue(bus.unsubscribe(LevelUpEvent, handler))
        self.assertFalse(bus.unsubscribe(LevelUpEvent, handler))
        bus.publish(LevelUpEvent(1, 2, 0))
        bus.publish(QuestCompletedEvent("q_cargo_run", 1))

        self.assertEqual([], seen)
        self.assertEqual(2, len(bus.published()))
        self.assertEqual(1, len(bus.published(QuestCompletedEvent)))


class NotificationTests(unittest.TestCase):
    def test_drain_empties_the_queue(self) -> None:
        center = NotificationCenter()
        center.notify("Docked.")
        center.notify("Hull breach!", "danger")

        drained = center.drain()

        self.assertEqual([Severity.INFO, Severity.DANGER], [row.severity for row in drained])
        self.assertEqual([], center.pending())

    def test_unknown_severity_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            NotificationCenter().notify("?", "catastrophic")

    def test_broken_listener_does_not_block_delivery(self) -> None:
        center = NotificationCenter()
        received: list[str] = []

        def _broken(notification: object) -> None:
            raise RuntimeError("listener failed")

        center.add_listener(_broken)
        center.add_listener(lambda row: received.append(row.message))

        with self.assertLogs("nexus.application.services.notifications", level="ERROR"):
            center.notify("Arrived.")

        self.assertEqual(["Arrived."], received)
        self.assertEqual(1, len(center.pending()))

    def test_domain_events_become_player_notifications(self) -> None:
        bus = EventBus()
        center = NotificationCenter()
        register_notification_handlers(
            bus,
            center,
            quest_title=lambda quest_id: {"q_cargo_run": "Cargo Runner"}.get(quest_id, quest_id),
            chapter_title=lambda chapter: "Echoes" if chapter == 2 else "",
        )

        bus.publish(LevelUpEvent(from_level=1, to_level=2, xp=5))
        bus.publish(QuestCompletedEvent(quest_id="q_cargo_run", chapter=1))
        bus.publish(ChapterAdvancedEvent(from_chapter=1, to_chapter=2))
        bus.publish(ReputationChangedEvent(faction_id="hegemony", delta=-5, score_after=-10))

        messages = [row.message for row in center.drain()]
        self.assertEqual(
            [
                "Level up! You are now level 2.",
                "Quest complete: Cargo Runner",
                "Chapter 2 begins: Echoes",
                "Reputation with hegemony -5 (now -10).",
            ],
            messages,
        )


if __name__ == "__main__":
    unittest.main()
