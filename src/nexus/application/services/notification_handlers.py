from __future__ import annotations

from typing import Callable, Optional

from nexus.application.services.event_bus import EventBus
from nexus.application.services.notifications import NotificationCenter, Severity
from nexus.domain.events import ChapterAdvancedEvent, LevelUpEvent, QuestCompletedEvent, ReputationChangedEvent


def register_notification_handlers(
    event_bus: EventBus,
    notifications: NotificationCenter,
    *,
    quest_title: Optional[Callable[[str], str]] = None,
    chapter_title: Optional[Callable[[int], str]] = None,
) -> None:
    def _on_level_up(event: object) -> None:
        if isinstance(event, LevelUpEvent):
            notifications.notify(f"Level up! You are now level {event.to_level}.", Severity.SUCCESS)

    def _on_quest_completed(event: object) -> None:
        if isinstance(event, QuestCompletedEvent):
            title = quest_title(event.quest_id) if quest_title is not None else event.quest_id
            notifications.notify(f"Quest complete: {title}", Severity.SUCCESS)

    def _on_chapter_advanced(event: object) -> None:
        if isinstance(event, ChapterAdvancedEvent):
            title = chapter_title(event.to_chapter) if chapter_title is not None else ""
            suffix = f": {title}" if title else ""
            notifications.notify(f"Chapter {event.to_chapter} begins{suffix}", Severity.INFO)

    def _on_reputation_changed(event: object) -> None:
        if isinstance(event, ReputationChangedEvent):
            notifications.notify(
                f"Reputation with {event.faction_id} {event.delta:+d} (now {event.score_after}).",
                Severity.INFO,
            )

    event_bus.subscribe(LevelUpEvent, _on_level_up, priority=50)
    event_bus.subscribe(QuestCompletedEvent, _on_quest_completed, priority=50)
    event_bus.subscribe(ChapterAdvancedEvent, _on_chapter_advanced, priority=50)
    event_bus.subscribe(ReputationChangedEvent, _on_reputation_changed, priority=100)
