import logging
import os

from sqlalchemy.exc import SQLAlchemyError

from nexus.application.services.event_bus import EventBus
from nexus.application.services.game_service import GameService
from nexus.application.services.notification_handlers import register_notification_handlers
from nexus.application.services.notifications import NotificationCenter
from nexus.application.services.random_service import RandomService
from nexus.domain.repositories import SaveRepository, SaveStoreError
from nexus.infrastructure.db.fallback_save_repository import FallbackSaveRepository
from nexus.infrastructure.db.file.file_save_repository import FileSaveRepository
from nexus.infrastructure.db.settings import save_dir
from nexus.infrastructure.inmemory.inmemory_content_repo import InMemoryContentRepository
from nexus.infrastructure.inmemory.inmemory_save_repo import InMemorySaveRepository

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


def configure_logging(level: str | None = None) -> None:
    name = (level or os.getenv("NEXUS_LOG_LEVEL", "WARNING")).strip().upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_rng() -> RandomService:
    raw = os.getenv("NEXUS_SEED", "").strip()
    if not raw:
        return RandomService()
    try:
        return RandomService(int(raw))
    except ValueError:
        return RandomService.from_namespace("session", {"seed": raw})


def _build_file_store() -> SaveRepository:
    try:
        return FileSaveRepository(save_dir())
    except OSError as exc:
        logger.warning("Save directory unavailable, saves will not survive this session: %s", exc)
        return InMemorySaveRepository()


def _build_sql_store() -> SaveRepository:
    from nexus.infrastructure.db.sql.save_repository import SqlSaveRepository

    repo = SqlSaveRepository()
    # Probe early so the fallback decision happens before the first save.
    repo.ensure_schema()
    return repo


def build_save_repository() -> SaveRepository:
    fallback = _build_file_store()
    if os.getenv("NEXUS_DISABLE_SQL", "0").strip().lower() in _TRUTHY:
        logger.info("SQL save store disabled; using %s", type(fallback).__name__)
        return fallback
    try:
        primary = _build_sql_store()
    except (SaveStoreError, SQLAlchemyError) as exc:
        logger.warning("SQL save store unavailable, falling back to %s. Reason: %s", type(fallback).__name__, exc)
        return fallback
    logger.info("Save stores: SqlSaveRepository with %s fallback", type(fallback).__name__)
    return FallbackSaveRepository(primary, fallback)


def create_game_service(save_repo: SaveRepository | None = None) -> GameService:
    content = InMemoryContentRepository()
    event_bus = EventBus()
    notifications = NotificationCenter()
    quest_titles = {quest.id: quest.title for quest in content.list_quests()}
    chapter_titles = {chapter.id: chapter.title for chapter in content.list_chapters()}
    register_notification_handlers(
        event_bus,
        notifications,
        quest_title=lambda quest_id: quest_titles.get(quest_id, quest_id),
        chapter_title=lambda chapter_id: chapter_titles.get(chapter_id, ""),
    )
    return GameService(
        content,
        save_repo if save_repo is not None else build_save_repository(),
        rng=build_rng(),
        event_bus=event_bus,
        notifications=notifications,
    )
