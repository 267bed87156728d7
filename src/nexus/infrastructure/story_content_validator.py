"""Validate the authored story content: quests, chapters, dialogues and events.

Usage examples:
    python -m nexus.infrastructure.story_content_validator
"""

from __future__ import annotations

import argparse
from typing import Iterable, Sequence

from nexus.domain.models.story import (
    DialogueNode,
    ObjectiveType,
    QuestConsequence,
    ReputationConsequence,
)
from nexus.domain.repositories import ContentRepository
from nexus.infrastructure.inmemory.inmemory_content_repo import InMemoryContentRepository


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(description="Validate quest, chapter, dialogue and event content")


def validate_dialogue_graph(
    label: str,
    nodes: Sequence[DialogueNode],
    *,
    faction_ids: set[str],
    quest_ids: set[str],
) -> list[str]:
    errors: list[str] = []
    if not nodes:
        return [f"{label}: dialogue has no nodes"]
    node_ids = [node.id for node in nodes]
    duplicates = sorted({node_id for node_id in node_ids if node_ids.count(node_id) > 1})
    for node_id in duplicates:
        errors.append(f"{label}: duplicate node id {node_id}")
    known = set(node_ids)
    for node in nodes:
        if not node.options:
            errors.append(f"{label}.{node.id}: node has no options")
        for option in node.options:
            where = f"{label}.{node.id}.{option.id}"
            if option.next_node_id is not None and option.next_node_id not in known:
                errors.append(f"{where}: next node {option.next_node_id} does not exist")
            requirement = option.requires
            if requirement is not None and requirement.faction is not None and requirement.faction not in faction_ids:
                errors.append(f"{where}: requirement names unknown faction {requirement.faction}")
            errors.extend(
                _consequence_errors(where, option.consequences, faction_ids=faction_ids, quest_ids=quest_ids)
            )
    return errors


def _consequence_errors(where: str, consequences: Iterable[object], *, faction_ids: set[str], quest_ids: set[str]) -> list[str]:
    errors: list[str] = []
    for consequence in consequences:
        if isinstance(consequence, ReputationConsequence) and consequence.faction not in faction_ids:
            errors.append(f"{where}: consequence names unknown faction {consequence.faction}")
        if isinstance(consequence, QuestConsequence) and consequence.quest_id not in quest_ids:
            errors.append(f"{where}: consequence activates unknown quest {consequence.quest_id}")
    return errors


def validate_story_content(content: ContentRepository) -> list[str]:
    errors: list[str] = []
    faction_ids = {faction.id for faction in content.list_factions()}
    system_ids = {system.id for system in content.list_systems()}
    contacts = content.list_contacts()
    contact_ids = {contact.id for contact in contacts}
    enemy_keys = {template.name.lower().replace(" ", "_") for template in content.list_enemy_templates()}
    quests = content.list_quests()
    quest_ids = {quest.id for quest in quests}
    chapters = content.list_chapters()
    chapter_ids = {chapter.id for chapter in chapters}

    if len(quest_ids) != len(quests):
        errors.append("quests: duplicate quest ids")

    for quest in quests:
        if quest.chapter not in chapter_ids:
            errors.append(f"quest {quest.id}: chapter {quest.chapter} does not exist")
        if not quest.objectives:
            errors.append(f"quest {quest.id}: no objectives")
        objective_ids = [objective.id for objective in quest.objectives]
        if len(set(objective_ids)) != len(objective_ids):
            errors.append(f"quest {quest.id}: duplicate objective ids")
        for objective in quest.objectives:
            where = f"quest {quest.id}.{objective.id}"
            if objective.required < 1:
                errors.append(f"{where}: required must be at least 1")
            if objective.type == ObjectiveType.TRAVEL and objective.target not in system_ids | {"any"}:
                errors.append(f"{where}: unknown travel target {objective.target}")
            if objective.type == ObjectiveType.DIALOGUE and objective.target not in contact_ids:
                errors.append(f"{where}: unknown contact {objective.target}")
            if objective.type == ObjectiveType.COMBAT and objective.target not in enemy_keys | {"any"}:
                errors.append(f"{where}: unknown combat target {objective.target}")
        errors.extend(
            _consequence_errors(f"quest {quest.id}", quest.rewards, faction_ids=faction_ids, quest_ids=quest_ids)
        )

    quest_chapters = {quest.id: quest.chapter for quest in quests}
    for chapter in chapters:
        for quest_id in chapter.quests:
            if quest_id not in quest_chapters:
                errors.append(f"chapter {chapter.id}: unknown quest {quest_id}")
            elif quest_chapters[quest_id] != chapter.id:
                errors.append(f"chapter {chapter.id}: quest {quest_id} belongs to chapter {quest_chapters[quest_id]}")
        unlock = chapter.unlock_condition
        if unlock is not None:
            if unlock.chapter is not None and unlock.chapter not in chapter_ids:
                errors.append(f"chapter {chapter.id}: unlock names unknown chapter {unlock.chapter}")
        if chapter.intro_dialogue:
            errors.extend(
                validate_dialogue_graph(
                    f"chapter {chapter.id} intro",
                    chapter.intro_dialogue,
                    faction_ids=faction_ids,
                    quest_ids=quest_ids,
                )
            )
        if chapter.id + 1 in chapter_ids and not _chapter_can_complete(chapter.id, quests):
            errors.append(f"chapter {chapter.id}: no quest sets chapter_{chapter.id}_complete")

    for contact in contacts:
        if contact.system_id not in system_ids:
            errors.append(f"contact {contact.id}: unknown system {contact.system_id}")
        errors.extend(
            validate_dialogue_graph(f"contact {contact.id}", contact.nodes, faction_ids=faction_ids, quest_ids=quest_ids)
        )

    for event in content.list_events():
        if not event.choices:
            errors.append(f"event {event.id}: no choices")
        if event.condition is not None and event.condition.faction is not None:
            if event.condition.faction not in faction_ids:
                errors.append(f"event {event.id}: condition names unknown faction {event.condition.faction}")
        for index, choice in enumerate(event.choices):
            errors.extend(
                _consequence_errors(
                    f"event {event.id}.choices[{index}]",
                    choice.consequences,
                    faction_ids=faction_ids,
                    quest_ids=quest_ids,
                )
            )
    return errors


def _chapter_can_complete(chapter_id: int, quests) -> bool:
    flag = f"chapter_{chapter_id}_complete"
    return any(
        getattr(reward, "key", None) == flag
        for quest in quests
        if quest.chapter == chapter_id
        for reward in quest.rewards
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    parser.parse_args(list(argv) if argv is not None else None)

    errors = validate_story_content(InMemoryContentRepository())
    if errors:
        print(f"Story content invalid ({len(errors)} errors):")
        for message in errors:
            print(f"- {message}")
        return 1

    print("Story content valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
