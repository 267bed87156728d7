import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from nexus.application.services.progression_service import ProgressionService
from nexus.application.services.random_service import RandomService
from nexus.application.services.story_service import StoryService, chapter_complete_flag
from nexus.domain.events import ChapterAdvancedEvent, QuestCompletedEvent
from nexus.domain.models.player import Player
from nexus.domain.models.ship import ShipClass
from nexus.domain.models.story import (
    CreditsConsequence,
    FlagConsequence,
    ItemConsequence,
    QuestConsequence,
    QuestStatus,
    ReputationConsequence,
)
from nexus.infrastructure.inmemory.inmemory_content_repo import InMemoryContentRepository


class _ScriptedRandom(RandomService):
    def __init__(self, chances=()) -> None:
        super().__init__(seed=0)
        self.chances = list(chances)

    def random_chance(self, probability: float) -> bool:
        return self.chances.pop(0) if self.chances else False

    def random_choice(self, seq):
        return seq[0]


class StoryServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.content = InMemoryContentRepository()
        self.player = Player(name="Vale", ship=self.content.starter_ship(ShipClass.EXPLORER))
        self.published: list[object] = []
        self.progression = ProgressionService(self.player, event_publisher=self.published.append)
        self.rng = _ScriptedRandom()
        self.story = StoryService(
            self.progression,
            self.rng,
            quests=self.content.list_quests(),
            chapters=self.content.list_chapters(),
            events=self.content.list_events(),
            event_publisher=self.published.append,
        )
        self.story.init()

    def _system(self, system_id: str):
        return next(system for system in self.content.list_systems() if system.id == system_id)


class QuestProgressTests(StoryServiceTestCase):
    def test_init_activates_available_chapter_one_quests(self) -> None:
        self.assertEqual(1, self.story.current_chapter)
        active = {quest.id for quest in self.story.active_quests()}
        self.assertEqual({"q_first_steps", "q_cargo_run"}, active)
        self.assertEqual(QuestStatus.LOCKED, self.story.get_quest("q_follow_signal").status)

    def test_init_copies_templates(self) -> None:
        self.story.update_quest_objective("q_cargo_run", "obj_trades", 1)
        template = self.story.quest_templates()["q_cargo_run"]
        self.assertEqual(0, template.objectives[0].current)

    def test_final_objective_completes_quest_and_pays_once(self) -> None:
        self.story.activate_quest("q_follow_signal")
        self.story.update_quest_objective("q_follow_signal", "obj_observatory", 1)
        credits_before = self.player.credits

        self.assertTrue(self.story.update_quest_objective("q_follow_signal", "obj_chart", 3))

        quest = self.story.get_quest("q_follow_signal")
        self.assertEqual(QuestStatus.COMPLETED, quest.status)
        self.assertEqual(credits_before + 300, self.player.credits)
        self.assertEqual(2, self.player.level)
        self.assertEqual(1, self.player.stats.quests_completed)

        self.assertFalse(self.story.update_quest_objective("q_follow_signal", "obj_chart", 1))
        self.assertFalse(self.story.complete_quest("q_follow_signal"))
        self.assertEqual(credits_before + 300, self.player.credits)
        completions = [event for event in self.published if isinstance(event, QuestCompletedEvent)]
        self.assertEqual(["q_follow_signal"], [event.quest_id for event in completions])

    def test_progress_is_clamped_to_requirement(self) -> None:
        self.story.update_quest_objective("q_first_steps", "obj_earn", 9000)
        objective = self.story.get_quest("q_first_steps").objective("obj_earn")
        self.assertEqual(500, objective.current)
        self.assertTrue(objective.completed)

    def test_locked_quest_ignores_progress(self) -> None:
        self.assertFalse(self.story.update_quest_objective("q_hunter", "obj_kills", 1))
        self.assertEqual(0, self.story.get_quest("q_hunter").objective("obj_kills").current)

    def test_unknown_objective_is_rejected(self) -> None:
        with self.assertLogs("nexus.application.services.story_service", level="WARNING"):
            self.assertFalse(self.story.update_quest_objective("q_first_steps", "obj_missing", 1))

    def test_trade_advances_count_and_credit_objectives(self) -> None:
        self.story.on_trade_completed(320)

        first_steps = self.story.get_quest("q_first_steps")
        self.assertTrue(first_steps.objective("obj_trade").completed)
        self.assertEqual(320, first_steps.objective("obj_earn").current)
        self.assertEqual(1, self.story.get_quest("q_cargo_run").objective("obj_trades").current)

    def test_first_steps_chain_into_follow_signal(self) -> None:
        self.story.on_system_visited("meridian")
        self.story.on_trade_completed(500)

        self.assertEqual(QuestStatus.COMPLETED, self.story.get_quest("q_first_steps").status)
        self.assertEqual(QuestStatus.ACTIVE, self.story.get_quest("q_follow_signal").status)

    def test_visit_advances_travel_and_explore(self) -> None:
        self.story.activate_quest("q_follow_signal")
        self.story.on_system_visited("observatory")

        quest = self.story.get_quest("q_follow_signal")
        self.assertTrue(quest.objective("obj_observatory").completed)
        self.assertEqual(1, quest.objective("obj_chart").current)

    def test_combat_win_advances_every_combat_objective(self) -> None:
        self.story.activate_quest("q_hunter")
        self.story.activate_quest("q_deep_archive")

        self.story.on_combat_won()

        self.assertEqual(1, self.story.get_quest("q_hunter").objective("obj_kills").current)
        self.assertTrue(self.story.get_quest("q_deep_archive").objective("obj_guardian").completed)

    def test_dialogue_completion_matches_contact(self) -> None:
        self.story.activate_quest("q_meet_foundation")
        self.story.on_dialogue_completed("dockmaster")
        self.story.on_dialogue_completed("selene_meeting")
        self.assertTrue(self.story.get_quest("q_meet_foundation").objective("obj_selene").completed)

    def test_activate_unknown_quest_warns(self) -> None:
        with self.assertLogs("nexus.application.services.story_service", level="WARNING"):
            self.assertFalse(self.story.activate_quest("q_nope"))


class ChapterProgressionTests(StoryServiceTestCase):
    def test_completion_flag_advances_chapter_and_unlocks_quests(self) -> None:
        self.story.apply_consequences([FlagConsequence(chapter_complete_flag(1))])

        self.assertTrue(self.story.check_chapter_progression())
        self.assertEqual(2, self.story.current_chapter)
        self.assertEqual(QuestStatus.ACTIVE, self.story.get_quest("q_meet_foundation").status)
        self.assertEqual(QuestStatus.ACTIVE, self.story.get_quest("q_hunter").status)
        advanced = [event for event in self.published if isinstance(event, ChapterAdvancedEvent)]
        self.assertEqual([(1, 2)], [(event.from_chapter, event.to_chapter) for event in advanced])

    def test_no_flag_means_no_advance(self) -> None:
        self.assertFalse(self.story.check_chapter_progression())
        self.assertEqual(1, self.story.current_chapter)

    def test_hostile_reputation_does_not_hold_back_the_next_chapter(self) -> None:
        self.story.apply_consequences([FlagConsequence(chapter_complete_flag(1))])
        self.story.check_chapter_progression()
        self.story.apply_consequences([ReputationConsequence("foundation", -50)])

        self.assertTrue(self.story.complete_quest("q_meet_foundation"))

        self.assertEqual(3, self.story.current_chapter)
        self.assertLess(self.progression.reputation("foundation"), 0)
        self.assertEqual(QuestStatus.ACTIVE, self.story.get_quest("q_deep_archive").status)

    def test_several_flags_advance_several_chapters(self) -> None:
        self.story.apply_consequences([FlagConsequence(chapter_complete_flag(1)), FlagConsequence(chapter_complete_flag(2))])
        self.story.check_chapter_progression()
        self.assertEqual(3, self.story.current_chapter)

    def test_last_chapter_is_terminal(self) -> None:
        self.story.current_chapter = 4
        self.story.apply_consequences([FlagConsequence(chapter_complete_flag(4))])
        self.assertFalse(self.story.check_chapter_progression())
        self.assertEqual(4, self.story.current_chapter)


class ConsequenceTests(StoryServiceTestCase):
    def test_consequences_route_to_progression(self) -> None:
        self.story.apply_consequences(
            [
                CreditsConsequence(-40),
                ReputationConsequence("hegemony", 12),
                FlagConsequence("pilot_callsign", "Kestrel"),
                QuestConsequence("q_hunter"),
            ]
        )

        self.assertEqual(960, self.player.credits)
        self.assertEqual(12, self.player.reputation["hegemony"])
        self.assertEqual("Kestrel", self.player.flags["pilot_callsign"])
        self.assertEqual("Kestrel", self.story.flags["pilot_callsign"])
        self.assertEqual(QuestStatus.ACTIVE, self.story.get_quest("q_hunter").status)

    def test_item_consequence_is_logged_and_skipped(self) -> None:
        with self.assertLogs("nexus.application.services.story_service", level="WARNING"):
            self.story.apply_consequences([ItemConsequence("guild_seal")])
        self.assertEqual(1000, self.player.credits)

    def test_unknown_consequence_kind_raises(self) -> None:
        with self.assertRaises(TypeError):
            self.story.apply_consequences([object()])


class RandomEventTests(StoryServiceTestCase):
    def test_eligibility_follows_danger_faction_and_flags(self) -> None:
        calm = {event.id for event in self.story.eligible_events(self._system("nexus_prime"))}
        self.assertIn("evt_trader_convoy", calm)
        self.assertNotIn("evt_pirate_ambush", calm)
        self.assertNotIn("evt_hegemony_patrol", calm)
        self.assertNotIn("evt_archive_echo", calm)

        hostile = {event.id for event in self.story.eligible_events(self._system("ironclad"))}
        self.assertIn("evt_pirate_ambush", hostile)
        self.assertIn("evt_hegemony_patrol", hostile)
        self.assertNotIn("evt_trader_convoy", hostile)

        self.progression.set_flag("chapter_2_complete")
        flagged = {event.id for event in self.story.eligible_events(self._system("nexus_prime"))}
        self.assertIn("evt_archive_echo", flagged)

    def test_failed_roll_triggers_nothing(self) -> None:
        self.assertIsNone(self.story.try_random_event(self._system("nexus_prime")))
        self.assertIsNone(self.story.active_event)

    def test_triggered_event_resolves_once(self) -> None:
        self.rng.chances = [True]
        event = self.story.try_random_event(self._system("nexus_prime"))
        self.assertEqual("evt_distress_signal", event.id)

        outcome = self.story.resolve_event(0)

        self.assertTrue(outcome)
        self.assertIsNone(self.story.active_event)
        self.assertEqual(["evt_distress_signal"], self.story.completed_events)
        remaining = {row.id for row in self.story.eligible_events(self._system("nexus_prime"))}
        self.assertNotIn("evt_distress_signal", remaining)

    def test_pending_event_blocks_another(self) -> None:
        self.rng.chances = [True, True]
        self.story.try_random_event(self._system("nexus_prime"))
        self.assertIsNone(self.story.try_random_event(self._system("nexus_prime")))

    def test_resolve_applies_choice_consequences(self) -> None:
        self.story.active_event = self.story.event_by_id("evt_derelict_ship")
        self.story.resolve_event(0)
        self.assertEqual(1150, self.player.credits)

    def test_resolve_rejects_bad_choices(self) -> None:
        with self.assertRaises(ValueError):
            self.story.resolve_event(0)
        self.story.active_event = self.story.event_by_id("evt_derelict_ship")
        with self.assertRaises(ValueError):
            self.story.resolve_event(7)
        self.assertIsNotNone(self.story.active_event)


if __name__ == "__main__":
    unittest.main()
