import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from nexus.application.dtos import TravelPlan
from nexus.application.services.game_service import GameService
from nexus.application.services.notifications import Severity
from nexus.application.services.random_service import RandomService
from nexus.domain.models.combat import CombatAction, CombatResult, CombatState
from nexus.domain.models.market import CargoItem
from nexus.domain.models.ship import AiBehaviour, EnemyShip, ShipClass, ShipWeapon, WeaponType
from nexus.domain.models.story import FlagConsequence, QuestStatus
from nexus.domain.repositories import SaveStoreError
from nexus.infrastructure.inmemory.inmemory_content_repo import InMemoryContentRepository
from nexus.infrastructure.inmemory.inmemory_save_repo import InMemorySaveRepository


class _QuietRandom(RandomService):
    """Seeded draws, except that chance rolls fail unless forced."""

    def __init__(self) -> None:
        super().__init__(seed=11)
        self.forced: list[bool] = []

    def random_chance(self, probability: float) -> bool:
        return self.forced.pop(0) if self.forced else False


def _enemy(**overrides) -> EnemyShip:
    values = dict(
        id="enemy-1",
        name="Raider",
        hull=1,
        max_hull=60,
        shields=0,
        max_shields=0,
        energy=40,
        max_energy=40,
        weapons=[ShipWeapon("Breaker", damage=50, energy_cost=5, accuracy=1.0, type=WeaponType.KINETIC)],
        credits=120,
        xp=30,
        ai=AiBehaviour.AGGRESSIVE,
    )
    values.update(overrides)
    return EnemyShip(**values)


class GameServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.rng = _QuietRandom()
        self.saves = InMemorySaveRepository()
        self.game = GameService(InMemoryContentRepository(), self.saves, rng=self.rng, clock=lambda: 1_700_000_000)
        self.game.new_game("Vale", ShipClass.SCOUT)

    def _messages(self, severity: Severity) -> list[str]:
        return [row.message for row in self.game.notifications.pending() if row.severity == severity]

    def _start_combat(self, **overrides) -> None:
        self.game.combat = self.game.combat_service.init_combat(_enemy(**overrides))


class NewGameTests(GameServiceTestCase):
    def test_new_game_seeds_player_and_opens_chapter_intro(self) -> None:
        player = self.game.player
        self.assertEqual(("Vale", 1000, "nexus_prime"), (player.name, player.credits, player.current_system))
        self.assertEqual(10, player.reputation["foundation"])
        self.assertEqual(-20, player.reputation["void_runners"])
        self.assertTrue(self.game.dialogue.active)
        self.assertEqual("chapter_1", self.game.dialogue.topic)
        self.assertEqual(0, self.game.tick)

    def test_chapter_one_intro_activates_the_signal_quest(self) -> None:
        self.assertEqual("ch1_intro_2", self.game.choose_dialogue_option("ch1_1a").id)
        self.assertEqual("ch1_intro_3", self.game.choose_dialogue_option("ch1_2a").id)
        self.assertIsNone(self.game.choose_dialogue_option("ch1_3a"))

        self.assertFalse(self.game.dialogue.active)
        self.assertEqual(QuestStatus.ACTIVE, self.game.story.get_quest("q_follow_signal").status)
        self.assertTrue(self.game.player.flags["heard_signal"])


class TravelTests(GameServiceTestCase):
    def test_travel_along_a_lane_spends_fuel_and_ticks(self) -> None:
        outcome = self.game.travel_to_system("meridian")

        self.assertEqual("arrival", outcome.kind)
        self.assertEqual(1, outcome.tick)
        self.assertEqual("meridian", self.game.player.current_system)
        self.assertEqual(50, self.game.player.ship.fuel)
        self.assertIn("void_harbor", self.game.galaxy.systems)
        self.assertTrue(self.game.galaxy.get_system("void_harbor").discovered)
        self.assertTrue(self.saves.has_save("auto"))
        self.assertTrue(self.game.story.get_quest("q_first_steps").objective("obj_travel").completed)

    def test_non_adjacent_travel_changes_nothing(self) -> None:
        self.assertIsNone(self.game.travel_to_system("crystallis"))

        self.assertEqual("nexus_prime", self.game.player.current_system)
        self.assertEqual(60, self.game.player.ship.fuel)
        self.assertEqual(0, self.game.tick)
        self.assertIn("No route to that system.", self._messages(Severity.WARNING))
        self.assertFalse(self.saves.has_save("auto"))

    def test_unknown_system_is_rejected(self) -> None:
        self.assertIsNone(self.game.travel_to_system("andromeda"))
        self.assertEqual(0, self.game.tick)

    def test_insufficient_fuel_is_rejected(self) -> None:
        self.game.progression.update_ship({"fuel": 3})
        self.assertIsNone(self.game.travel_to_system("observatory"))
        self.assertEqual(3, self.game.player.ship.fuel)

    def test_travel_blocked_during_combat_and_events(self) -> None:
        self._start_combat()
        self.assertIsNone(self.game.travel_to_system("meridian"))
        self.game.combat = CombatState()

        self.game.story.active_event = self.game.story.event_by_id("evt_nebula_storm")
        self.assertIsNone(self.game.travel_to_system("meridian"))
        self.assertEqual("nexus_prime", self.game.player.current_system)

    def test_second_leg_waits_for_the_first(self) -> None:
        plan = self.game.begin_travel("meridian")
        self.assertIsNone(self.game.begin_travel("observatory"))
        with self.assertRaises(ValueError):
            self.game.complete_travel(TravelPlan("nexus_prime", "observatory", 1, 1.0))
        self.assertEqual("meridian", self.game.complete_travel(plan).system_id)

    def test_event_on_arrival_preempts_combat_check(self) -> None:
        event = self.game.story.event_by_id("evt_derelict_ship")
        with mock.patch.object(self.game.story, "try_random_event", return_value=event), mock.patch.object(
            self.game.combat_service, "should_encounter_enemy"
        ) as encounter:
            outcome = self.game.travel_to_system("meridian")

        self.assertEqual(("event", "evt_derelict_ship"), (outcome.kind, outcome.event_id))
        encounter.assert_not_called()

    def test_hostile_contact_on_arrival_starts_combat(self) -> None:
        with mock.patch.object(self.game.combat_service, "should_encounter_enemy", return_value=True):
            outcome = self.game.travel_to_system("kessler_reach")

        self.assertEqual("combat", outcome.kind)
        self.assertTrue(self.game.combat.active)
        self.assertEqual(outcome.enemy_name, self.game.combat.enemy.name)


class TradeTests(GameServiceTestCase):
    def _listing(self):
        market = self.game.galaxy.get_market("nexus_prime")
        return next(row for row in market.listings if row.supply >= 12 and row.price * 2 <= 1000)

    def test_buy_then_sell_moves_credits_cargo_and_supply(self) -> None:
        listing = self._listing()
        supply = listing.supply
        cost = self.game.economy.buy_price(listing, 2)

        self.assertTrue(self.game.buy(listing.commodity_id, 2).ok)
        self.assertEqual(1000 - cost, self.game.player.credits)
        self.assertEqual([CargoItem(listing.commodity_id, 2)], self.game.player.cargo)
        self.assertEqual(supply - 2, listing.supply)
        self.assertTrue(self.game.story.get_quest("q_first_steps").objective("obj_trade").completed)

        revenue = self.game.economy.sell_price(listing, 2)
        self.assertTrue(self.game.sell(listing.commodity_id, 2).ok)
        self.assertEqual(1000 - cost + revenue, self.game.player.credits)
        self.assertEqual([], self.game.player.cargo)
        self.assertEqual(2, self.game.player.stats.trades_completed)

    def test_rejected_buy_changes_nothing(self) -> None:
        listing = self._listing()
        result = self.game.buy(listing.commodity_id, 999)

        self.assertFalse(result.ok)
        self.assertEqual(1000, self.game.player.credits)
        self.assertEqual([], self.game.player.cargo)

    def test_selling_unheld_goods_is_rejected(self) -> None:
        self.assertFalse(self.game.sell(self._listing().commodity_id, 1).ok)

    def test_no_trade_in_combat(self) -> None:
        self._start_combat()
        result = self.game.buy(self._listing().commodity_id, 1)
        self.assertEqual(["Cannot trade while in combat."], result.messages)


class CombatFlowTests(GameServiceTestCase):
    def test_victory_pays_out_and_finish_resets(self) -> None:
        self._start_combat()
        self.rng.forced = [True]

        self.game.combat_action(CombatAction.ATTACK)

        self.assertEqual(CombatResult.VICTORY, self.game.combat.result)
        self.assertEqual(1120, self.game.player.credits)
        self.assertEqual(30, self.game.player.xp)
        self.assertEqual(1, self.game.player.stats.combats_won)

        self.game.finish_combat()
        self.assertFalse(self.game.combat.active)
        self.assertIsNone(self.game.combat.enemy)
        self.assertTrue(self.saves.has_save("auto"))

    def test_defeat_tows_player_and_takes_a_fifth_of_credits(self) -> None:
        self.game.progression.update_ship({"hull": 1, "shields": 0})
        self._start_combat(hull=60)
        self.rng.forced = [False, True, True]

        self.game.combat_action(CombatAction.ATTACK)
        self.assertEqual(CombatResult.DEFEAT, self.game.combat.result)
        self.assertEqual(0, self.game.player.ship.hull)

        result = self.game.finish_combat()

        self.assertEqual(24, self.game.player.ship.hull)
        self.assertEqual(800, self.game.player.credits)
        self.assertEqual(1, self.game.player.stats.combats_lost)
        self.assertIn("Lost 200 CR", result.messages[0])

    def test_finish_refuses_while_battle_continues(self) -> None:
        self._start_combat()
        self.assertFalse(self.game.finish_combat().ok)

    def test_action_without_battle_is_rejected(self) -> None:
        self.assertFalse(self.game.combat_action(CombatAction.ATTACK).ok)


class EventAndServicesTests(GameServiceTestCase):
    def test_event_choice_applies_and_autosaves(self) -> None:
        self.game.story.active_event = self.game.story.event_by_id("evt_derelict_ship")

        self.assertTrue(self.game.resolve_event_choice(0).ok)
        self.assertEqual(1150, self.game.player.credits)
        self.assertTrue(self.saves.has_save("auto"))
        self.assertFalse(self.game.resolve_event_choice(0).ok)

    def test_refuel_when_full_is_refused(self) -> None:
        self.assertEqual(["Tanks are already full."], self.game.refuel().messages)

    def test_shipyard_offers_upgrades_up_to_local_tech(self) -> None:
        offered = {upgrade.id for upgrade in self.game.available_upgrades()}
        self.assertIn("ion_thrusters", offered)

        self.assertTrue(self.game.install_upgrade("cargo_expander").ok)
        self.assertEqual(35, self.game.player.ship.cargo_capacity)
        self.assertEqual(400, self.game.player.credits)
        self.assertNotIn("cargo_expander", {upgrade.id for upgrade in self.game.available_upgrades()})
        self.assertFalse(self.game.install_upgrade("cargo_expander").ok)

    def test_contacts_are_local(self) -> None:
        self.assertEqual(["dockmaster"], [contact.id for contact in self.game.contacts_here()])
        self.assertIsNone(self.game.start_contact_dialogue("selene_meeting"))

    def test_chapter_intro_waits_for_open_dialogue(self) -> None:
        self.game.dialogue.end()
        self.game.start_contact_dialogue("dockmaster")

        self.game.story.apply_consequences([FlagConsequence("chapter_1_complete")])
        self.game.story.check_chapter_progression()
        self.assertEqual("dockmaster", self.game.dialogue.topic)

        node = self.game.choose_dialogue_option("dock_1c")
        self.assertEqual("ch2_intro_1", node.id)
        self.assertEqual("chapter_2", self.game.dialogue.topic)


class PersistenceTests(GameServiceTestCase):
    def test_save_and_load_restore_the_session(self) -> None:
        self.game.travel_to_system("meridian")
        self.assertTrue(self.game.save_game("alpha"))

        self.game.progression.add_credits(5000)
        self.game.new_game("Someone Else", ShipClass.TRADER)

        self.assertTrue(self.game.load_game("alpha"))
        player = self.game.player
        self.assertEqual(("Vale", 1000, "meridian"), (player.name, player.credits, player.current_system))
        self.assertEqual(1, self.game.tick)
        self.assertEqual(ShipClass.SCOUT, player.ship.ship_class)
        self.assertTrue(self.game.story.get_quest("q_first_steps").objective("obj_travel").completed)
        self.assertFalse(self.game.dialogue.active)

    def test_unsupported_version_is_refused(self) -> None:
        self.saves.save({"version": 99, "timestamp": 1}, "old")
        self.assertFalse(self.game.load_game("old"))
        self.assertTrue(any("not supported" in message for message in self._messages(Severity.WARNING)))
        self.assertEqual("Vale", self.game.player.name)

    def test_corrupt_snapshot_is_refused(self) -> None:
        self.saves.save({"version": 1, "player": {}}, "broken")
        self.assertFalse(self.game.load_game("broken"))
        self.assertTrue(self._messages(Severity.DANGER))

    def test_snapshot_with_a_null_section_is_refused_without_crashing(self) -> None:
        self.assertTrue(self.game.save_game("good"))
        for section, value in (("story", None), ("galaxy", []), ("player", "Vale")):
            snapshot = self.saves.load("good")
            snapshot[section] = value
            self.saves.save(snapshot, "bad")

            self.assertFalse(self.game.load_game("bad"))

        self.assertEqual(3, len(self._messages(Severity.DANGER)))
        self.assertEqual("Vale", self.game.player.name)
        self.assertEqual(1, self.game.story.current_chapter)

    def test_missing_slot_and_delete(self) -> None:
        self.assertFalse(self.game.load_game("empty"))
        self.game.save_game("beta")
        self.assertEqual(["beta"], [info.slot for info in self.game.list_saves()])
        self.assertTrue(self.game.delete_save("beta"))
        self.assertFalse(self.game.delete_save("beta"))

    def test_save_failure_is_reported(self) -> None:
        with mock.patch.object(self.saves, "save", side_effect=SaveStoreError("disk full")):
            self.assertFalse(self.game.save_game("gamma"))
        self.assertIn("Save failed: disk full", self._messages(Severity.DANGER))


if __name__ == "__main__":
    unittest.main()
