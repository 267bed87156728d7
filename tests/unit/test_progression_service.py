import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from nexus.application.services.progression_service import ProgressionService
from nexus.domain.events import LevelUpEvent, ReputationChangedEvent
from nexus.domain.models.market import CargoItem, TradeKind, TradeRecord
from nexus.domain.models.player import Player
from nexus.domain.models.ship import ShipClass, ShipUpgrade, UpgradeEffect, UpgradeSlot
from nexus.infrastructure.inmemory.inmemory_content_repo import InMemoryContentRepository


def _player(**overrides) -> Player:
    ship = InMemoryContentRepository().starter_ship(ShipClass.SCOUT)
    return Player(name="Vale", ship=ship, **overrides)


class ProgressionServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.published: list[object] = []

    def _service(self, player: Player) -> ProgressionService:
        return ProgressionService(player, event_publisher=self.published.append)

    def test_credits_track_earned_and_spent(self) -> None:
        player = _player()
        service = self._service(player)

        service.add_credits(250)
        service.add_credits(-100)

        self.assertEqual(1150, player.credits)
        self.assertEqual(250, player.stats.credits_earned)
        self.assertEqual(100, player.stats.credits_spent)

    def test_xp_rolls_over_across_several_levels(self) -> None:
        player = _player()
        service = self._service(player)

        gained = service.add_xp(320)

        self.assertEqual(2, gained)
        self.assertEqual(3, player.level)
        self.assertEqual(20, player.xp)
        levels = [event for event in self.published if isinstance(event, LevelUpEvent)]
        self.assertEqual([(1, 2), (2, 3)], [(event.from_level, event.to_level) for event in levels])

    def test_xp_below_threshold_does_not_level(self) -> None:
        player = _player()
        self.assertEqual(0, self._service(player).add_xp(99))
        self.assertEqual((1, 99), (player.level, player.xp))

    def test_reputation_is_clamped_and_reports_the_effective_delta(self) -> None:
        player = _player(reputation={"hegemony": 95})
        service = self._service(player)

        self.assertEqual(100, service.add_reputation("hegemony", 20))
        self.assertEqual(-100, service.add_reputation("void_runners", -250))

        deltas = [(event.faction_id, event.delta) for event in self.published if isinstance(event, ReputationChangedEvent)]
        self.assertEqual([("hegemony", 5), ("void_runners", -100)], deltas)

    def test_reputation_at_cap_publishes_nothing(self) -> None:
        player = _player(reputation={"foundation": 100})
        self._service(player).add_reputation("foundation", 10)
        self.assertEqual([], self.published)

    def test_flags_round_trip_and_truthiness(self) -> None:
        service = self._service(_player())
        service.set_flag("heard_signal")
        service.set_flag("pilot_callsign", "Kestrel")
        service.set_flag("debt", 0)

        self.assertTrue(service.has_flag("heard_signal"))
        self.assertEqual("Kestrel", service.get_flag("pilot_callsign"))
        self.assertFalse(service.has_flag("debt"))
        self.assertIsNone(service.get_flag("missing"))

    def test_update_ship_rejects_unknown_fields(self) -> None:
        player = _player()
        service = self._service(player)

        service.update_ship({"hull": 12, "fuel": 3})
        self.assertEqual((12, 3), (player.ship.hull, player.ship.fuel))

        with self.assertRaises(ValueError):
            service.update_ship({"name": "Renamed"})

    def test_update_cargo_prunes_empty_rows(self) -> None:
        player = _player()
        service = self._service(player)

        service.update_cargo([CargoItem("helium3", 4), CargoItem("void_silk", 0)])

        self.assertEqual([CargoItem("helium3", 4)], player.cargo)
        self.assertEqual(4, service.cargo_used())
        self.assertEqual(16, service.cargo_space())

    def test_trade_record_counts_completed_trades(self) -> None:
        player = _player()
        service = self._service(player)
        service.add_trade_record(TradeRecord("helium3", 2, 40, "nexus_prime", TradeKind.BUY, 0))
        self.assertEqual(1, player.stats.trades_completed)
        self.assertEqual(1, len(player.trade_history))

    def test_first_visit_is_reported_once(self) -> None:
        player = _player()
        service = self._service(player)

        self.assertTrue(service.set_current_system("meridian"))
        self.assertFalse(service.set_current_system("meridian"))
        self.assertFalse(service.set_current_system("nexus_prime"))
        self.assertEqual(2, player.stats.systems_visited)
        self.assertEqual(["nexus_prime", "meridian"], player.visited_systems)

    def test_upgrade_raises_max_and_current_together(self) -> None:
        player = _player(credits=2000)
        service = self._service(player)
        upgrade = ShipUpgrade("shield_booster", "Shield Booster", UpgradeSlot.SHIELD, 900, UpgradeEffect("max_shields", 25))
        shields_before = player.ship.shields

        self.assertTrue(service.install_upgrade(upgrade))

        self.assertEqual(1100, player.credits)
        self.assertEqual(65, player.ship.max_shields)
        self.assertEqual(shields_before + 25, player.ship.shields)
        self.assertFalse(service.install_upgrade(upgrade))

    def test_plain_upgrade_leaves_current_values(self) -> None:
        player = _player(credits=600)
        service = self._service(player)
        tanks = ShipUpgrade("extended_tanks", "Extended Tanks", UpgradeSlot.ENGINE, 500, UpgradeEffect("max_fuel", 20))

        self.assertTrue(service.install_upgrade(tanks))
        self.assertEqual((60, 80), (player.ship.fuel, player.ship.max_fuel))

    def test_upgrade_needs_credits(self) -> None:
        player = _player(credits=100)
        upgrade = ShipUpgrade("cargo_expander", "Cargo Expander", UpgradeSlot.CARGO, 600, UpgradeEffect("cargo_capacity", 15))
        self.assertFalse(self._service(player).install_upgrade(upgrade))
        self.assertEqual([], player.ship.upgrades)

    def test_refuel_charges_per_missing_unit(self) -> None:
        player = _player()
        player.ship.fuel = 45
        service = self._service(player)

        self.assertEqual(30, service.refuel_cost())
        self.assertTrue(service.refuel())
        self.assertEqual((60, 970), (player.ship.fuel, player.credits))
        self.assertFalse(service.refuel())

    def test_repair_restores_hull_and_shields(self) -> None:
        player = _player()
        player.ship.hull = 50
        player.ship.shields = 0
        service = self._service(player)

        self.assertEqual(90, service.repair_cost())
        self.assertTrue(service.repair())
        self.assertEqual((80, 40, 910), (player.ship.hull, player.ship.shields, player.credits))

    def test_repair_refused_when_unaffordable(self) -> None:
        player = _player(credits=10)
        player.ship.hull = 10
        self.assertFalse(self._service(player).repair())
        self.assertEqual(10, player.ship.hull)


if __name__ == "__main__":
    unittest.main()
