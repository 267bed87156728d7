import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from nexus.application.services.balance_tables import (
    enemy_scaling,
    fuel_cost_for_distance,
    heavy_attack_cost,
    round_half_up,
    xp_required_for_level,
)


class BalanceTablesTests(unittest.TestCase):
    def test_round_half_up_rounds_halves_away_from_zero(self) -> None:
        self.assertEqual(3, round_half_up(2.5))
        self.assertEqual(2, round_half_up(2.49))
        self.assertEqual(0, round_half_up(0.0))

    def test_fuel_cost_tracks_distance(self) -> None:
        self.assertEqual(10, fuel_cost_for_distance(192.09))
        self.assertEqual(10, fuel_cost_for_distance(208.81))
        self.assertEqual(0, fuel_cost_for_distance(0.0))

    def test_xp_required_for_level_scales_linearly(self) -> None:
        self.assertEqual(100, xp_required_for_level(1))
        self.assertEqual(300, xp_required_for_level(3))
        self.assertEqual(100, xp_required_for_level(0))

    def test_enemy_scaling_grows_with_danger(self) -> None:
        self.assertAlmostEqual(0.8, enemy_scaling(0))
        self.assertAlmostEqual(1.1, enemy_scaling(5))
        self.assertAlmostEqual(1.4, enemy_scaling(10))

    def test_heavy_attack_cost_rounds_up(self) -> None:
        self.assertEqual(12, heavy_attack_cost(8))
        self.assertEqual(15, heavy_attack_cost(10))
        self.assertEqual(2, heavy_attack_cost(1))


if __name__ == "__main__":
    unittest.main()
