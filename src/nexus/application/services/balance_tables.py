from __future__ import annotations

import math


LEVEL_UP_XP_STEP = 100

REFUEL_COST_PER_UNIT = 2
REPAIR_COST_PER_HULL = 3

FUEL_DISTANCE_DIVISOR = 20

SCARCITY_SUPPLY_THRESHOLD = 10
SCARCITY_SURCHARGE = 1.10
OVERSUPPLY_DEMAND_THRESHOLD = 10
OVERSUPPLY_DISCOUNT = 0.85
STANDARD_SELL_RATE = 0.95

CONTRABAND_AVAILABILITY_CHANCE = 0.2
TREND_FLIP_CHANCE = 0.15
TREND_DRIFT_RATE = 0.05
STABLE_DRIFT_RATE = 0.02

HIGH_TECH_GOODS = {"quantum_processors", "nano_assemblers", "positronic_cores"}
LOW_TECH_PREMIUM_GOODS = {"quantum_processors", "nano_assemblers"}
FRONTIER_DISCOUNT_GOODS = {"combat_stims", "neural_hackers", "shield_emitters"}
CORE_WORLD_LUXURIES = {"nebula_wine", "void_silk"}
RAW_MATERIALS = {"tritanium_ore", "helium3", "crystal_lattice"}

HEAVY_ATTACK_COST_MULTIPLIER = 1.5
HEAVY_ATTACK_ACCURACY_MULTIPLIER = 0.8
HEAVY_ATTACK_DAMAGE_MULTIPLIER = 1.5
DAMAGE_VARIANCE_MIN = 0.8
DAMAGE_VARIANCE_MAX = 1.2

DEFEND_RESTORE = 15
REPAIR_ENERGY_COST = 20
REPAIR_HULL_RESTORE = 25
FLEE_SPEED_DIVISOR = 15
FLEE_MAX_CHANCE = 0.8

ENEMY_DEFEND_RESTORE = 10
ENEMY_RECHARGE = 20
ENEMY_FLEE_CHANCE = 0.3
ENEMY_FLEE_SALVAGE_RATE = 0.3

ENCOUNTER_DANGER_DIVISOR = 20
EVENT_TRIGGER_CHANCE = 0.35

DEFEAT_HULL_RECOVERY_RATE = 0.3
DEFEAT_CREDIT_PENALTY_RATE = 0.2

SAVE_FORMAT_VERSION = 1
DEFAULT_SAVE_SLOT = "auto"


def round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def xp_required_for_level(level: int) -> int:
    return max(1, int(level)) * LEVEL_UP_XP_STEP


def fuel_cost_for_distance(distance: float) -> int:
    return round_half_up(float(distance) / FUEL_DISTANCE_DIVISOR)


def enemy_scaling(danger_level: int) -> float:
    return 0.8 + (int(danger_level) / 10) * 0.6


def heavy_attack_cost(energy_cost: int) -> int:
    return int(math.ceil(int(energy_cost) * HEAVY_ATTACK_COST_MULTIPLIER))
