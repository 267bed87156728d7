from __future__ import annotations

from typing import Dict

from nexus.domain.models.ship import (
    AiBehaviour,
    EnemyTemplate,
    Ship,
    ShipClass,
    ShipUpgrade,
    ShipWeapon,
    UpgradeEffect,
    UpgradeSlot,
    WeaponType,
)

WEAPONS: Dict[str, ShipWeapon] = {
    "pulse_laser": ShipWeapon("Pulse Laser", damage=12, energy_cost=8, accuracy=0.85, type=WeaponType.ENERGY),
    "railgun": ShipWeapon("Railgun", damage=20, energy_cost=12, accuracy=0.75, type=WeaponType.KINETIC),
    "missile_pod": ShipWeapon("Missile Pod", damage=25, energy_cost=15, accuracy=0.7, type=WeaponType.MISSILE),
    "plasma_cannon": ShipWeapon("Plasma Cannon", damage=30, energy_cost=18, accuracy=0.7, type=WeaponType.ENERGY),
    "gatling_turret": ShipWeapon("Gatling Turret", damage=8, energy_cost=4, accuracy=0.9, type=WeaponType.KINETIC),
    "torpedo_launcher": ShipWeapon("Torpedo Launcher", damage=40, energy_cost=25, accuracy=0.6, type=WeaponType.MISSILE),
}

STARTER_SHIPS: Dict[ShipClass, Ship] = {
    ShipClass.SCOUT: Ship(
        name="Wayfarer",
        ship_class=ShipClass.SCOUT,
        hull=80, max_hull=80,
        shields=40, max_shields=40,
        energy=60, max_energy=60,
        fuel=60, max_fuel=60,
        cargo_capacity=20,
        speed=8,
        weapons=[WEAPONS["pulse_laser"]],
    ),
    ShipClass.TRADER: Ship(
        name="Meridian Hauler",
        ship_class=ShipClass.TRADER,
        hull=100, max_hull=100,
        shields=30, max_shields=30,
        energy=50, max_energy=50,
        fuel=45, max_fuel=45,
        cargo_capacity=50,
        speed=5,
        weapons=[WEAPONS["pulse_laser"]],
    ),
    ShipClass.FIGHTER: Ship(
        name="Talon",
        ship_class=ShipClass.FIGHTER,
        hull=120, max_hull=120,
        shields=60, max_shields=60,
        energy=80, max_energy=80,
        fuel=40, max_fuel=40,
        cargo_capacity=12,
        speed=7,
        weapons=[WEAPONS["railgun"], WEAPONS["pulse_laser"]],
    ),
    ShipClass.EXPLORER: Ship(
        name="Pathfinder",
        ship_class=ShipClass.EXPLORER,
        hull=90, max_hull=90,
        shields=50, max_shields=50,
        energy=70, max_energy=70,
        fuel=80, max_fuel=80,
        cargo_capacity=25,
        speed=9,
        weapons=[WEAPONS["pulse_laser"]],
    ),
}

UPGRADES = (
    ShipUpgrade(
        id="cargo_expander",
        name="Cargo Expander",
        slot=UpgradeSlot.CARGO,
        cost=600,
        effect=UpgradeEffect("cargo_capacity", 15),
        required_tech=2,
        description="Modular holds bolted onto the spine.",
    ),
    ShipUpgrade(
        id="extended_tanks",
        name="Extended Tanks",
        slot=UpgradeSlot.ENGINE,
        cost=500,
        effect=UpgradeEffect("max_fuel", 20),
        required_tech=2,
        description="Auxiliary fuel bladders. Fill them at the next refuel.",
    ),
    ShipUpgrade(
        id="reinforced_plating",
        name="Reinforced Plating",
        slot=UpgradeSlot.SPECIAL,
        cost=800,
        effect=UpgradeEffect("max_hull", 30),
        required_tech=3,
        description="Tritanium armour laminate.",
    ),
    ShipUpgrade(
        id="capacitor_bank",
        name="Capacitor Bank",
        slot=UpgradeSlot.WEAPON,
        cost=700,
        effect=UpgradeEffect("max_energy", 20),
        required_tech=4,
        description="Extra storage for the weapon bus.",
    ),
    ShipUpgrade(
        id="shield_booster",
        name="Shield Booster",
        slot=UpgradeSlot.SHIELD,
        cost=900,
        effect=UpgradeEffect("max_shields", 25),
        required_tech=5,
        description="Overdriven deflector emitters.",
    ),
    ShipUpgrade(
        id="ion_thrusters",
        name="Ion Thrusters",
        slot=UpgradeSlot.ENGINE,
        cost=1000,
        effect=UpgradeEffect("speed", 2),
        required_tech=6,
        description="Improves manoeuvring and escape odds.",
    ),
)

ENEMY_TEMPLATES = (
    EnemyTemplate(
        name="Void Runner Raider",
        description="A fast, lightly armed raider looking for easy prey.",
        max_hull=60,
        max_shields=20,
        max_energy=40,
        weapons=(WEAPONS["pulse_laser"],),
        credits=150,
        xp=40,
        ai=AiBehaviour.AGGRESSIVE,
        faction="void_runners",
    ),
    EnemyTemplate(
        name="Pirate Marauder",
        description="A heavily modified freighter bristling with stolen guns.",
        max_hull=90,
        max_shields=40,
        max_energy=50,
        weapons=(WEAPONS["railgun"], WEAPONS["pulse_laser"]),
        credits=300,
        xp=70,
        ai=AiBehaviour.AGGRESSIVE,
        faction="void_runners",
    ),
    EnemyTemplate(
        name="Hegemony Patrol Craft",
        description="A disciplined patrol ship enforcing Hegemony law.",
        max_hull=100,
        max_shields=60,
        max_energy=60,
        weapons=(WEAPONS["railgun"], WEAPONS["missile_pod"]),
        credits=200,
        xp=80,
        ai=AiBehaviour.BALANCED,
        faction="hegemony",
    ),
    EnemyTemplate(
        name="Rogue Synthetic Drone",
        description="An autonomous drone that has severed contact with the Collective.",
        max_hull=50,
        max_shields=80,
        max_energy=70,
        weapons=(WEAPONS["plasma_cannon"],),
        credits=250,
        xp=90,
        ai=AiBehaviour.DEFENSIVE,
        faction="synthetics",
    ),
    EnemyTemplate(
        name="Scavenger Hulk",
        description="A lumbering salvage ship that prefers running to fighting.",
        max_hull=150,
        max_shields=10,
        max_energy=30,
        weapons=(WEAPONS["gatling_turret"], WEAPONS["gatling_turret"]),
        credits=100,
        xp=50,
        ai=AiBehaviour.COWARDLY,
    ),
    EnemyTemplate(
        name="Archive Guardian",
        description="An ancient Architect construct awakened from its vigil.",
        max_hull=200,
        max_shields=150,
        max_energy=100,
        weapons=(WEAPONS["plasma_cannon"], WEAPONS["torpedo_launcher"]),
        credits=500,
        xp=200,
        ai=AiBehaviour.BALANCED,
    ),
)
