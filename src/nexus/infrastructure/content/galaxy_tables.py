from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Tuple

from nexus.domain.models.galaxy import Coordinates, Planet, PlanetType, StarSystem, StarType

# Symmetric hyperlane list; connections on each system are derived from it.
HYPERLANES: Tuple[Tuple[str, str], ...] = (
    ("nexus_prime", "sol_tertius"),
    ("nexus_prime", "meridian"),
    ("nexus_prime", "observatory"),
    ("nexus_prime", "kessler_reach"),
    ("sol_tertius", "ironclad"),
    ("sol_tertius", "crystallis"),
    ("observatory", "crystallis"),
    ("observatory", "deep_archive"),
    ("observatory", "helix_forge"),
    ("crystallis", "helix_forge"),
    ("meridian", "void_harbor"),
    ("kessler_reach", "void_harbor"),
    ("kessler_reach", "sentinel"),
    ("ironclad", "sentinel"),
    ("deep_archive", "architects_rest"),
    ("void_harbor", "terminus"),
    ("architects_rest", "terminus"),
)

STARTING_DISCOVERED = frozenset({"nexus_prime", "sol_tertius", "meridian", "observatory", "kessler_reach"})


def _system(
    system_id: str,
    name: str,
    star_type: StarType,
    x: float,
    y: float,
    *,
    danger: int,
    tech: int,
    faction: str | None,
    trade: bool,
    shipyard: bool = False,
    description: str = "",
    lore: str = "",
    planets: List[Planet] | None = None,
) -> StarSystem:
    return StarSystem(
        id=system_id,
        name=name,
        star_type=star_type,
        coordinates=Coordinates(x, y),
        danger_level=danger,
        tech_level=tech,
        faction=faction,
        planets=planets or [],
        description=description,
        has_trade_post=trade,
        has_shipyard=shipyard,
        lore=lore,
    )


_SYSTEMS = (
    _system(
        "nexus_prime", "Nexus Prime", StarType.YELLOW_DWARF, 0, 0,
        danger=1, tech=6, faction="free_traders", trade=True, shipyard=True,
        description="The busiest crossroads of the inner lanes.",
        lore="Founded where four trade routes met, Nexus Prime never sleeps.",
        planets=[Planet("nexus_station", "Nexus Station", PlanetType.ARTIFICIAL_HABITAT, "Orbital free port.", 2_400_000, True)],
    ),
    _system(
        "sol_tertius", "Sol Tertius", StarType.YELLOW_DWARF, 180, -60,
        danger=2, tech=8, faction="hegemony", trade=True, shipyard=True,
        description="A Hegemony core world of foundries and parade grounds.",
        planets=[Planet("tertius_prime", "Tertius Prime", PlanetType.TERRESTRIAL, "Capital world.", 9_000_000_000, True)],
    ),
    _system(
        "meridian", "Meridian", StarType.BINARY_STAR, -150, 120,
        danger=2, tech=5, faction="free_traders", trade=True,
        description="Twin suns over a sprawl of guild warehouses.",
    ),
    _system(
        "observatory", "The Observatory", StarType.WHITE_DWARF, 60, 200,
        danger=1, tech=9, faction="foundation", trade=True,
        description="A Foundation listening post aimed at the deep frontier.",
        lore="Its arrays first caught the signal.",
    ),
    _system(
        "kessler_reach", "Kessler Reach", StarType.RED_GIANT, -120, -160,
        danger=5, tech=3, faction=None, trade=True,
        description="A debris-choked mining belt with little law.",
        planets=[Planet("kessler_belt", "Kessler Belt", PlanetType.DESERT, "Shattered moonlets.", 40_000, True)],
    ),
    _system(
        "ironclad", "Ironclad Bastion", StarType.BLUE_GIANT, 360, -180,
        danger=4, tech=7, faction="hegemony", trade=True, shipyard=True,
        description="Fleet anchorage on the Hegemony's eastern march.",
    ),
    _system(
        "crystallis", "Crystallis", StarType.PULSAR, 260, 120,
        danger=3, tech=4, faction=None, trade=True,
        description="Crystal farms strung across a pulsar's beam.",
        planets=[Planet("lattice_fields", "Lattice Fields", PlanetType.ICE_WORLD, "Grown crystal plains.", 120_000, True)],
    ),
    _system(
        "helix_forge", "Helix Forge", StarType.NEUTRON_STAR, 300, 300,
        danger=6, tech=10, faction="synthetics", trade=True, shipyard=True,
        description="A Synthetic foundry that hums in every band.",
    ),
    _system(
        "sentinel", "Sentinel Gate", StarType.WHITE_DWARF, 150, -320,
        danger=6, tech=6, faction="hegemony", trade=False,
        description="A dormant Architect gate under Hegemony guard.",
        lore="The gate has not opened in recorded history.",
    ),
    _system(
        "void_harbor", "Void Harbor", StarType.RED_GIANT, -360, -20,
        danger=7, tech=4, faction="void_runners", trade=True, shipyard=True,
        description="A smugglers' haven hidden in a red giant's corona.",
    ),
    _system(
        "deep_archive", "The Deep Archive", StarType.BLUE_GIANT, -20, 420,
        danger=4, tech=8, faction="foundation", trade=False,
        description="A Foundation vault buried inside a hollowed moon.",
    ),
    _system(
        "architects_rest", "Architect's Rest", StarType.NEUTRON_STAR, -250, 520,
        danger=8, tech=10, faction=None, trade=False,
        description="Silent megastructures orbit a dead star.",
        lore="The source of the signal.",
    ),
    _system(
        "terminus", "Terminus", StarType.PULSAR, -520, 300,
        danger=9, tech=2, faction=None, trade=False,
        description="The last charted star before the dark.",
    ),
)


def _build_systems() -> Dict[str, StarSystem]:
    connections: Dict[str, List[str]] = defaultdict(list)
    for left, right in HYPERLANES:
        connections[left].append(right)
        connections[right].append(left)
    systems: Dict[str, StarSystem] = {}
    for system in _SYSTEMS:
        system.connections = list(connections.get(system.id, []))
        system.discovered = system.id in STARTING_DISCOVERED
        systems[system.id] = system
    return systems


STAR_SYSTEMS = _build_systems()
