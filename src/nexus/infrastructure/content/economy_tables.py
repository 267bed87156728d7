from __future__ import annotations

from nexus.domain.models.faction import Faction
from nexus.domain.models.market import CommodityCategory, CommodityDef

FACTIONS = (
    Faction(
        id="foundation",
        name="The Foundation",
        base_reputation=10,
        description="Scholars and archivists preserving knowledge against the coming dark.",
        motto="Knowledge endures.",
        leader="Director Vara Selene",
        traits=["research", "diplomacy"],
    ),
    Faction(
        id="hegemony",
        name="Terran Hegemony",
        base_reputation=-5,
        description="A militarised core-world government that prizes order above all.",
        motto="Order through strength.",
        leader="Admiral Castellan Rhee",
        traits=["military", "bureaucracy"],
    ),
    Faction(
        id="free_traders",
        name="Free Traders Guild",
        base_reputation=15,
        description="Independent merchants keeping the lanes open between the factions.",
        motto="Every route a fortune.",
        leader="Guildmaster Oona Pike",
        traits=["commerce", "neutrality"],
    ),
    Faction(
        id="synthetics",
        name="Synthetic Collective",
        base_reputation=0,
        description="Self-governing machine minds, patient and difficult to read.",
        motto="We compute; we continue.",
        leader="The Consensus",
        traits=["technology", "isolation"],
    ),
    Faction(
        id="void_runners",
        name="Void Runners",
        base_reputation=-20,
        description="Smugglers and raiders working the lawless edge of settled space.",
        motto="No chains past the rim.",
        leader="Captain Mara Volk",
        traits=["piracy", "smuggling"],
    ),
)

COMMODITIES = (
    CommodityDef(
        id="tritanium_ore",
        name="Tritanium Ore",
        category=CommodityCategory.RAW_MATERIALS,
        base_price=50,
        volatility=0.2,
        description="Dense structural ore used in hull plating.",
    ),
    CommodityDef(
        id="helium3",
        name="Helium-3",
        category=CommodityCategory.RAW_MATERIALS,
        base_price=80,
        volatility=0.3,
        description="Fusion fuel skimmed from gas giants.",
    ),
    CommodityDef(
        id="crystal_lattice",
        name="Crystal Lattice",
        category=CommodityCategory.RAW_MATERIALS,
        base_price=120,
        volatility=0.4,
        description="Grown crystal used in sensor and optical arrays.",
    ),
    CommodityDef(
        id="quantum_processors",
        name="Quantum Processors",
        category=CommodityCategory.TECHNOLOGY,
        base_price=300,
        volatility=0.3,
        description="Navigation-grade computing cores.",
    ),
    CommodityDef(
        id="shield_emitters",
        name="Shield Emitters",
        category=CommodityCategory.TECHNOLOGY,
        base_price=250,
        volatility=0.35,
        description="Deflector projection units in steady demand on the frontier.",
    ),
    CommodityDef(
        id="nano_assemblers",
        name="Nano-Assemblers",
        category=CommodityCategory.TECHNOLOGY,
        base_price=400,
        volatility=0.4,
        description="Programmable fabrication swarms.",
    ),
    CommodityDef(
        id="positronic_cores",
        name="Positronic Cores",
        category=CommodityCategory.TECHNOLOGY,
        base_price=600,
        volatility=0.5,
        description="Cognitive substrates, prized and feared in equal measure.",
    ),
    CommodityDef(
        id="nebula_wine",
        name="Nebula Wine",
        category=CommodityCategory.LUXURY,
        base_price=200,
        volatility=0.5,
        description="Vintage fermented in ionised cloud vineyards.",
    ),
    CommodityDef(
        id="void_silk",
        name="Void Silk",
        category=CommodityCategory.LUXURY,
        base_price=350,
        volatility=0.6,
        description="Fabric spun by vacuum-dwelling organisms.",
    ),
    CommodityDef(
        id="ancient_artifacts",
        name="Ancient Artifacts",
        category=CommodityCategory.LUXURY,
        base_price=800,
        volatility=0.7,
        description="Fragments of pre-human civilisations.",
    ),
    CommodityDef(
        id="combat_stims",
        name="Combat Stims",
        category=CommodityCategory.CONTRABAND,
        base_price=150,
        volatility=0.6,
        description="Neural accelerants banned in most jurisdictions.",
        illegal=True,
        legal_in=("void_runners",),
    ),
    CommodityDef(
        id="neural_hackers",
        name="Neural Hackers",
        category=CommodityCategory.CONTRABAND,
        base_price=500,
        volatility=0.7,
        description="Intrusion implants for minds and machines alike.",
        illegal=True,
        legal_in=("void_runners",),
    ),
)
