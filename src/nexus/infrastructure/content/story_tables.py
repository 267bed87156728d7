from __future__ import annotations

from nexus.domain.models.story import (
    Chapter,
    ChapterUnlock,
    Contact,
    CreditsConsequence,
    DialogueNode,
    DialogueOption,
    DialogueRequirement,
    EventChoice,
    EventCondition,
    EventType,
    FlagConsequence,
    GameEvent,
    ObjectiveType,
    Quest,
    QuestConsequence,
    QuestObjective,
    QuestStatus,
    ReputationConsequence,
    XpConsequence,
)

QUESTS = (
    Quest(
        id="q_first_steps",
        title="First Steps",
        description="Get the ship paying for itself: fly a route and turn a profit.",
        chapter=1,
        status=QuestStatus.AVAILABLE,
        is_main=True,
        objectives=[
            QuestObjective("obj_travel", "Travel to any neighbouring system", ObjectiveType.TRAVEL, "any", required=1),
            QuestObjective("obj_trade", "Complete a trade", ObjectiveType.TRADE, "any", required=1),
            QuestObjective("obj_earn", "Move 500 credits of goods", ObjectiveType.TRADE, "credits_500", required=500),
        ],
        rewards=[CreditsConsequence(200), XpConsequence(50), QuestConsequence("q_follow_signal")],
    ),
    Quest(
        id="q_cargo_run",
        title="Cargo Runner",
        description="The Free Traders Guild pays a bonus to captains who keep goods moving.",
        chapter=1,
        status=QuestStatus.AVAILABLE,
        objectives=[
            QuestObjective("obj_trades", "Complete three trades", ObjectiveType.TRADE, "any", required=3),
        ],
        rewards=[CreditsConsequence(150), ReputationConsequence("free_traders", 5)],
    ),
    Quest(
        id="q_follow_signal",
        title="Follow the Signal",
        description="Trace the anomalous transmission to its relay at the Observatory.",
        chapter=1,
        status=QuestStatus.LOCKED,
        is_main=True,
        objectives=[
            QuestObjective("obj_observatory", "Reach the Observatory", ObjectiveType.TRAVEL, "observatory", required=1),
            QuestObjective("obj_chart", "Chart three new systems", ObjectiveType.EXPLORE, "new_systems", required=3),
        ],
        rewards=[XpConsequence(100), CreditsConsequence(300), FlagConsequence("chapter_1_complete", True)],
    ),
    Quest(
        id="q_meet_foundation",
        title="The Foundation",
        description="Director Selene wants to hear what you found.",
        chapter=2,
        status=QuestStatus.LOCKED,
        is_main=True,
        objectives=[
            QuestObjective("obj_selene", "Speak with Director Selene", ObjectiveType.DIALOGUE, "selene_meeting", required=1),
            QuestObjective("obj_archive", "Visit the Deep Archive", ObjectiveType.TRAVEL, "deep_archive", required=1),
        ],
        rewards=[
            ReputationConsequence("foundation", 15),
            XpConsequence(150),
            FlagConsequence("chapter_2_complete", True),
        ],
    ),
    Quest(
        id="q_hunter",
        title="Lane Warden",
        description="Raiders are thinning out the convoys. Thin them out instead.",
        chapter=2,
        status=QuestStatus.LOCKED,
        objectives=[
            QuestObjective("obj_kills", "Win two battles", ObjectiveType.COMBAT, "any", required=2),
        ],
        rewards=[CreditsConsequence(400), XpConsequence(80)],
    ),
    Quest(
        id="q_deep_archive",
        title="Echoes in the Dark",
        description="The Archive's star charts point to Architect's Rest.",
        chapter=3,
        status=QuestStatus.LOCKED,
        is_main=True,
        objectives=[
            QuestObjective("obj_rest", "Reach Architect's Rest", ObjectiveType.TRAVEL, "architects_rest", required=1),
            QuestObjective("obj_guardian", "Overcome the Archive Guardian", ObjectiveType.COMBAT, "archive_guardian", required=1),
        ],
        rewards=[XpConsequence(300), CreditsConsequence(1000), FlagConsequence("chapter_3_complete", True)],
    ),
    Quest(
        id="q_synthetic_contact",
        title="Machine Diplomacy",
        description="The Collective has asked for a human envoy.",
        chapter=3,
        status=QuestStatus.LOCKED,
        objectives=[
            QuestObjective("obj_forge", "Travel to Helix Forge", ObjectiveType.TRAVEL, "helix_forge", required=1),
            QuestObjective("obj_envoy", "Speak with the Synthetic envoy", ObjectiveType.DIALOGUE, "synthetic_envoy", required=1),
        ],
        rewards=[ReputationConsequence("synthetics", 20), XpConsequence(120)],
    ),
    Quest(
        id="q_final_choice",
        title="Terminus",
        description="The signal's last coordinates lead beyond the charted dark.",
        chapter=4,
        status=QuestStatus.LOCKED,
        is_main=True,
        objectives=[
            QuestObjective("obj_terminus", "Reach Terminus", ObjectiveType.TRAVEL, "terminus", required=1),
        ],
        rewards=[XpConsequence(500), FlagConsequence("chapter_4_complete", True), FlagConsequence("game_complete", True)],
    ),
)

_CHAPTER_1_INTRO = (
    DialogueNode(
        id="ch1_intro_1",
        speaker="Ship AI",
        text="Captain, long-range sensors are picking up a signal from beyond the frontier. It matches no known protocol.",
        options=(
            DialogueOption("ch1_1a", "Analyse it. What can you tell me?", next_node_id="ch1_intro_2"),
            DialogueOption("ch1_1b", "How far out is the source?", next_node_id="ch1_intro_2b"),
        ),
    ),
    DialogueNode(
        id="ch1_intro_2",
        speaker="Ship AI",
        text="It is structured and very old. The carrier wave embeds mathematical constants. It may be Architect in origin.",
        options=(
            DialogueOption("ch1_2a", "Then we follow it.", next_node_id="ch1_intro_3"),
        ),
    ),
    DialogueNode(
        id="ch1_intro_2b",
        speaker="Ship AI",
        text="Several jumps out, past the Observatory. And it is getting stronger.",
        options=(
            DialogueOption("ch1_2b_a", "Stronger? Plot a course.", next_node_id="ch1_intro_3"),
            DialogueOption(
                "ch1_2b_b",
                "We should tell the Foundation.",
                next_node_id="ch1_intro_3",
                consequences=(ReputationConsequence("foundation", 5),),
            ),
        ),
    ),
    DialogueNode(
        id="ch1_intro_3",
        speaker="Ship AI",
        text="Course plotted. I suggest we trade along the way; the frontier is expensive.",
        options=(
            DialogueOption(
                "ch1_3a",
                "Let's begin.",
                next_node_id=None,
                consequences=(QuestConsequence("q_follow_signal"), FlagConsequence("heard_signal", True)),
            ),
        ),
    ),
)

_CHAPTER_2_INTRO = (
    DialogueNode(
        id="ch2_intro_1",
        speaker="Ship AI",
        text="Incoming hail from the Observatory. Director Vara Selene requests a meeting in person.",
        options=(
            DialogueOption("ch2_1a", "Tell her we're on our way.", next_node_id=None),
            DialogueOption(
                "ch2_1b",
                "Make her wait.",
                next_node_id=None,
                consequences=(ReputationConsequence("foundation", -5),),
            ),
        ),
    ),
)

_CHAPTER_3_INTRO = (
    DialogueNode(
        id="ch3_intro_1",
        speaker="Archivist Teodor",
        text="The Archive's oldest charts show a system that no survey has ever reached: Architect's Rest.",
        options=(
            DialogueOption("ch3_1a", "Then we'll be the first.", next_node_id="ch3_intro_2"),
        ),
    ),
    DialogueNode(
        id="ch3_intro_2",
        speaker="Archivist Teodor",
        text="Something still guards it. Go armed.",
        options=(
            DialogueOption("ch3_2a", "Understood.", next_node_id=None, consequences=(XpConsequence(25),)),
        ),
    ),
)

_CHAPTER_4_INTRO = (
    DialogueNode(
        id="ch4_intro_1",
        speaker="Ship AI",
        text="The guardian's core held one last set of coordinates. Terminus.",
        options=(
            DialogueOption("ch4_1a", "Take us there.", next_node_id=None),
        ),
    ),
)

CHAPTERS = (
    Chapter(
        id=1,
        title="The Signal",
        description="A transmission from beyond the frontier.",
        quests=("q_first_steps", "q_cargo_run", "q_follow_signal"),
        intro_dialogue=_CHAPTER_1_INTRO,
    ),
    Chapter(
        id=2,
        title="The Foundation",
        description="Old keepers of knowledge take an interest.",
        quests=("q_meet_foundation", "q_hunter"),
        intro_dialogue=_CHAPTER_2_INTRO,
        unlock_condition=ChapterUnlock(chapter=1, flag="chapter_1_complete"),
    ),
    Chapter(
        id=3,
        title="Echoes of the Architects",
        description="The trail leads to a dead star.",
        quests=("q_deep_archive", "q_synthetic_contact"),
        intro_dialogue=_CHAPTER_3_INTRO,
        unlock_condition=ChapterUnlock(chapter=2, flag="chapter_2_complete"),
    ),
    Chapter(
        id=4,
        title="Terminus",
        description="The end of the charted dark.",
        quests=("q_final_choice",),
        intro_dialogue=_CHAPTER_4_INTRO,
        unlock_condition=ChapterUnlock(chapter=3, flag="chapter_3_complete"),
    ),
)

CONTACTS = (
    Contact(
        id="selene_meeting",
        name="Director Vara Selene",
        system_id="observatory",
        nodes=(
            DialogueNode(
                id="selene_1",
                speaker="Director Vara Selene",
                text="So you're the one chasing our signal. The Foundation has listened to it for decades, but it changed recently.",
                options=(
                    DialogueOption("selene_1a", "What changed?", next_node_id="selene_2"),
                    DialogueOption(
                        "selene_1b",
                        "Old friends of the Foundation should share what they know.",
                        next_node_id="selene_2",
                        requires=DialogueRequirement(faction="foundation", min_reputation=10),
                        consequences=(ReputationConsequence("foundation", 5),),
                    ),
                ),
            ),
            DialogueNode(
                id="selene_2",
                speaker="Director Vara Selene",
                text="It woke up. Go to the Deep Archive; the Archivist will open the old charts for you.",
                options=(
                    DialogueOption(
                        "selene_2a",
                        "I'll go.",
                        next_node_id=None,
                        consequences=(FlagConsequence("archive_access", True),),
                    ),
                ),
            ),
        ),
    ),
    Contact(
        id="synthetic_envoy",
        name="Envoy Seven",
        system_id="helix_forge",
        nodes=(
            DialogueNode(
                id="envoy_1",
                speaker="Envoy Seven",
                text="Human. The Consensus has modelled you. You are less predictable than projected.",
                options=(
                    DialogueOption("envoy_1a", "I'll take that as a compliment.", next_node_id="envoy_2"),
                    DialogueOption(
                        "envoy_1b",
                        "A veteran captain doesn't need your models.",
                        next_node_id="envoy_2",
                        requires=DialogueRequirement(stat_key="level", stat_min=3),
                        consequences=(ReputationConsequence("synthetics", 5),),
                    ),
                ),
            ),
            DialogueNode(
                id="envoy_2",
                speaker="Envoy Seven",
                text="The Architects built us a door. We would like to know who is knocking.",
                options=(
                    DialogueOption("envoy_2a", "So would I.", next_node_id=None, consequences=(XpConsequence(40),)),
                ),
            ),
        ),
    ),
    Contact(
        id="dockmaster",
        name="Dockmaster Rel",
        system_id="nexus_prime",
        nodes=(
            DialogueNode(
                id="dock_1",
                speaker="Dockmaster Rel",
                text="Berth fees are paid, captain. Anything else?",
                options=(
                    DialogueOption("dock_1a", "Any rumours?", next_node_id="dock_2"),
                    DialogueOption(
                        "dock_1b",
                        "I have the Guild seal.",
                        next_node_id="dock_2",
                        requires=DialogueRequirement(item="guild_seal"),
                    ),
                    DialogueOption("dock_1c", "Nothing, thanks.", next_node_id=None),
                ),
            ),
            DialogueNode(
                id="dock_2",
                speaker="Dockmaster Rel",
                text="Prices for raw ore run hot anywhere the tech is high. Sell your Kessler haul in Sol Tertius.",
                options=(
                    DialogueOption(
                        "dock_2a",
                        "Good to know.",
                        next_node_id=None,
                        consequences=(FlagConsequence("heard_ore_tip", True),),
                    ),
                ),
            ),
        ),
    ),
)

EVENTS = (
    GameEvent(
        id="evt_distress_signal",
        title="Distress Signal",
        description="A weak distress call repeats from a drifting shuttle.",
        type=EventType.DISTRESS,
        choices=(
            EventChoice(
                "Answer the call",
                "You tow the shuttle to safety. Its crew swear to remember your name.",
                (ReputationConsequence("foundation", 5), XpConsequence(30)),
            ),
            EventChoice("Keep flying", "The signal fades behind you."),
        ),
    ),
    GameEvent(
        id="evt_derelict_ship",
        title="Derelict Freighter",
        description="A gutted freighter tumbles slowly across your path.",
        type=EventType.DISCOVERY,
        choices=(
            EventChoice("Salvage the hold", "You pry loose a few crates of sellable scrap.", (CreditsConsequence(150),)),
            EventChoice("Scan the wreck", "The logs tell a grim story, but you learn from it.", (XpConsequence(40),)),
        ),
    ),
    GameEvent(
        id="evt_pirate_ambush",
        title="Pirate Toll",
        description="Void Runner gunships demand a toll for safe passage.",
        type=EventType.ENCOUNTER,
        condition=EventCondition(min_danger=4),
        choices=(
            EventChoice("Pay the toll", "They take your credits and let you pass.", (CreditsConsequence(-200),)),
            EventChoice(
                "Refuse",
                "You burn hard for the jump point and slip their net.",
                (ReputationConsequence("void_runners", -5), XpConsequence(20)),
            ),
        ),
    ),
    GameEvent(
        id="evt_anomaly",
        title="Spatial Anomaly",
        description="Space ahead folds in on itself in a slow, shimmering spiral.",
        type=EventType.ANOMALY,
        choices=(
            EventChoice(
                "Investigate",
                "Your sensors record readings nobody will believe.",
                (XpConsequence(60), FlagConsequence("saw_anomaly", True)),
            ),
            EventChoice("Steer clear", "You give it a wide berth."),
        ),
    ),
    GameEvent(
        id="evt_trader_convoy",
        title="Guild Convoy",
        description="A Free Traders convoy invites you to share a jump window.",
        type=EventType.MARKET,
        condition=EventCondition(max_danger=3),
        choices=(
            EventChoice(
                "Fly with them",
                "Over shared rations they pass along some market tips.",
                (CreditsConsequence(100), ReputationConsequence("free_traders", 5)),
            ),
            EventChoice("Decline politely", "The convoy wishes you clear lanes."),
        ),
    ),
    GameEvent(
        id="evt_nebula_storm",
        title="Ion Storm",
        description="An ion storm rolls across the lane, scrambling your instruments.",
        type=EventType.ANOMALY,
        choices=(
            EventChoice("Ride it out", "It is rough, but your crew learns the ship's limits.", (XpConsequence(25),)),
            EventChoice("Detour around it", "The longer route costs you in docking fees.", (CreditsConsequence(-30),)),
        ),
    ),
    GameEvent(
        id="evt_refugee_ship",
        title="Refugee Transport",
        description="An overcrowded transport begs for supplies.",
        type=EventType.DISTRESS,
        choices=(
            EventChoice(
                "Share supplies",
                "The refugees thank you; Hegemony officials note the breach of embargo.",
                (CreditsConsequence(-100), ReputationConsequence("foundation", 10), ReputationConsequence("hegemony", -5)),
            ),
            EventChoice("Turn them away", "You close the channel.", (ReputationConsequence("foundation", -5),)),
        ),
    ),
    GameEvent(
        id="evt_hegemony_patrol",
        title="Hegemony Inspection",
        description="A Hegemony cutter orders you to hold position for inspection.",
        type=EventType.ENCOUNTER,
        condition=EventCondition(faction="hegemony"),
        choices=(
            EventChoice("Submit to the scan", "The officer waves you through.", (ReputationConsequence("hegemony", 5),)),
            EventChoice(
                "Run the blockade",
                "You outpace the cutter, but your transponder is flagged.",
                (ReputationConsequence("hegemony", -10), ReputationConsequence("void_runners", 5)),
            ),
        ),
    ),
    GameEvent(
        id="evt_archive_echo",
        title="Echo from the Archive",
        description="Your comms replay a fragment of the signal, now addressed to you by name.",
        type=EventType.STORY,
        condition=EventCondition(flag="chapter_2_complete"),
        choices=(
            EventChoice("Record it", "The Archive will want this.", (XpConsequence(100),)),
        ),
    ),
)
