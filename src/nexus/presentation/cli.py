from __future__ import annotations

import os
import time
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from nexus.application.dtos import MarketRowView, RouteView, StatusView
from nexus.application.services.game_service import GameService
from nexus.application.services.notifications import Severity
from nexus.domain.models.combat import CombatAction, CombatState
from nexus.domain.models.ship import ShipClass

_CONSOLE = Console()

_BORDER_STATUS = "cyan"
_BORDER_MARKET = "green"
_BORDER_COMBAT = "red"
_BORDER_STORY = "magenta"
_BORDER_SYSTEM = "bright_black"

_SEVERITY_STYLE = {
    Severity.INFO: "white",
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.DANGER: "bold red",
}

_COMBAT_CHOICES = {
    "1": CombatAction.ATTACK,
    "2": CombatAction.HEAVY_ATTACK,
    "3": CombatAction.DEFEND,
    "4": CombatAction.REPAIR,
    "5": CombatAction.FLEE,
}


def _decorate_title(title: str) -> str:
    core = str(title or "").strip() or "Nexus"
    return f"[bold yellow]{core}[/bold yellow]"


def _travel_delay_seconds() -> float:
    try:
        return max(0.0, float(os.getenv("NEXUS_TRAVEL_DELAY_S", "0.6")))
    except ValueError:
        return 0.6


def render_notifications(game: GameService, console: Console = _CONSOLE) -> None:
    for notification in game.notifications.drain():
        style = _SEVERITY_STYLE.get(notification.severity, "white")
        console.print(f"[{style}]{notification.message}[/{style}]")


def render_status(status: StatusView, console: Console = _CONSOLE) -> None:
    ship = status.ship
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold yellow", justify="right")
    grid.add_column(style="white")
    grid.add_row("Captain", f"{status.name} (level {status.level}, {status.xp}/{status.next_level_xp} XP)")
    grid.add_row("Credits", f"{status.credits:,} CR")
    grid.add_row("System", f"{status.system_name} [dim]tick {status.tick}, chapter {status.chapter}[/dim]")
    grid.add_row("Ship", f"{ship.name} ({ship.ship_class})")
    grid.add_row("Hull", f"{ship.hull}/{ship.max_hull}")
    grid.add_row("Shields", f"{ship.shields}/{ship.max_shields}")
    grid.add_row("Energy", f"{ship.energy}/{ship.max_energy}")
    grid.add_row("Fuel", f"{ship.fuel}/{ship.max_fuel}")
    grid.add_row("Cargo", f"{ship.cargo_used}/{ship.cargo_capacity}")
    if status.reputation:
        grid.add_row("Standing", "\n".join(f"{faction}: {tier}" for faction, tier in status.reputation.items()))
    if status.active_quests:
        grid.add_row("Quests", "\n".join(f"- {title}" for title in status.active_quests))
    console.print(Panel.fit(grid, title=_decorate_title("Status"), border_style=_BORDER_STATUS))


def render_market(rows: List[MarketRowView], console: Console = _CONSOLE) -> None:
    if not rows:
        console.print(Panel.fit("No trading post in this system.", title=_decorate_title("Market"), border_style=_BORDER_MARKET))
        return
    table = Table(show_header=True, header_style="bold yellow")
    table.add_column("#", justify="right")
    table.add_column("Commodity")
    table.add_column("Price", justify="right")
    table.add_column("Supply", justify="right")
    table.add_column("Trend")
    table.add_column("Held", justify="right")
    for index, row in enumerate(rows, start=1):
        name = f"[red]{row.name}[/red]" if row.illegal else row.name
        table.add_row(str(index), name, str(row.price), str(row.supply), row.trend, str(row.held))
    console.print(Panel.fit(table, title=_decorate_title("Market"), border_style=_BORDER_MARKET))


def render_routes(routes: List[RouteView], console: Console = _CONSOLE) -> None:
    table = Table(show_header=True, header_style="bold yellow")
    table.add_column("#", justify="right")
    table.add_column("System")
    table.add_column("Fuel", justify="right")
    table.add_column("Danger", justify="right")
    table.add_column("Faction")
    for index, route in enumerate(routes, start=1):
        label = route.name if route.visited else f"{route.name} [dim](uncharted)[/dim]"
        table.add_row(str(index), label, str(route.fuel_cost), str(route.danger_level), route.faction or "-")
    console.print(Panel.fit(table, title=_decorate_title("Hyperlanes"), border_style=_BORDER_SYSTEM))


def render_combat(state: CombatState, game: GameService, console: Console = _CONSOLE) -> None:
    enemy = state.enemy
    ship = game.player.ship
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold cyan")
    grid.add_column(style="bold red")
    grid.add_row(ship.name, enemy.name if enemy is not None else "-")
    grid.add_row(f"Hull {ship.hull}/{ship.max_hull}", f"Hull {enemy.hull}/{enemy.max_hull}" if enemy else "")
    grid.add_row(f"Shields {ship.shields}/{ship.max_shields}", f"Shields {enemy.shields}/{enemy.max_shields}" if enemy else "")
    grid.add_row(f"Energy {ship.energy}/{ship.max_energy}", "")
    console.print(Panel.fit(grid, title=_decorate_title(f"Combat - round {state.round}"), border_style=_BORDER_COMBAT))


def _print_messages(messages: List[str], console: Console) -> None:
    for message in messages:
        console.print(message)


def run_dialogue(game: GameService, console: Console = _CONSOLE) -> None:
    while game.dialogue.active:
        node = game.dialogue.current_node()
        options = game.dialogue.available_options()
        if node is None or not options:
            game.dialogue.end()
            return
        body = [f"[bold]{node.speaker}[/bold]: {node.text}", ""]
        body.extend(f"{index}. {option.text}" for index, option in enumerate(options, start=1))
        console.print(Panel.fit("\n".join(body), title=_decorate_title("Comms"), border_style=_BORDER_STORY))
        choice = Prompt.ask("Reply", choices=[str(index) for index in range(1, len(options) + 1)], console=console)
        game.choose_dialogue_option(options[int(choice) - 1].id)
        render_notifications(game, console)


def run_event(game: GameService, console: Console = _CONSOLE) -> None:
    event = game.story.active_event
    if event is None:
        return
    body = [event.description, ""]
    body.extend(f"{index}. {choice.text}" for index, choice in enumerate(event.choices, start=1))
    console.print(Panel.fit("\n".join(body), title=_decorate_title(event.title), border_style=_BORDER_STORY))
    choice = Prompt.ask("Decide", choices=[str(index) for index in range(1, len(event.choices) + 1)], console=console)
    game.resolve_event_choice(int(choice) - 1)
    render_notifications(game, console)


def run_combat(game: GameService, console: Console = _CONSOLE) -> None:
    while game.combat.active and not game.combat.is_terminal:
        render_combat(game.combat, game, console)
        console.print("1. Attack  2. Heavy attack  3. Defend  4. Repair  5. Flee")
        choice = Prompt.ask("Action", choices=list(_COMBAT_CHOICES), console=console)
        result = game.combat_action(_COMBAT_CHOICES[choice])
        _print_messages(result.messages, console)
        render_notifications(game, console)
    if game.combat.enemy is not None:
        _print_messages(game.finish_combat().messages, console)
        render_notifications(game, console)


def _travel(game: GameService, console: Console) -> None:
    routes = game.galaxy_view()
    if not routes:
        console.print("No charted hyperlanes lead out of this system.")
        return
    render_routes(routes, console)
    choice = Prompt.ask("Destination (0 to stay)", choices=[str(index) for index in range(0, len(routes) + 1)], console=console)
    if choice == "0":
        return
    plan = game.begin_travel(routes[int(choice) - 1].system_id)
    render_notifications(game, console)
    if plan is None:
        return
    with console.status("Engaging warp drive..."):
        time.sleep(_travel_delay_seconds())
    outcome = game.complete_travel(plan)
    render_notifications(game, console)
    if outcome.kind == "event":
        run_event(game, console)
    elif outcome.kind == "combat":
        run_combat(game, console)
    if game.dialogue.active:
        run_dialogue(game, console)


def _trade(game: GameService, console: Console) -> None:
    rows = game.market_view()
    render_market(rows, console)
    if not rows:
        return
    action = Prompt.ask("Buy, sell or leave", choices=["b", "s", "q"], default="q", console=console)
    if action == "q":
        return
    index = Prompt.ask("Commodity #", choices=[str(i) for i in range(1, len(rows) + 1)], console=console)
    quantity = IntPrompt.ask("Quantity", default=1, console=console)
    row = rows[int(index) - 1]
    if action == "b":
        game.buy(row.commodity_id, quantity)
    else:
        game.sell(row.commodity_id, quantity)
    render_notifications(game, console)
    if game.dialogue.active:
        run_dialogue(game, console)


def _contacts(game: GameService, console: Console) -> None:
    contacts = game.contacts_here()
    if not contacts:
        console.print("Nobody here answers your hail.")
        return
    for index, contact in enumerate(contacts, start=1):
        console.print(f"{index}. {contact.name}")
    choice = Prompt.ask("Hail (0 to cancel)", choices=[str(i) for i in range(0, len(contacts) + 1)], console=console)
    if choice == "0":
        return
    game.start_contact_dialogue(contacts[int(choice) - 1].id)
    render_notifications(game, console)
    run_dialogue(game, console)


def _ship_services(game: GameService, console: Console) -> None:
    status = game.status_view()
    upgrades = game.available_upgrades()
    console.print(f"1. Refuel ({status.refuel_cost} CR)")
    console.print(f"2. Repair ({status.repair_cost} CR)")
    for index, upgrade in enumerate(upgrades, start=3):
        console.print(f"{index}. Install {upgrade.name} ({upgrade.cost} CR) - {upgrade.description}")
    choice = Prompt.ask("Service (0 to leave)", choices=[str(i) for i in range(0, len(upgrades) + 3)], console=console)
    if choice == "1":
        game.refuel()
    elif choice == "2":
        game.repair()
    elif choice != "0":
        game.install_upgrade(upgrades[int(choice) - 3].id)
    render_notifications(game, console)


def _save_menu(game: GameService, console: Console) -> None:
    saves = game.list_saves()
    for info in saves:
        stamp = time.strftime("%Y-%m-%d %H:%M", time.localtime(info.timestamp)) if info.timestamp else "?"
        console.print(f"- {info.slot} ({stamp}, v{info.version})")
    action = Prompt.ask("Save, load, delete or back", choices=["s", "l", "d", "q"], default="q", console=console)
    if action == "q":
        render_notifications(game, console)
        return
    slot = Prompt.ask("Slot", default="auto", console=console).strip() or "auto"
    if action == "s":
        game.save_game(slot)
    elif action == "l":
        game.load_game(slot)
    else:
        game.delete_save(slot)
    render_notifications(game, console)


def new_game_prompt(game: GameService, console: Console = _CONSOLE) -> None:
    name = Prompt.ask("Captain's name", default="Captain", console=console)
    classes = [ship_class.value for ship_class in (ShipClass.SCOUT, ShipClass.TRADER, ShipClass.FIGHTER, ShipClass.EXPLORER)]
    ship_class = Prompt.ask("Ship class", choices=classes, default=ShipClass.SCOUT.value, console=console)
    game.new_game(name, ShipClass(ship_class))
    render_notifications(game, console)
    run_dialogue(game, console)


def game_loop(game: GameService, console: Console = _CONSOLE) -> None:
    actions = {
        "1": ("Status", lambda: render_status(game.status_view(), console)),
        "2": ("Travel", lambda: _travel(game, console)),
        "3": ("Market", lambda: _trade(game, console)),
        "4": ("Contacts", lambda: _contacts(game, console)),
        "5": ("Shipyard", lambda: _ship_services(game, console)),
        "6": ("Saves", lambda: _save_menu(game, console)),
    }
    while True:
        if game.combat.active:
            run_combat(game, console)
            continue
        if game.story.active_event is not None:
            run_event(game, console)
            continue
        if game.dialogue.active:
            run_dialogue(game, console)
            continue
        system = game.galaxy.get_system(game.player.current_system)
        header = system.name if system is not None else game.player.current_system
        menu = "  ".join(f"{key}. {label}" for key, (label, _) in actions.items())
        console.print(Panel.fit(f"{menu}  0. Quit", title=_decorate_title(header), border_style=_BORDER_SYSTEM))
        choice = Prompt.ask("Command", choices=[*actions, "0"], console=console)
        if choice == "0":
            game.save_game()
            render_notifications(game, console)
            return
        actions[choice][1]()


def main_menu(game: GameService, console: Optional[Console] = None) -> None:
    console = console or _CONSOLE
    console.print(Panel.fit("A frontier of trade, war and old signals.", title=_decorate_title("Nexus Chronicles")))
    while True:
        choice = Prompt.ask("1. New game  2. Continue  0. Quit", choices=["1", "2", "0"], console=console)
        if choice == "0":
            return
        if choice == "1":
            new_game_prompt(game, console)
        elif not game.load_game():
            render_notifications(game, console)
            continue
        render_notifications(game, console)
        game_loop(game, console)
        return
