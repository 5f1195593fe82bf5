"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from ward_vocab.dashboard import (
    get_collection_stats, get_retention_color, get_retention_label, get_ward_counts,
)
from ward_vocab.db import DEFAULT_DB_PATH, init_db
from ward_vocab.flashcards import (
    CardNotFoundError, DuplicateCardError, add_card, find_card, get_categories,
    get_due_cards, list_cards, record_review, remove_card, toggle_card_mastery,
)
from ward_vocab.models import Flashcard
from ward_vocab.scheduler import WARD_NAMES, Grade, describe_dueness, describe_level
from ward_vocab.seed import is_seeded, seed_demo_cards
from ward_vocab.settings import (
    get_hide_mastered, get_log_level, get_session_size, set_hide_mastered, set_setting,
)

console = Console()

EXIT_WORDS = ("q", "menu")

GRADE_KEYS = {
    "a": Grade.AGAIN,
    "h": Grade.HARD,
    "g": Grade.GOOD,
    "e": Grade.EASY,
}


class SessionExitRequested(Exception):
    """The user asked to leave the current session."""


def session_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> str:
    if choices is not None:
        choices = list(choices) + [w for w in EXIT_WORDS if w not in choices]
    answer = Prompt.ask(prompt, choices=choices, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def setup_logging(db_path: str) -> None:
    logging.basicConfig(
        level=get_log_level(db_path),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]Visite[/bold]\n[dim]Medical vocabulary, one ward at a time[/dim]",
        title="Welcome", border_style="cyan",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("visite", "Review due cards"),
        ("list", "Browse the collection"),
        ("add", "Add a word"),
        ("master", "Toggle mastered for a word"),
        ("remove", "Remove a word"),
        ("stats", "Hospital status"),
        ("demo", "Load demo vocabulary"),
        ("settings", "Preferences"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def run_visite(db_path: str, cards: list[Flashcard]) -> int:
    """Grade each card in turn. Returns the number of cards graded."""
    if not cards:
        console.print("[yellow]No patients waiting. Every ward is quiet.[/yellow]")
        return 0
    console.print(f"\n[bold]Visite[/bold]: {len(cards)} cards ([dim]q to stop[/dim])\n")
    graded = 0
    for i, card in enumerate(cards, 1):
        console.print(Panel(
            f"[bold]{card.display_term}[/bold]\n[dim]{card.category} | {describe_level(card.proficiency_level)}[/dim]",
            title=f"Card {i}/{len(cards)}", border_style="cyan",
        ))
        session_prompt("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
        back = f"[bold]{card.translation}[/bold]"
        if card.definition:
            back += f"\n{card.definition}"
        if card.example_sentence:
            back += f"\n\n[italic]{card.example_sentence}[/italic]"
            if card.example_translation:
                back += f"\n[dim]{card.example_translation}[/dim]"
        console.print(Panel(back, border_style="green"))
        key = session_prompt("Grade (a=again, h=hard, g=good, e=easy)", choices=list(GRADE_KEYS))
        updated = record_review(db_path, card.id, GRADE_KEYS[key.strip().lower()])
        graded += 1
        console.print(
            f"  -> {describe_level(updated.proficiency_level)}, "
            f"next review {describe_dueness(updated.next_review_at)}\n"
        )
    return graded


def cmd_visite(db_path: str):
    cards = get_due_cards(db_path, limit=get_session_size(db_path))
    try:
        run_visite(db_path, cards)
    except SessionExitRequested:
        console.print("[dim]Visite interrupted. Graded cards are saved.[/dim]")


def cmd_list(db_path: str):
    categories = get_categories(db_path)
    category = Prompt.ask("Category", choices=["All"] + categories, default="All")
    search = Prompt.ask("Search", default="", show_default=False)
    cards = list_cards(db_path, category=category, search=search, hide_mastered=get_hide_mastered(db_path))
    if not cards:
        console.print("[yellow]No cards match.[/yellow]")
        return
    table = Table(title=f"Vocabulary ({len(cards)})")
    table.add_column("Term", style="cyan")
    table.add_column("Translation")
    table.add_column("Category")
    table.add_column("Ward")
    table.add_column("Next review", justify="right")
    for c in cards:
        due = "[green]mastered[/green]" if c.mastered else describe_dueness(c.next_review_at)
        table.add_row(c.display_term, c.translation, c.category, describe_level(c.proficiency_level), due)
    console.print(table)


def cmd_add(db_path: str):
    term = Prompt.ask("Term").strip()
    if not term:
        console.print("[red]A term is required.[/red]")
        return
    card = Flashcard(
        term=term,
        article=Prompt.ask("Article", choices=["der", "die", "das", ""], default="", show_default=False),
        translation=Prompt.ask("Translation"),
        definition=Prompt.ask("Definition", default="", show_default=False),
        example_sentence=Prompt.ask("Example sentence", default="", show_default=False),
        example_translation=Prompt.ask("Example translation", default="", show_default=False),
        category=Prompt.ask("Category", default="General"),
        syllables=Prompt.ask("Syllables", default="", show_default=False),
    )
    try:
        add_card(db_path, card)
    except DuplicateCardError as e:
        console.print(f"[yellow]{e}[/yellow]")
        return
    console.print(f"[green]Admitted {card.display_term} to the {WARD_NAMES[0]}.[/green]")


def cmd_master(db_path: str):
    card = find_card(db_path, Prompt.ask("Term"))
    if card is None:
        console.print("[red]No such card.[/red]")
        return
    updated = toggle_card_mastery(db_path, card.id)
    if updated.mastered:
        console.print(f"[green]{updated.display_term} discharged.[/green]")
    else:
        console.print(f"[yellow]{updated.display_term} readmitted to {describe_level(updated.proficiency_level)}.[/yellow]")


def cmd_remove(db_path: str):
    """Remove one or more cards, given as comma-separated terms."""
    terms = [t.strip() for t in Prompt.ask("Term(s), comma-separated").split(",") if t.strip()]
    cards = []
    for term in terms:
        card = find_card(db_path, term)
        if card is None:
            console.print(f"[red]No such card: {term}[/red]")
        elif card.id not in [c.id for c in cards]:
            cards.append(card)
    if not cards:
        return
    names = ", ".join(c.display_term for c in cards)
    if Confirm.ask(f"Remove {names} and their history?", default=False):
        for card in cards:
            remove_card(db_path, card.id)
        console.print(f"[green]Removed {len(cards)} card(s).[/green]")


def cmd_stats(db_path: str):
    stats = get_collection_stats(db_path)
    counts = get_ward_counts(db_path)
    table = Table(title="Hospital Status")
    table.add_column("Ward", style="cyan")
    table.add_column("Patients", justify="right")
    for level, count in enumerate(counts):
        table.add_row(describe_level(level), str(count))
    console.print(table)

    retention = stats["retention"]
    color = get_retention_color(retention)
    bar_filled = int(retention / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Retention: [bold]{retention}%[/bold] {bar} [{color}]{get_retention_label(retention)}[/{color}]")
    console.print(f"  Cards: [bold]{stats['total_cards']}[/bold]  |  "
                  f"Due: [bold]{stats['due_cards']}[/bold]  |  "
                  f"Mastered: [bold]{stats['mastered_cards']}[/bold]  |  "
                  f"Reviews: [bold]{stats['reviews']}[/bold]")


def cmd_demo(db_path: str):
    added = seed_demo_cards(db_path)
    console.print(f"[green]Loaded {added} demo cards.[/green]")


def cmd_settings(db_path: str):
    size = IntPrompt.ask("Cards per visite", default=get_session_size(db_path))
    set_setting(db_path, "session_size", str(max(1, size)))
    set_hide_mastered(db_path, Confirm.ask("Hide mastered cards in list?", default=get_hide_mastered(db_path)))
    level = Prompt.ask(
        "Log level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=logging.getLevelName(get_log_level(db_path)),
    )
    set_setting(db_path, "log_level", level)
    logging.getLogger().setLevel(level)
    console.print("[green]Settings saved.[/green]")


COMMANDS = {
    "visite": cmd_visite,
    "list": cmd_list,
    "add": cmd_add,
    "master": cmd_master,
    "remove": cmd_remove,
    "stats": cmd_stats,
    "demo": cmd_demo,
    "settings": cmd_settings,
}


def main():
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    setup_logging(db_path)
    show_welcome()
    if not is_seeded(db_path):
        console.print("[dim]Your collection is empty. Type 'demo' to load sample words.[/dim]")

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="visite").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Schicht beendet. See you tomorrow![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(db_path)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except CardNotFoundError as e:
            console.print(f"[red]{e}[/red]")
        except Exception as e:
            logging.getLogger(__name__).debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
