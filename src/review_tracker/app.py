"""Interactive CLI application."""
import sys
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from review_tracker.db import DEFAULT_DB_PATH
from review_tracker.dispatcher import Command, Tracker
from review_tracker.errors import TrackerError
from review_tracker.persistence import PersistenceGateway
from review_tracker.scheduler import due_items, format_remaining_time, remaining_time

console = Console()


def show_welcome():
    console.print(Panel(
        "[bold]Review Tracker[/bold]\n[dim]Spaced review for anything you want to keep fresh[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("list", "Show subjects and items"),
        ("subject", "Select a subject"),
        ("add", "Add an item to the selected subject"),
        ("addsubject", "Add a subject"),
        ("rename", "Rename an item or the selected subject"),
        ("describe", "Edit an item's description"),
        ("hide", "Toggle an item's visibility"),
        ("move", "Reorder an item"),
        ("movesubject", "Reorder the selected subject"),
        ("assign", "Move an item to another subject"),
        ("complete", "Mark an item reviewed"),
        ("remove", "Delete an item or the selected subject"),
        ("due", "Items due today or overdue"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_number(prompt: str, count: int) -> int:
    """Ask for a 1-based position and return it 0-based."""
    answer = Prompt.ask(prompt, choices=[str(n) for n in range(1, count + 1)])
    return int(answer) - 1


def selected_subject(tracker: Tracker, subject_id: str | None):
    """The selected subject, falling back to the first one if it is gone."""
    for subject in tracker.subjects:
        if subject.id == subject_id:
            return subject
    return tracker.subjects[0] if tracker.subjects else None


def render_subjects(tracker: Tracker, subject_id: str | None) -> None:
    table = Table(title="Subjects")
    table.add_column("#", justify="right")
    table.add_column("Subject", style="cyan")
    table.add_column("Items", justify="right")
    for n, subject in enumerate(tracker.subjects, 1):
        marker = " ←" if subject.id == subject_id else ""
        table.add_row(
            str(n), (subject.label or " ") + marker,
            str(len(tracker.items_for_subject(subject.id))),
        )
    console.print(table)


def render_items(tracker: Tracker, subject) -> None:
    table = Table(title=subject.label or "Items")
    table.add_column("#", justify="right")
    table.add_column("Due", justify="right")
    table.add_column("Item")
    table.add_column("Description", style="dim")
    on = tracker.clock()
    for n, item in enumerate(tracker.items_for_subject(subject.id), 1):
        days = remaining_time(item, on)
        badge = format_remaining_time(days)
        if days is not None and days <= 0:
            badge = f"[red]{badge}[/red]"
        label = item.label if item.visible else f"[dim]{item.label} (hidden)[/dim]"
        table.add_row(str(n), badge, label, item.description)
    console.print(table)


def pick_item(tracker: Tracker, subject):
    items = tracker.items_for_subject(subject.id)
    if not items:
        console.print("[yellow]No items in this subject yet.[/yellow]")
        return None
    render_items(tracker, subject)
    return items[ask_number("Item", len(items))]


def cmd_list(tracker: Tracker, subject) -> None:
    render_subjects(tracker, subject.id if subject else None)
    if subject:
        render_items(tracker, subject)


def cmd_subject(tracker: Tracker, subject):
    if not tracker.subjects:
        console.print("[yellow]No subjects yet. Use 'addsubject'.[/yellow]")
        return subject
    render_subjects(tracker, subject.id if subject else None)
    return tracker.subjects[ask_number("Subject", len(tracker.subjects))]


def cmd_add(tracker: Tracker, subject) -> None:
    state = tracker.apply(Command("add", {"subject_id": subject.id}))
    label = Prompt.ask("Label", default=state.items[-1].label)
    tracker.apply(Command("update", {"id": state.items[-1].id, "label": label}))
    console.print(f"[green]Added {label}[/green]")


def cmd_add_subject(tracker: Tracker, subject):
    state = tracker.apply(Command("addSubject"))
    new = state.subjects[-1]
    label = Prompt.ask("Label", default=new.label)
    tracker.apply(Command("updateSubject", {"id": new.id, "label": label}))
    return selected_subject(tracker, new.id)


def cmd_rename(tracker: Tracker, subject) -> None:
    target = Prompt.ask("Rename", choices=["item", "subject"], default="item")
    if target == "subject":
        label = Prompt.ask("New subject label", default=subject.label)
        tracker.apply(Command("updateSubject", {"id": subject.id, "label": label}))
        return
    item = pick_item(tracker, subject)
    if item:
        label = Prompt.ask("New label", default=item.label)
        tracker.apply(Command("update", {"id": item.id, "label": label}))


def cmd_describe(tracker: Tracker, subject) -> None:
    item = pick_item(tracker, subject)
    if item:
        description = Prompt.ask("Description", default=item.description)
        tracker.apply(Command("update", {"id": item.id, "description": description}))


def cmd_hide(tracker: Tracker, subject) -> None:
    item = pick_item(tracker, subject)
    if item:
        tracker.apply(Command("update", {"id": item.id, "visible": not item.visible}))


def cmd_move(tracker: Tracker, subject) -> None:
    item = pick_item(tracker, subject)
    if not item:
        return
    siblings = tracker.items_for_subject(subject.id)
    # positions are within the subject; the store orders the global list
    target = siblings[ask_number("New position", len(siblings))]
    tracker.apply(Command("move", {"id": item.id, "index": tracker.items.index(target)}))


def cmd_move_subject(tracker: Tracker, subject) -> None:
    index = ask_number("New position", len(tracker.subjects))
    tracker.apply(Command("moveSubject", {"id": subject.id, "index": index}))


def cmd_assign(tracker: Tracker, subject) -> None:
    item = pick_item(tracker, subject)
    if not item:
        return
    render_subjects(tracker, subject.id)
    target = tracker.subjects[ask_number("Move to subject", len(tracker.subjects))]
    tracker.apply(Command("update", {"id": item.id, "subject_id": target.id}))
    console.print(f"[green]Moved {item.label} to {target.label}[/green]")


def cmd_complete(tracker: Tracker, subject) -> None:
    item = pick_item(tracker, subject)
    if not item:
        return
    candidates = tracker.next_interval_candidates(item.id)
    for n, days in enumerate(candidates, 1):
        console.print(f"  [cyan]{n})[/cyan] {days} days")
    chosen = candidates[ask_number("Next review in", len(candidates))]
    tracker.apply(Command("complete", {"id": item.id, "next_interval": chosen}))
    console.print(f"[green]{item.label} due again in {chosen} days[/green]")


def cmd_remove(tracker: Tracker, subject):
    target = Prompt.ask("Remove", choices=["item", "subject"], default="item")
    if target == "subject":
        count = len(tracker.items_for_subject(subject.id))
        confirm = Prompt.ask(
            f"Delete {subject.label} and its {count} items?", choices=["y", "n"], default="n",
        )
        if confirm == "y":
            tracker.apply(Command("remove", {"id": subject.id}))
        return selected_subject(tracker, subject.id)
    item = pick_item(tracker, subject)
    if item:
        tracker.apply(Command("remove", {"id": item.id}))
    return subject


def cmd_due(tracker: Tracker) -> None:
    due = due_items(tracker.items, tracker.clock())
    if not due:
        console.print("[green]Nothing due. Come back later![/green]")
        return
    labels = {s.id: s.label for s in tracker.subjects}
    table = Table(title="Due")
    table.add_column("Overdue", justify="right")
    table.add_column("Item")
    table.add_column("Subject", style="cyan")
    on = tracker.clock()
    for item in due:
        table.add_row(f"{-remaining_time(item, on)}d", item.label, labels.get(item.subject_id, ""))
    console.print(table)


def configure_logging(db_path: str) -> None:
    logger.remove()
    logger.add(
        Path(db_path).parent / "tracker.log",
        level="DEBUG",
        rotation="1 MB",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    )


def run(tracker: Tracker) -> None:
    subject = selected_subject(tracker, None)
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="list").strip().lower()
        subject = selected_subject(tracker, subject.id if subject else None)
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Bye![/dim]")
                break
            elif choice == "addsubject":
                subject = cmd_add_subject(tracker, subject)
            elif choice == "due":
                cmd_due(tracker)
            elif subject is None:
                console.print("[yellow]Add a subject first with 'addsubject'.[/yellow]")
            elif choice == "list":
                cmd_list(tracker, subject)
            elif choice == "subject":
                subject = cmd_subject(tracker, subject)
            elif choice == "add":
                cmd_add(tracker, subject)
            elif choice == "rename":
                cmd_rename(tracker, subject)
            elif choice == "describe":
                cmd_describe(tracker, subject)
            elif choice == "hide":
                cmd_hide(tracker, subject)
            elif choice == "move":
                cmd_move(tracker, subject)
            elif choice == "movesubject":
                cmd_move_subject(tracker, subject)
            elif choice == "assign":
                cmd_assign(tracker, subject)
            elif choice == "complete":
                cmd_complete(tracker, subject)
            elif choice == "remove":
                subject = cmd_remove(tracker, subject)
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except TrackerError as e:
            logger.warning("Command {} failed: {}", choice, e)
            console.print(f"[red]Error: {e}[/red]")


def main(db_path: str = DEFAULT_DB_PATH):
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    configure_logging(db_path)
    gateway = PersistenceGateway(db_path)
    tracker = Tracker.start(gateway)
    show_welcome()
    try:
        run(tracker)
    finally:
        gateway.flush()


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_DB_PATH)
