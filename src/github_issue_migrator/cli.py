"""
Interactive command-line interface for the GitHub issue migration tool.
"""

from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from typing import TYPE_CHECKING, Final

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from .config import DEFAULT_CONFIG_PATH, load_config
from .exceptions import ConfigError
from .migrator import IssueMigrator, MigrationContext
from .utils import setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .migrator import BatchResult
    from .models import Issue

logger: logging.Logger = logging.getLogger(__name__)

MODE_ONE_BY_ONE: Final[str] = "one-by-one"
MODE_BY_LABEL: Final[str] = "by-label"
MODE_ALL: Final[str] = "all"
MODES: Final[tuple[str, ...]] = (MODE_ONE_BY_ONE, MODE_BY_LABEL, MODE_ALL)

EXIT_INTERRUPTED: Final[int] = 130


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Interactively migrate issues between GitHub repositories")

    _ = parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the YAML migration config (default: {DEFAULT_CONFIG_PATH})",
    )

    _ = parser.add_argument("--mode", choices=MODES, help="Migration mode; asked interactively when omitted")

    _ = parser.add_argument(
        "--labels", help="Comma-separated labels for by-label mode (all must match); asked when omitted"
    )

    _ = parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase console log verbosity (-v for INFO, -vv for DEBUG)",
    )

    return parser.parse_args(argv)


def parse_labels(text: str) -> list[str]:
    """Split a comma-separated label list, dropping blanks."""
    return [label.strip() for label in text.split(",") if label.strip()]


def _format_labels(labels: Sequence[str]) -> str:
    return ", ".join(f"[green]{escape(label)}[/green]" for label in labels)


def choose_migration_type() -> str:
    return Prompt.ask("How do you want to migrate the issues?", choices=list(MODES), default=MODE_ONE_BY_ONE)


def print_issue_summary(console: Console, issue: Issue) -> None:
    state_style = "green" if issue.state == "open" else "red"
    console.print()
    console.print(f"🚀  Successfully retrieved issue [bold]#{issue.number}[/bold]")
    console.print()
    console.print(f"Title: [bold]{escape(issue.title)}[/bold]")
    console.print(f"Author: [bold]{escape(issue.author)}[/bold]")
    console.print(f"State: [bold {state_style}]{issue.state}[/bold {state_style}]")
    console.print()


def migrate_one_by_one(migrator: IssueMigrator, console: Console) -> None:
    """Migrate single issues chosen by number until the operator stops."""
    while True:
        issue_number = IntPrompt.ask("Which issue do you want to migrate? (type the #)")
        issue = migrator.context.source.get_issue(issue_number)
        print_issue_summary(console, issue)

        confirm = Confirm.ask(
            f"You're about to migrate issue [bold yellow]#{issue.number}[/bold yellow] from "
            f"[bold]{migrator.source_name}[/bold] to [bold]{migrator.destination_name}[/bold]. Are you sure?",
            default=False,
        )
        if confirm:
            outcome = migrator.migrate_issue(issue)
            if outcome is not None and Confirm.ask("Open new issue in browser now?"):
                webbrowser.open(outcome.destination.html_url)

        prefix = "That was fun! 💃 " if confirm else "Oh, I see 👀 "
        if not Confirm.ask(f"{prefix} Do you want to migrate another issue?"):
            return


def _report_batch(console: Console, migrator: IssueMigrator, result: BatchResult) -> None:
    if result.success:
        console.print()
        console.print(
            f"🌟  Successfully migrated {len(result.migrated)} issues from "
            f"[bold]{migrator.source_name}[/bold] to [bold]{migrator.destination_name}[/bold]"
        )
        return

    assert result.failed is not None  # always true when not successful
    console.print(
        f"Stopped after migrating {len(result.migrated)} issues: #{result.failed.number} failed "
        f"and {len(result.remaining)} issues were not migrated.",
        style="red",
    )


def migrate_by_labels(migrator: IssueMigrator, console: Console, labels: Sequence[str]) -> bool:
    """Migrate the open issues matching all labels.

    Returns:
        True if nothing matched and the operator wants to start over.
    """
    issues = migrator.find_issues_by_labels(labels)

    if not issues:
        console.print(f"Sorry, no issues found matching labels {_format_labels(labels)}")
        return Confirm.ask("Do you want to try again?")

    confirm = Confirm.ask(
        f"You're about to migrate [green]{len(issues)} issues[/green] matching the labels "
        f"{_format_labels(labels)}. Are you sure?",
        default=False,
    )
    if confirm:
        _report_batch(console, migrator, migrator.migrate_batch(issues))
    return False


def migrate_all(migrator: IssueMigrator, console: Console) -> None:
    """Migrate every issue of the source repository in ascending number order."""
    issues = migrator.find_all_issues()
    if not issues:
        console.print(f"No issues found in [bold]{migrator.source_name}[/bold]")
        return

    for issue in issues:
        state_style = "green" if issue.state == "open" else "red"
        console.print(f"#{issue.number} [{state_style}]{issue.state}[/{state_style}] {escape(issue.title)}")

    confirm = Confirm.ask(
        f"You're about to migrate [green]all {len(issues)} issues[/green] from "
        f"[bold]{migrator.source_name}[/bold] to [bold]{migrator.destination_name}[/bold]. Are you sure?",
        default=False,
    )
    if confirm:
        _report_batch(console, migrator, migrator.migrate_batch(issues))


def run_migration(
    migrator: IssueMigrator,
    console: Console,
    *,
    mode: str | None = None,
    labels: str | None = None,
) -> None:
    """Run the selected migration flow, starting over when the operator asks to."""
    while True:
        selected = mode or choose_migration_type()
        logger.info(f"Migration mode: {selected}")

        if selected == MODE_ONE_BY_ONE:
            migrate_one_by_one(migrator, console)
            return
        if selected == MODE_ALL:
            migrate_all(migrator, console)
            return

        label_list = parse_labels(labels or "")
        while not label_list:
            label_list = parse_labels(
                Prompt.ask("Cool, which labels? (separate multiple labels with commas. They will go in AND)")
            )
        if not migrate_by_labels(migrator, console, label_list):
            return
        # Start over from the mode selection
        mode = None
        labels = None


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(verbosity=args.verbose)
    console = Console()

    try:
        config = load_config(args.config)
        context = MigrationContext.from_config(config)
        migrator = IssueMigrator(context, console=console)

        console.print("🖖  Greetings, hooman!\n")
        console.print(
            f"🚚  Ready to migrate issues from [bold]{migrator.source_name}[/bold] "
            f"to [bold]{migrator.destination_name}[/bold]?\n"
        )
        run_migration(migrator, console, mode=args.mode, labels=args.labels)
        console.print("\n👋  Ok! Goodbye!", style="bold")

    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")  # noqa: TRY400
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\nInterrupted; any issue in flight may be partially migrated.", style="yellow")
        sys.exit(EXIT_INTERRUPTED)
    except Exception:
        logger.exception("Migration failed")
        sys.exit(1)

    sys.exit(0)
