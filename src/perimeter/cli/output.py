"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables for questions, working steps and the shape catalogue.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from perimeter.domain import Question, ShapeDefinition, StepKind
from perimeter.utils import GenerationStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info

STEP_STYLES = {
    StepKind.INFO: "bold",
    StepKind.CONVERSION: "cyan",
    StepKind.DERIVATION: "yellow",
    StepKind.SUM: "",
    StepKind.ANSWER: "bold green",
}


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Perimeter[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_question(question: Question, show_answer: bool = False) -> None:
    """Print a question: shape, edge table and (optionally) the working.

    Args:
        question: Generated question
        show_answer: Show revealed lengths, working steps and the answer
    """
    console.print(
        f"\n[bold]{question.definition.name}[/bold] {SYM_DOT} level {question.level} "
        f"{SYM_DOT} {len(question.edges)} edges"
    )

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Edge", justify="right")
    table.add_column("Orientation")
    table.add_column("Label")
    if show_answer:
        table.add_column("Length", justify="right")

    for edge in question.edges:
        label = edge.label_text() if edge.labelled else f"[dim]{SYM_DOT}[/dim]"
        row = [str(edge.index), edge.orientation.value, label]
        if show_answer:
            row.append(f"{edge.length_cm} cm")
        table.add_row(*row)
    console.print(table)

    if show_answer:
        print_step("Working")
        for step in question.steps:
            line = Text("  ")
            line.append(step.text, style=STEP_STYLES[step.kind])
            console.print(line)


def print_catalogue(definitions: list[ShapeDefinition]) -> None:
    """Print the shape catalogue as a table.

    Args:
        definitions: Catalogue entries to list
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Family")
    table.add_column("Sides", justify="right")
    table.add_column("Tier", justify="right")
    table.add_column("Groups")

    for definition in definitions:
        table.add_row(
            definition.key,
            definition.name,
            definition.kind.value,
            definition.family.value,
            str(definition.sides),
            str(definition.tier),
            str(len(definition.groups)),
        )
    console.print(table)


def print_saved(output_path: str, file_size: str) -> None:
    """Print the path of a written file.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
    """
    line = Text(f"\n{SYM_OK} ", style="bold green")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)


def print_worksheet_summary(pages: int, answer_pages: int, stats: GenerationStats) -> None:
    """Print worksheet generation summary.

    Args:
        pages: Question pages
        answer_pages: Answer pages
        stats: Generation statistics
    """
    levels = ", ".join(f"L{level}: {count}" for level, count in sorted(stats.levels.items()))
    console.print(
        f"  {stats.questions_generated} questions ({levels}) {SYM_DOT} "
        f"{pages} question pages {SYM_DOT} {answer_pages} answer pages"
    )
    dup_style = "yellow" if stats.duplicates_accepted else "green"
    console.print(
        f"  {stats.retries} retries ({stats.retry_rate:.2f} per question) {SYM_DOT} "
        f"{stats.fallbacks_used} fallbacks {SYM_DOT} "
        f"[{dup_style}]{stats.duplicates_accepted} duplicates accepted[/{dup_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
