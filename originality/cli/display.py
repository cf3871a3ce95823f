"""Rich-based display module for originality analysis results."""

from typing import List
from rich.console import Console, RenderableType
from rich.style import Style
from rich.table import Table
from rich.text import Text

from ..core.types import AnalysisEnvelope, AnalysisResult, MatchedSource, SuspiciousPattern


def create_console() -> Console:
    """Create a rich Console instance."""
    return Console()


def comparison(renderable1: RenderableType, renderable2: RenderableType) -> Table:
    """
    Create a side-by-side comparison table with two columns.

    Args:
        renderable1: Content for the first column
        renderable2: Content for the second column

    Returns:
        A Table with two equal-width columns
    """
    table = Table(show_header=False, pad_edge=False, box=None, expand=True)
    table.add_column("1", ratio=1)
    table.add_column("2", ratio=1)
    table.add_row(renderable1, renderable2)
    return table


def truncate(text: str, max_length: int = 300) -> str:
    """Shorten text to max_length characters, marking the cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def get_score_style(score: float) -> Style:
    """
    Get color style for a 0-100 score.

    Args:
        score: Score or similarity percentage

    Returns:
        Rich Style object
    """
    if score >= 50:
        return Style(color="red", bold=True)
    elif score >= 20:
        return Style(color="yellow", bold=True)
    else:
        return Style(color="green", bold=True)


def display_statistics(console: Console, result: AnalysisResult):
    """Display the statistics block as a two-column table."""
    table = Table(title="Text statistics", show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Characters", f"{result.text_length:,}")
    table.add_row("Words", f"{result.word_count:,}")
    table.add_row("Unique words", f"{result.unique_words:,}")
    table.add_row("Average word length", f"{result.average_word_length:.2f}")
    table.add_row("Sentences", f"{result.sentence_count:,}")
    table.add_row("Average sentence length", f"{result.average_sentence_length:.2f}")
    table.add_row("Readability", f"{result.readability_score:.1f}")
    table.add_row("Lexical diversity", f"{result.lexical_diversity:.3f}")
    console.print(table)


def display_source(console: Console, source: MatchedSource, index: int, max_text_length: int = 300):
    """
    Display a single matched source.

    Args:
        console: Rich Console instance
        source: MatchedSource to display
        index: Position in the result list
        max_text_length: Maximum length for displayed text
    """
    header = Text()
    header.append(f"Source #{index}", style="bold cyan")
    header.append(f" {source.source_submission_id} by {source.author_id} - ")
    header.append(f"{source.similarity:.1f}%", style=get_score_style(source.similarity))
    header.append(" similar")
    console.print(header)

    if source.matched_text:
        submitted = Text("Submission:", style="dim")
        submitted.append("\n")
        submitted.append(truncate(source.matched_text, max_text_length), style="bold yellow")

        original = Text(f"Source ({source.submitted_at:%Y-%m-%d}):", style="dim")
        original.append("\n")
        original.append(truncate(source.source_text, max_text_length), style="bold yellow")

        console.print(comparison(submitted, original))
    else:
        console.print("  No common passage long enough to show", style="dim")

    console.print()


def display_patterns(console: Console, patterns: List[SuspiciousPattern]):
    """Display suspicious pattern findings as a table."""
    table = Table(title="Suspicious patterns")
    table.add_column("Type", style="cyan")
    table.add_column("Confidence", justify="right")
    table.add_column("Description")
    table.add_column("Segment", style="dim")
    for pattern in patterns:
        table.add_row(
            pattern.type.value,
            f"{pattern.confidence:.0%}",
            pattern.description,
            truncate(pattern.text_segment, 60)
        )
    console.print(table)


def display_result(envelope: AnalysisEnvelope, max_sources: int = 5):
    """
    Display an analysis result with rich formatting.

    Args:
        envelope: Result to display
        max_sources: Maximum number of matched sources to display
    """
    console = create_console()

    if envelope.status.value == "failed":
        console.print(f"Analysis of {envelope.submission_id} failed", style="bold red")
        if envelope.error:
            console.print(f"  {envelope.error.get('error_type', 'Error')}: {envelope.error.get('error', '')}")
        return

    console.print(f"Analysis of {envelope.submission_id}: {envelope.status.value}", style="bold green")
    console.print("  Similarity score: ", end="")
    console.print(f"{envelope.similarity_score:.1f}%", style=get_score_style(envelope.similarity_score))
    console.print()

    if envelope.analysis_result:
        display_statistics(console, envelope.analysis_result)
        console.print()

    if envelope.matched_sources:
        console.print(f"Top {min(len(envelope.matched_sources), max_sources)} matched sources:", style="bold")
        console.print()
        for i, source in enumerate(envelope.matched_sources[:max_sources], 1):
            display_source(console, source, i)
        if len(envelope.matched_sources) > max_sources:
            console.print(f"... and {len(envelope.matched_sources) - max_sources} more sources", style="dim")
            console.print()
    else:
        console.print("No similar submissions found.", style="bold green")
        console.print()

    if envelope.suspicious_patterns:
        display_patterns(console, envelope.suspicious_patterns)


def display_course(course_id: str, envelopes: List[AnalysisEnvelope]):
    """Display one row per analysed submission of a course."""
    console = create_console()
    if not envelopes:
        console.print(f"No analyses recorded for course {course_id}", style="dim")
        return

    table = Table(title=f"Analyses for course {course_id}")
    table.add_column("Submission")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Sources", justify="right")
    table.add_column("Patterns", justify="right")
    for envelope in envelopes:
        table.add_row(
            envelope.submission_id,
            envelope.status.value,
            Text(f"{envelope.similarity_score:.1f}%", style=get_score_style(envelope.similarity_score)),
            str(len(envelope.matched_sources)),
            str(len(envelope.suspicious_patterns))
        )
    console.print(table)
