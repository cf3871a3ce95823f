"""Command-line interface for the originality engine."""

import sys
import json
from pathlib import Path
from typing import Optional
import click

from .. import __version__
from ..core import (
    Config,
    OriginalityAnalyzer,
    OriginalityError,
    SimilarityMatcher,
    SubmissionText,
    extract_statistics,
    longest_common_run,
)
from ..core.log import set_logger
from .display import create_console, display_course, display_result, display_statistics, get_score_style


def setup_logging(verbose: bool):
    """Set up logging configuration."""
    set_logger(
        'originality',
        level='DEBUG' if verbose else 'WARNING',
        datefmt='%H:%M:%S',
        remove_handlers=True
    )


def make_analyzer(db_url: Optional[str]) -> OriginalityAnalyzer:
    """Build an analyzer, overriding the configured database URL if given."""
    config = Config()
    if db_url:
        config.database_url = db_url
    return OriginalityAnalyzer(config)


db_url_option = click.option(
    '--db-url',
    envvar='ORIGINALITY_DATABASE_URL',
    help='Corpus store URL (can be set via ORIGINALITY_DATABASE_URL env var)'
)
verbose_option = click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')


@click.group()
@click.version_option(version=__version__, prog_name="originality")
def cli():
    """Originality analysis for course submissions using lexical similarity and style heuristics."""
    pass


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--submission-id', '-s', required=True, help='Submission identifier')
@click.option('--course-id', '-c', required=True, help='Course identifier')
@click.option('--assignment-id', '-a', required=True, help='Assignment identifier')
@click.option('--author-id', '-u', required=True, help='Author of the submission')
@click.option('--checked-by', default='cli', show_default=True, help='Who requested the check')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@db_url_option
@verbose_option
def analyze(
    file_path: Path,
    submission_id: str,
    course_id: str,
    assignment_id: str,
    author_id: str,
    checked_by: str,
    as_json: bool,
    db_url: Optional[str],
    verbose: bool
):
    """
    Analyse a submission file and add it to the corpus.

    FILE_PATH: Path to the submission text
    """
    setup_logging(verbose)

    try:
        analyzer = make_analyzer(db_url)
        text = analyzer.read_file(str(file_path))
        envelope = analyzer.analyze(
            SubmissionText(
                submission_id=submission_id,
                course_id=course_id,
                assignment_id=assignment_id,
                author_id=author_id,
                text=text
            ),
            checked_by=checked_by
        )
    except (OriginalityError, ValueError) as e:
        click.echo(f"Error during analysis: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(envelope.to_api(), ensure_ascii=False, indent=2))
    else:
        display_result(envelope)


@cli.command()
@click.argument('submission_id')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@db_url_option
def result(submission_id: str, as_json: bool, db_url: Optional[str]):
    """
    Show the latest analysis of a submission.

    SUBMISSION_ID: Submission identifier
    """
    try:
        envelope = make_analyzer(db_url).get_result(submission_id)
    except OriginalityError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(envelope.to_api(), ensure_ascii=False, indent=2))
    else:
        display_result(envelope)


@cli.command()
@click.argument('course_id')
@db_url_option
def course(course_id: str, db_url: Optional[str]):
    """
    List analyses recorded for a course.

    COURSE_ID: Course identifier
    """
    try:
        envelopes = make_analyzer(db_url).course_results(course_id)
    except OriginalityError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    display_course(course_id, envelopes)


@cli.command()
@click.argument('submission_id')
@db_url_option
def exclude(submission_id: str, db_url: Optional[str]):
    """Exclude a submission from future comparisons."""
    try:
        make_analyzer(db_url).exclude_submission(submission_id)
    except OriginalityError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Excluded {submission_id} from the corpus")


@cli.command()
@click.argument('submission_id')
@db_url_option
def include(submission_id: str, db_url: Optional[str]):
    """Include a previously excluded submission again."""
    try:
        make_analyzer(db_url).include_submission(submission_id)
    except OriginalityError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Included {submission_id} in the corpus")


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def stats(file_path: Path):
    """
    Show text statistics of a file without touching the corpus.

    FILE_PATH: Path to the file to analyse
    """
    text = OriginalityAnalyzer.read_file(str(file_path))
    display_statistics(create_console(), extract_statistics(text))


@cli.command()
@click.argument('file1', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('file2', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def compare(file1: Path, file2: Path):
    """
    Quick pairwise comparison of two files.

    FILE1: First file
    FILE2: Second file
    """
    config = Config()
    text1 = OriginalityAnalyzer.read_file(str(file1))
    text2 = OriginalityAnalyzer.read_file(str(file2))

    similarity = SimilarityMatcher(config).similarity(text1, text2) * 100
    run, _ = longest_common_run(text1, text2, min_length=config.min_match_length)

    console = create_console()
    console.print("Similarity: ", end="")
    console.print(f"{similarity:.1f}%", style=get_score_style(similarity))
    if similarity < config.similarity_threshold * 100:
        console.print("Below the reporting threshold", style="dim")
    if run:
        console.print(f"Longest common passage ({len(run)} chars):", style="bold")
        console.print(run, style="yellow")


if __name__ == "__main__":
    cli()
