"""Terminal output helpers for the synclab CLI.

JSON views go to stdout so they can be piped; errors go to stderr.
"""
import json

import click

from synclab.offline.schemas import Submission


def print_json(data: dict) -> None:
    """Echo a status or server view as indented, key-sorted JSON."""
    click.echo(json.dumps(data, indent=2, sort_keys=True))


def print_error(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)


def print_success(message: str) -> None:
    click.secho(message, fg="green")


def format_submission(position: int, submission: Submission) -> str:
    """One queue line: 1-based position, answer, submission time."""
    return f"  {position:>3}. {submission.answer}  ({submission.submitted_at})"


def print_submissions(submissions: list[Submission]) -> None:
    """Echo pending submissions oldest first, one per line."""
    for position, submission in enumerate(submissions, start=1):
        click.echo(format_submission(position, submission))
