from typing import Callable, List, Optional

import click

from ctxctl.errors import UserAbortedError

# (choices, default, message) -> index into choices
Chooser = Callable[[List[str], Optional[str], str], int]


def prompt_for_choice(choices: List[str], default: Optional[str], message: str) -> int:
    """Ask the user to pick one of `choices` by number and return its index.

    `default`, when it is one of the choices, is offered as the pre-filled answer.
    """
    if not choices:
        raise UserAbortedError("Nothing to choose from")

    click.echo(message)
    for i, choice in enumerate(choices, start=1):
        marker = '*' if choice == default else ' '
        click.echo(f" {marker} {i}) {choice}")

    default_number = choices.index(default) + 1 if default in choices else None
    try:
        number = click.prompt(
            "Choice",
            type=click.IntRange(1, len(choices)),
            default=default_number,
        )
    except click.Abort as e:
        raise UserAbortedError("Selection aborted") from e
    return number - 1
