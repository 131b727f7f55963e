from functools import wraps
from pathlib import Path

import click

from ctxctl import __version__
from ctxctl import commands
from ctxctl.errors import ContextError
from ctxctl.logging_config import LEVEL_MAP, configure_logging
from ctxctl.prompt import prompt_for_choice
from ctxctl.utils.utils import OUTPUT_KINDS, format_output

CONTEXTS_ENV = "CTXCTL_CONTEXTS"

# Swapped out in tests to answer prompts without a terminal
chooser = prompt_for_choice


def context_options(func):
    """Add the --directory and --output options shared by every command"""
    func = click.option(
        '--directory', type=click.Path(file_okay=False, path_type=Path),
        envvar=CONTEXTS_ENV, show_envvar=False,
        help=f'Location of context files. Defaults to ${CONTEXTS_ENV} ($HOME/.ctxctl/contexts)',
    )(func)
    func = click.option(
        '--output', '-o', 'output', type=click.Choice(OUTPUT_KINDS), default='text',
        show_default=True, help='Output format',
    )(func)
    return func


def emits_result(func):
    """Echo the handler's CommandResult, turning failures into a one line error"""
    @wraps(func)
    def wrapper(*args, output='text', **kwargs):
        try:
            result = func(*args, **kwargs)
        except ContextError as e:
            raise click.ClickException(str(e)) from e
        click.echo(format_output(result, output))
    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', type=click.Choice(list(LEVEL_MAP), case_sensitive=False),
              default='WARNING', envvar='CTXCTL_LOG_LEVEL', help='Logging verbosity')
def cli(log_level):
    """ctxctl - manage named connection contexts"""
    configure_logging(log_level)


@cli.command('list')
@context_options
@emits_result
def list_contexts(directory):
    """List stored contexts, with the exception of index.json"""
    return commands.handle_list(directory)


@cli.command()
@click.argument('name')
@context_options
@emits_result
def new(name, directory):
    """Create a new context with default values"""
    return commands.handle_new(directory, name)


@cli.command('del')
@click.argument('name', required=False)
@context_options
@emits_result
def delete(name, directory):
    """Delete a stored context. Prompts for one if NAME is omitted"""
    return commands.handle_delete(directory, name, chooser)


@cli.command()
@click.argument('name', required=False)
@context_options
@emits_result
def default(name, directory):
    """Set the default context. Prompts for one if NAME is omitted"""
    return commands.handle_default(directory, name, chooser)


@cli.command()
@click.argument('name', required=False)
@click.option('--editor', '-e', envvar='EDITOR', required=True,
              help='Text editor on your $PATH, or an absolute path')
@context_options
@emits_result
def edit(name, editor, directory):
    """Open a context in a text editor"""
    return commands.handle_edit(directory, name, editor, chooser)


@cli.command()
@click.argument('name', required=False)
@context_options
@emits_result
def show(name, directory):
    """Show a context's values, the default context if NAME is omitted"""
    return commands.handle_show(directory, name, chooser)


if __name__ == '__main__':
    cli()
