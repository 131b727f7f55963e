"""Handlers for the context commands.

Every handler resolves the context directory itself, performs a single
operation against it and returns a CommandResult. Failures are raised as
ContextError subclasses; nothing here exits the process.
"""
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ctxctl.errors import ContextError, ContextIOError, NotFoundError
from ctxctl.prompt import Chooser, prompt_for_choice
from ctxctl.selector import resolve_name
from ctxctl.storage.context_storage import ContextStorage

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Human readable message plus a structured payload for machine output"""
    message: str
    payload: dict = field(default_factory=dict)


def handle_list(directory: Optional[Path] = None) -> CommandResult:
    """List every stored context, marking the default one"""
    storage = ContextStorage.from_directory(directory)
    try:
        default = storage.read_index().name
    except ContextError as e:
        # no index yet just means no default
        logger.debug("No default context: %s", e)
        default = None
    names = storage.list_names()

    lines = [f"{n} (default)" if n == default else n for n in names]
    message = f"====== Contexts found in {storage.storage_dir} ======\n" + "\n".join(lines)
    return CommandResult(message, {
        "contexts": names,
        "default": default if default is not None else "N/A",
    })


def handle_default(directory: Optional[Path] = None, name: Optional[str] = None,
                   chooser: Chooser = prompt_for_choice) -> CommandResult:
    """Point the index at an existing context"""
    storage = ContextStorage.from_directory(directory)
    names = storage.list_names()
    target = resolve_name(storage, name, names, "Select a default context:", chooser)

    if target is None or target not in names:
        raise NotFoundError("Failed to set new default, context supplied was not found")

    storage.write_index(target)
    return CommandResult("Set new context successfully", {"success": True})


def handle_new(directory: Optional[Path] = None, name: str = "") -> CommandResult:
    """Create a context with default values, replacing one of the same name"""
    storage = ContextStorage.from_directory(directory)
    stem = storage.create_context(name)
    return CommandResult(
        f"Created context {stem}.json with default values",
        {"success": True, "name": stem},
    )


def handle_delete(directory: Optional[Path] = None, name: Optional[str] = None,
                  chooser: Chooser = prompt_for_choice) -> CommandResult:
    storage = ContextStorage.from_directory(directory)
    names = storage.list_names()
    target = resolve_name(storage, name, names, "Select a context to delete:", chooser)

    if target is None:
        raise NotFoundError("Failed to delete, no context found")
    storage.delete_context(target)
    return CommandResult("Removed file successfully", {"success": True})


def handle_edit(directory: Optional[Path] = None, name: Optional[str] = None,
                editor: Optional[str] = None, chooser: Chooser = prompt_for_choice) -> CommandResult:
    """Open a context file in the user's editor and wait for it to exit.

    The file is not validated afterwards; a broken edit shows up the next
    time the context is loaded.
    """
    storage = ContextStorage.from_directory(directory)
    editor_path = shutil.which(editor) if editor else None
    if editor_path is None:
        raise ContextIOError(
            f"Editor '{editor}' not found, it must be on your $PATH or an absolute path"
        )

    names = storage.list_names()
    target = resolve_name(storage, name, names, "Select a context to edit:", chooser)
    if target is None or target not in names:
        raise NotFoundError("Unable to find context supplied, please ensure it exists")

    path = storage.context_path(target)
    try:
        subprocess.run([editor_path, str(path)])
    except OSError as e:
        raise ContextIOError(f"Failed to launch editor '{editor}': {e.strerror}") from e
    return CommandResult("Finished editing context successfully", {"success": True})


def handle_show(directory: Optional[Path] = None, name: Optional[str] = None,
                chooser: Chooser = prompt_for_choice) -> CommandResult:
    """Show a context's values; without a name, the default context is shown"""
    storage = ContextStorage.from_directory(directory)
    names = storage.list_names()

    if name is None:
        try:
            default = storage.read_index().name
        except ContextError as e:
            logger.debug("No default context: %s", e)
            default = None
        if default in names:
            target = default
        else:
            target = resolve_name(storage, None, names, "Select a context to show:", chooser)
            if target is None:
                raise NotFoundError("No context selected")
    elif name in names:
        target = name
    else:
        raise NotFoundError(f"Unable to find context '{name}', please ensure it exists")

    record = storage.load(target)

    data = record.to_dict()
    lines = [f"{key}: {'' if value is None else value}" for key, value in data.items()]
    message = f"====== Context {target} ======\n" + "\n".join(lines)
    return CommandResult(message, data)
