import logging
from typing import List, Optional

from ctxctl.errors import ContextError, UserAbortedError
from ctxctl.prompt import Chooser, prompt_for_choice
from ctxctl.storage.context_storage import ContextStorage

logger = logging.getLogger(__name__)


def select_context(storage: ContextStorage, names: List[str], message: str,
                   chooser: Chooser = prompt_for_choice) -> Optional[str]:
    """Prompt for one of `names`, highlighting the current default.

    Returns None when there is nothing to choose or the user aborts.
    """
    if not names:
        return None

    try:
        default = storage.read_index().name
    except ContextError:
        default = None
    if default not in names:
        default = None

    try:
        index = chooser(names, default, message)
    except UserAbortedError as e:
        logger.debug("Context selection aborted: %s", e)
        return None

    if 0 <= index < len(names):
        return names[index]
    return None


def resolve_name(storage: ContextStorage, name: Optional[str], names: List[str], message: str,
                 chooser: Chooser = prompt_for_choice) -> Optional[str]:
    """Use `name` as given, or ask the user to pick one. Existence is not checked here."""
    if name is not None:
        return name
    return select_context(storage, names, message, chooser)
