class ContextError(Exception):
    """Base class for failures reported to the user as a single line"""


class NotFoundError(ContextError):
    """A directory, context or index could not be found"""


class ParseError(ContextError):
    """A context or index file is not valid JSON of the expected shape"""


class ContextIOError(ContextError):
    """Creating, writing or removing a file, or spawning a process, failed"""


class UserAbortedError(ContextError):
    """The interactive prompt was cancelled"""
