import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from ctxctl.errors import ContextIOError, NotFoundError, ParseError
from ctxctl.models import ContextRecord, IndexPointer

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"
CONTEXT_SUFFIX = ".json"
DEFAULT_CONTEXT_DIR = Path(".ctxctl") / "contexts"

_MAX_FILENAME_BYTES = 255
_ILLEGAL_CHARS = re.compile(r'[/\\?<>:*|"\x00-\x1f\x80-\x9f]')
_DOT_RUNS = re.compile(r'\.{2,}')
_TRAILING = re.compile(r'[. ]+$')
_WINDOWS_RESERVED = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)


def resolve_directory(explicit: Optional[Path] = None) -> Path:
    """Return the context directory, creating it if it does not exist yet.

    Creation is best-effort: if it fails, the first real read or write
    against the directory reports the problem.
    """
    if explicit is not None:
        directory = Path(explicit)
    else:
        # Older Pythons raise KeyError when $HOME is unset and there is no passwd entry
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise NotFoundError(
                "Context directory not found, please set $HOME or $CTXCTL_CONTEXTS for managed contexts"
            ) from e
        directory = home / DEFAULT_CONTEXT_DIR

    if not directory.exists():
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug("Could not create context directory: %s", e.strerror)
    return directory


def sanitize_name(name: str) -> str:
    """Turn a user supplied context name into a filesystem-safe file stem"""
    stem = _ILLEGAL_CHARS.sub("_", name)
    stem = _DOT_RUNS.sub("_", stem)
    if stem and set(stem) == {"."}:
        stem = "_"
    if _WINDOWS_RESERVED.match(stem) or stem.lower() == Path(INDEX_FILE).stem:
        stem = "_" + stem
    stem = _TRAILING.sub("_", stem)

    budget = _MAX_FILENAME_BYTES - len(CONTEXT_SUFFIX)
    encoded = stem.encode("utf-8")
    if len(encoded) > budget:
        stem = encoded[:budget].decode("utf-8", errors="ignore")
    return stem or "_"


def _read_json(path: Path):
    try:
        raw = path.read_text()
    except FileNotFoundError as e:
        raise NotFoundError(f"No such file: {path}") from e
    except OSError as e:
        raise ContextIOError(f"Unable to read {path}: {e.strerror}") from e

    # A failed truncate-create-write can leave an empty file behind
    if not raw.strip():
        raise ParseError(f"File {path} is empty")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {path}: {e.msg} (line {e.lineno})") from e


def _write_json(path: Path, data: dict):
    try:
        path.write_text(json.dumps(data, indent=2))
    except OSError as e:
        raise ContextIOError(f"Unable to write {path}: {e.strerror}") from e


def load_context(context_path: Path) -> ContextRecord:
    """Load a context file into a ContextRecord, filling in defaults"""
    path = Path(context_path)
    data = _read_json(path)
    try:
        return ContextRecord.from_dict(data)
    except ParseError as e:
        raise ParseError(f"Invalid context {path}: {e}") from e


class ContextStorage:
    """JSON-file storage for named contexts and the default index"""

    def __init__(self, storage_dir: Path):
        self.storage_dir = Path(storage_dir)

    @classmethod
    def from_directory(cls, explicit: Optional[Path] = None) -> "ContextStorage":
        """Build storage rooted at the explicit directory or the default one"""
        return cls(resolve_directory(explicit))

    @property
    def index_path(self) -> Path:
        return self.storage_dir / INDEX_FILE

    def context_path(self, name: str) -> Path:
        """Return the full path for a context"""
        return self.storage_dir / f"{name}{CONTEXT_SUFFIX}"

    def list_names(self) -> List[str]:
        """List all context names, excluding the index.

        Being listed does not guarantee the file holds a valid context.
        """
        try:
            entries = list(self.storage_dir.iterdir())
        except OSError as e:
            raise NotFoundError(
                f"{e.strerror}, please ensure directory {self.storage_dir} exists"
            ) from e
        return sorted(
            p.stem for p in entries
            if p.suffix == CONTEXT_SUFFIX and p.name != INDEX_FILE
        )

    def read_index(self) -> IndexPointer:
        data = _read_json(self.index_path)
        try:
            return IndexPointer.from_dict(data)
        except ParseError as e:
            raise ParseError(f"Invalid index {self.index_path}: {e}") from e

    def write_index(self, name: str):
        """Point the index at `name`, replacing whatever it held before"""
        _write_json(self.index_path, IndexPointer(name).to_dict())
        logger.debug("Default context set to %s", name)

    def create_context(self, name: str) -> str:
        """Write a default context under a sanitized name and return that name.

        An existing context with the same name is overwritten.
        """
        stem = sanitize_name(name)
        self.save_context(stem, ContextRecord())
        logger.debug("Created context %s", stem)
        return stem

    def save_context(self, name: str, record: ContextRecord):
        _write_json(self.context_path(name), record.to_dict())

    def delete_context(self, name: str):
        if name not in self.list_names():
            raise NotFoundError(f"Failed to delete, no context named '{name}' found")
        try:
            self.context_path(name).unlink()
        except OSError as e:
            raise ContextIOError(f"Unable to remove context '{name}': {e.strerror}") from e
        logger.debug("Deleted context %s", name)

    def load(self, name: str) -> ContextRecord:
        return load_context(self.context_path(name))

    def load_default_context(self) -> ContextRecord:
        """Load the context the index points at"""
        index = self.read_index()
        if index.name not in self.list_names():
            raise NotFoundError(f"Default context '{index.name}' does not exist")
        return self.load(index.name)

    def __repr__(self):
        return f"<ContextStorage dir={self.storage_dir}>"
