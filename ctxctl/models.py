from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from ctxctl.errors import ParseError

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 4222
DEFAULT_TIMEOUT_MS = 2000
DEFAULT_LATTICE_ID = 'default'

# Fields stored as plain strings in JSON but held as paths in memory
_PATH_FIELDS = ('control_credentials_file', 'rpc_credentials_file')
_INT_FIELDS = ('control_port', 'control_timeout_ms', 'rpc_port', 'rpc_timeout_ms')


@dataclass
class ContextRecord:
    """Connection parameters for one named context"""
    cluster_seed: Optional[str] = None

    control_host: str = DEFAULT_HOST
    control_port: int = DEFAULT_PORT
    control_auth_jwt: Optional[str] = None
    control_auth_seed: Optional[str] = None
    control_credentials_file: Optional[Path] = None
    control_timeout_ms: int = DEFAULT_TIMEOUT_MS

    lattice_id: str = DEFAULT_LATTICE_ID

    rpc_host: str = DEFAULT_HOST
    rpc_port: int = DEFAULT_PORT
    rpc_auth_jwt: Optional[str] = None
    rpc_auth_seed: Optional[str] = None
    rpc_credentials_file: Optional[Path] = None
    rpc_timeout_ms: int = DEFAULT_TIMEOUT_MS

    def to_dict(self) -> dict:
        """Convert context to dictionary for JSON serialization, defaults included"""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in _PATH_FIELDS and value is not None:
                value = str(value)
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create context from dictionary (unknown keys ignored, missing keys defaulted)"""
        if not isinstance(data, dict):
            raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

        defaults = cls()
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is None:
                values[f.name] = getattr(defaults, f.name)
                continue
            if f.name in _INT_FIELDS:
                # bool is an int subclass, reject it explicitly
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ParseError(f"Field '{f.name}' must be an integer")
            elif not isinstance(value, str):
                raise ParseError(f"Field '{f.name}' must be a string")
            if f.name in _PATH_FIELDS:
                value = Path(value)
            values[f.name] = value
        return cls(**values)


@dataclass
class IndexPointer:
    """Names the context used when a command is not given one"""
    name: str

    def to_dict(self) -> dict:
        return {'name': self.name}

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict) or not isinstance(data.get('name'), str):
            raise ParseError("Index must be an object with a string 'name'")
        return cls(name=data['name'])
