"""
Generation configuration.

The configuration is fixed for a whole run: hash width, string length
width and any extra qstrs the host program wants interned.
"""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from qstrgen.core.errors import ConfigLoadError


class BytesIn(Enum):
    """Width, in bytes, of a field in the generated qstr pool."""

    ONE = 1
    TWO = 2

    @property
    def mask(self) -> int:
        """Bit mask selecting the significant bits of this width."""
        if self is BytesIn.ONE:
            return 0xFF
        return 0xFFFF


class GeneratorConfig(BaseModel):
    """Immutable configuration for one generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bytes_in_hash: BytesIn = BytesIn.TWO
    bytes_in_string: BytesIn = BytesIn.TWO
    extra_qstrs: tuple[str, ...] = Field(default_factory=tuple)

    def with_qstr(self, value: str) -> "GeneratorConfig":
        """Return a copy with ``value`` appended to the extra qstrs."""
        return self.model_copy(update={"extra_qstrs": (*self.extra_qstrs, value)})

    @classmethod
    def from_file(cls, path: Path) -> "GeneratorConfig":
        """
        Load a configuration from a JSON document.

        Raises:
            ConfigLoadError: If the file can't be read or doesn't describe
                a valid configuration.
        """
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigLoadError(str(path), str(e)) from e

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigLoadError(str(path), str(e)) from e
