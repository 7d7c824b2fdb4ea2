"""
Qstr records.

A qstr is an interned string of the embedded interpreter. Each one gets a
C identifier, a short hash and its byte length, all of which must match
what the interpreter's own qstr machinery would compute.
"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict

from qstrgen.core.config import BytesIn, GeneratorConfig
from qstrgen.core.data import QstrData
from qstrgen.core.errors import EncodingError

QSTR_PREFIX = "MP_QSTR_"

HASH_SEED = 5381
HASH_MULTIPLIER = 33

# A hash of 0 means "hash not computed" to the runtime.
UNCOMPUTED_HASH = 0


class Pool(IntEnum):
    """Where a qstr came from."""

    STATIC = 0  # Known before any scan
    DISCOVERED = 1  # Found while scanning


def qstr_hash(data: bytes, bytes_in_hash: BytesIn) -> int:
    """DJB-style hash of ``data`` truncated to ``bytes_in_hash``; never 0."""
    h = HASH_SEED
    for b in data:
        h = ((h * HASH_MULTIPLIER) & 0xFFFFFFFF) ^ b
    h &= bytes_in_hash.mask

    if h == UNCOMPUTED_HASH:
        return 1
    return h


def make_ident(value: str, translations: dict[str, str]) -> str:
    """
    Build the C identifier for ``value``.

    Characters found in ``translations`` become ``_<name>_``; everything
    else is copied through unchecked.
    """
    parts = [QSTR_PREFIX]
    for c in value:
        replacement = translations.get(c)
        parts.append(f"_{replacement}_" if replacement is not None else c)
    return "".join(parts)


def _is_ascii_control(c: str) -> bool:
    return c < " " or c == "\x7f"


def escape_value(value: str) -> str:
    """
    Make ``value`` safe for a C string literal.

    Strings without control characters are returned as-is. Otherwise every
    character becomes a ``\\xNN`` escape, which is only supported for ASCII.

    Raises:
        EncodingError: If ``value`` needs escaping and isn't ASCII.
    """
    if not any(_is_ascii_control(c) for c in value):
        return value

    if not value.isascii():
        raise EncodingError(value)

    return "".join(f"\\x{ord(c):02x}" for c in value)


class QStr(BaseModel):
    """A single entry in the generated qstr table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pool: Pool
    value: str
    escaped_value: str
    ident: str
    hash: int
    length: int
    origin: str

    @classmethod
    def create(
        cls,
        value: str,
        pool: Pool,
        origin: str,
        config: GeneratorConfig,
        data: QstrData,
    ) -> "QStr":
        """Compute the record for ``value``."""
        encoded = value.encode("utf-8")
        return cls(
            pool=pool,
            value=value,
            escaped_value=escape_value(value),
            ident=make_ident(value, data.ident_translations),
            hash=qstr_hash(encoded, config.bytes_in_hash),
            length=len(encoded),
            origin=origin,
        )
