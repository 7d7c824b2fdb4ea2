"""
Built-in qstr data: the identifier translation table and the two
built-in qstr lists.

The data lives in JSON documents shipped with the package and is loaded
once per process. A build may point at its own copy of the documents
instead (for a different interpreter revision).
"""

import json
from functools import lru_cache
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from qstrgen.core.errors import ConfigLoadError

logger = structlog.get_logger()

TRANSLATIONS_FILE = "qstr_ident_translations.json"
STATIC_QSTRS_FILE = "static_qstrs.json"
UNSORTED_QSTRS_FILE = "unsorted_qstrs.json"


class QstrData(BaseModel):
    """
    Static inputs to qstr generation.

    ``ident_translations`` maps single characters that can't appear in a C
    identifier to the name spliced into the identifier in their place.
    ``static_qstrs`` are interned ahead of everything else, in order.
    ``unsorted_qstrs`` are built in as well but live in the discovered
    part of the table.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ident_translations: dict[str, str] = Field(default_factory=dict)
    static_qstrs: tuple[str, ...] = Field(default_factory=tuple)
    unsorted_qstrs: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("ident_translations")
    @classmethod
    def validate_translation_keys(cls, v: dict[str, str]) -> dict[str, str]:
        """Translation keys are exactly one character."""
        for key in v:
            if len(key) != 1:
                raise ValueError(f"translation key {key!r} is not a single character")
        return v

    @classmethod
    def load(cls, directory: Path | None = None) -> "QstrData":
        """
        Load the data documents.

        Args:
            directory: Directory holding the three documents. Defaults to the
                copy shipped with the package.

        Raises:
            ConfigLoadError: If a document is missing or malformed.
        """
        root: Traversable = directory if directory is not None else files("qstrgen") / "data"

        raw = {
            "ident_translations": _read_json(root / TRANSLATIONS_FILE),
            "static_qstrs": _read_json(root / STATIC_QSTRS_FILE),
            "unsorted_qstrs": _read_json(root / UNSORTED_QSTRS_FILE),
        }

        try:
            data = cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigLoadError(str(root), str(e)) from e

        logger.debug(
            "qstr_data_loaded",
            source=str(root),
            translations=len(data.ident_translations),
            static_qstrs=len(data.static_qstrs),
            unsorted_qstrs=len(data.unsorted_qstrs),
        )
        return data


def _read_json(path: Traversable) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigLoadError(str(path), str(e)) from e


@lru_cache(maxsize=1)
def default_qstr_data() -> QstrData:
    """The packaged qstr data, loaded on first use."""
    return QstrData.load()
