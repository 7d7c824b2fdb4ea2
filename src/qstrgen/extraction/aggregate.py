"""
Aggregation of qstr and module extraction into the generated data model.

``DataExtractor`` feeds every scanned line to both extractors, then
appends the configured extra qstrs and assembles the final, immutable
``ExtractedData`` that the header templates are rendered from.
"""

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

from qstrgen.core.config import BytesIn, GeneratorConfig
from qstrgen.core.data import QstrData, default_qstr_data
from qstrgen.core.errors import EncodingError
from qstrgen.core.qstr import Pool, QStr
from qstrgen.extraction.modules import Module, ModuleExtractor
from qstrgen.extraction.qstrs import QstrExtractor

if TYPE_CHECKING:
    from qstrgen.runtime.sources import TranslationUnit

logger = structlog.get_logger()

EXTRA_ORIGIN = "Configured extra qstrs"


class ExtractedData(BaseModel):
    """
    Everything the header templates need.

    ``all_qstrs`` is ``static_qstrs`` followed by ``unsorted_qstrs``; the
    runtime relies on the static pool preceding the discovered pool.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    bytes_in_hash: BytesIn = BytesIn.TWO
    bytes_in_string: BytesIn = BytesIn.TWO

    static_qstrs: tuple[QStr, ...] = Field(default_factory=tuple)
    unsorted_qstrs: tuple[QStr, ...] = Field(default_factory=tuple)
    all_qstrs: tuple[QStr, ...] = Field(default_factory=tuple)

    modules: tuple[Module, ...] = Field(default_factory=tuple)
    extensible_modules: tuple[Module, ...] = Field(default_factory=tuple)
    module_delegations: tuple[Module, ...] = Field(default_factory=tuple)

    def template_context(self) -> dict[str, Any]:
        """JSON-ready rendering context."""
        return self.model_dump(mode="json")

    def write_json(self, path: Path) -> None:
        """Write the rendering context to ``path``, replacing it whole."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self.template_context(), f, indent=2)
                f.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class DataExtractor:
    """Runs both extractors over a build's translation units."""

    def __init__(self, config: GeneratorConfig, data: QstrData | None = None) -> None:
        self._config = config
        self._data = data if data is not None else default_qstr_data()
        self._qstrs = QstrExtractor(self._config, self._data)
        self._modules = ModuleExtractor()
        self._units = 0
        self._lines = 0
        self.run_id = str(ULID())
        self._log = logger.bind(component="data_extractor", run_id=self.run_id)

    def process_line(self, origin: str, line: str) -> None:
        """Feed one line of a translation unit to both extractors."""
        self._qstrs.process_line(origin, line)
        self._modules.process_line(origin, line)
        self._lines += 1

    def process_unit(self, origin: str, lines: Iterable[str]) -> None:
        """Feed a whole translation unit, line by line."""
        for line in lines:
            self.process_line(origin, line)
        self._units += 1
        self._log.debug("unit_processed", origin=origin)

    def finish(self) -> ExtractedData:
        """Finish both extractors and build the data model."""
        qstrs = self._qstrs.finish()
        modules = self._modules.finish()

        extras = tuple(self._extra_qstr(value) for value in self._config.extra_qstrs)
        known = {q.ident for q in (*qstrs.static_qstrs, *qstrs.unsorted_qstrs)}
        for extra in extras:
            if extra.ident in known:
                self._log.warning("extra_qstr_duplicates_existing", ident=extra.ident)
        unsorted_qstrs = qstrs.unsorted_qstrs + extras

        result = ExtractedData(
            bytes_in_hash=self._config.bytes_in_hash,
            bytes_in_string=self._config.bytes_in_string,
            static_qstrs=qstrs.static_qstrs,
            unsorted_qstrs=unsorted_qstrs,
            all_qstrs=qstrs.static_qstrs + unsorted_qstrs,
            modules=modules.modules,
            extensible_modules=modules.extensible_modules,
            module_delegations=modules.module_delegations,
        )

        self._log.info(
            "extraction_finished",
            units=self._units,
            lines=self._lines,
            qstrs=len(result.all_qstrs),
            extra_qstrs=len(extras),
            modules=len(result.modules) + len(result.extensible_modules),
            module_delegations=len(result.module_delegations),
        )
        return result

    def _extra_qstr(self, value: str) -> QStr:
        try:
            return QStr.create(value, Pool.DISCOVERED, EXTRA_ORIGIN, self._config, self._data)
        except EncodingError as e:
            raise e.with_origin(EXTRA_ORIGIN) from e


def extract_data(
    units: Iterable["TranslationUnit"],
    config: GeneratorConfig,
    data: QstrData | None = None,
) -> ExtractedData:
    """Extract the data model from ``units``, processed in the given order."""
    extractor = DataExtractor(config, data)
    for unit in units:
        extractor.process_unit(unit.origin, unit.lines)
    return extractor.finish()
