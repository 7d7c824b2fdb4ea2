"""
QstrExtractor: discovers qstr references in preprocessed source.

Every ``MP_QSTR_<name>`` token in the scanned text becomes a discovered
qstr unless a qstr with the same identifier is already known. Discovery
order is scan order, so identical input always yields an identical table.
"""

from collections.abc import Iterable

import structlog
from pydantic import BaseModel, ConfigDict, Field

from qstrgen.core.config import GeneratorConfig
from qstrgen.core.data import QstrData
from qstrgen.core.errors import EncodingError, compile_pattern
from qstrgen.core.qstr import QSTR_PREFIX, Pool, QStr

logger = structlog.get_logger()

QSTR_PATTERN = compile_pattern(QSTR_PREFIX + r"([_a-zA-Z0-9]+)")

STATIC_ORIGIN = "Built in statics"
UNSORTED_ORIGIN = "Built in unsorted"


class ExtractedQstrs(BaseModel):
    """Result of a finished qstr extraction."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    static_qstrs: tuple[QStr, ...] = Field(default_factory=tuple)
    unsorted_qstrs: tuple[QStr, ...] = Field(default_factory=tuple)


class QstrExtractor:
    """
    Stateful qstr scanner.

    The seen-identifier set starts with every built-in qstr, static and
    unsorted, so references to them are never rediscovered. The built-in
    unsorted qstrs also head the discovered list, in pool 0.
    """

    def __init__(self, config: GeneratorConfig, data: QstrData) -> None:
        self._config = config
        self._data = data
        self._finished = False
        self._duplicates = 0
        self._log = logger.bind(component="qstr_extractor")

        self._unsorted_qstrs: list[QStr] = [
            self._qstr(value, Pool.STATIC, UNSORTED_ORIGIN) for value in data.unsorted_qstrs
        ]
        self._idents: set[str] = {
            self._qstr(value, Pool.STATIC, STATIC_ORIGIN).ident for value in data.static_qstrs
        }
        self._idents.update(q.ident for q in self._unsorted_qstrs)

    @property
    def discovered_count(self) -> int:
        """Qstrs found by scanning so far, excluding built-ins."""
        return len(self._unsorted_qstrs) - len(self._data.unsorted_qstrs)

    def process_line(self, origin: str, line: str) -> None:
        """Record every new qstr referenced on ``line``."""
        if self._finished:
            raise RuntimeError("qstr extractor already finished")

        for match in QSTR_PATTERN.finditer(line):
            qstr = self._qstr(match.group(1), Pool.DISCOVERED, origin)
            if qstr.ident in self._idents:
                self._duplicates += 1
                continue

            self._idents.add(qstr.ident)
            self._unsorted_qstrs.append(qstr)
            self._log.debug("qstr_discovered", ident=qstr.ident, origin=origin)

    def process_lines(self, origin: str, lines: Iterable[str]) -> None:
        """Scan each of ``lines`` in order."""
        for line in lines:
            self.process_line(origin, line)

    def finish(self) -> ExtractedQstrs:
        """
        Complete the extraction.

        The static list is rebuilt from the built-in data every time; it is
        not deduplicated against the discovered list.
        """
        if self._finished:
            raise RuntimeError("qstr extractor already finished")
        self._finished = True

        static_qstrs = tuple(
            self._qstr(value, Pool.STATIC, STATIC_ORIGIN) for value in self._data.static_qstrs
        )

        self._log.info(
            "qstrs_extracted",
            static=len(static_qstrs),
            unsorted=len(self._unsorted_qstrs),
            discovered=self.discovered_count,
            duplicates_dropped=self._duplicates,
        )

        return ExtractedQstrs(
            static_qstrs=static_qstrs,
            unsorted_qstrs=tuple(self._unsorted_qstrs),
        )

    def _qstr(self, value: str, pool: Pool, origin: str) -> QStr:
        try:
            return QStr.create(value, pool, origin, self._config, self._data)
        except EncodingError as e:
            raise e.with_origin(origin) from e
