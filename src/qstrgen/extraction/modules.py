"""
ModuleExtractor: discovers module registrations in preprocessed source.

Registrations look like ``MP_REGISTER_MODULE(MP_QSTR_time, mp_module_time);``
and come in three kinds: plain modules, extensible modules and module
delegations.
"""

from collections.abc import Iterable
from enum import Enum

import structlog
from pydantic import BaseModel, ConfigDict, Field

from qstrgen.core.errors import PatternError, compile_pattern
from qstrgen.core.qstr import QSTR_PREFIX

logger = structlog.get_logger()


class ModuleKind(Enum):
    """Category of a module registration."""

    MODULE = "module"
    EXTENSIBLE_MODULE = "extensible_module"
    DELEGATION = "delegation"


REGISTRATION_KEYWORDS: dict[str, ModuleKind] = {
    "MP_REGISTER_MODULE": ModuleKind.MODULE,
    "MP_REGISTER_EXTENSIBLE_MODULE": ModuleKind.EXTENSIBLE_MODULE,
    "MP_REGISTER_MODULE_DELEGATION": ModuleKind.DELEGATION,
}

MODULE_PATTERN = compile_pattern(
    r"(MP_REGISTER_MODULE|MP_REGISTER_EXTENSIBLE_MODULE|MP_REGISTER_MODULE_DELEGATION)"
    r"\((.*?),\s*(.*?)\);"
)


class Module(BaseModel):
    """A registered module."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    qstr_ident: str
    upper_name: str
    symbol: str
    origin: str
    kind: ModuleKind


class ExtractedModules(BaseModel):
    """Result of a finished module extraction, in discovery order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    modules: tuple[Module, ...] = Field(default_factory=tuple)
    extensible_modules: tuple[Module, ...] = Field(default_factory=tuple)
    module_delegations: tuple[Module, ...] = Field(default_factory=tuple)


class ModuleExtractor:
    """
    Stateful module registration scanner.

    Registrations are not deduplicated: the same module declared twice
    yields two records and it is up to the link stage to complain.
    """

    def __init__(self) -> None:
        self._by_kind: dict[ModuleKind, list[Module]] = {kind: [] for kind in ModuleKind}
        self._finished = False
        self._log = logger.bind(component="module_extractor")

    def process_line(self, origin: str, line: str) -> None:
        """Record every module registration on ``line``."""
        if self._finished:
            raise RuntimeError("module extractor already finished")

        for match in MODULE_PATTERN.finditer(line):
            keyword, qstr_ident, symbol = match.groups()
            kind = REGISTRATION_KEYWORDS.get(keyword)
            if kind is None:
                raise PatternError(f"Unexpected module type {keyword}")

            module = Module(
                qstr_ident=qstr_ident,
                upper_name=qstr_ident.removeprefix(QSTR_PREFIX).upper(),
                symbol=symbol,
                origin=origin,
                kind=kind,
            )
            self._by_kind[kind].append(module)
            self._log.debug(
                "module_registered",
                kind=kind.name,
                name=module.upper_name,
                symbol=symbol,
                origin=origin,
            )

    def process_lines(self, origin: str, lines: Iterable[str]) -> None:
        """Scan each of ``lines`` in order."""
        for line in lines:
            self.process_line(origin, line)

    def finish(self) -> ExtractedModules:
        """Complete the extraction and hand over the three lists."""
        if self._finished:
            raise RuntimeError("module extractor already finished")
        self._finished = True

        result = ExtractedModules(
            modules=tuple(self._by_kind[ModuleKind.MODULE]),
            extensible_modules=tuple(self._by_kind[ModuleKind.EXTENSIBLE_MODULE]),
            module_delegations=tuple(self._by_kind[ModuleKind.DELEGATION]),
        )
        self._log.info(
            "modules_extracted",
            modules=len(result.modules),
            extensible_modules=len(result.extensible_modules),
            module_delegations=len(result.module_delegations),
        )
        return result
