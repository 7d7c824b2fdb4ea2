"""
Translation units and where they come from.

Running the C preprocessor is left to the build; this module finds the
interpreter's sources, reads the preprocessed text back and hands it to
the extractors in a fixed order.
"""

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()

# Headers that are generated, or only make sense included from inside the
# interpreter itself.
UNUSED_HEADERS = (
    "py/dynruntime.h",
    "py/grammar.h",
    "py/qstrdefs.h",
    "py/vmentrytable.h",
)


class TranslationUnit(BaseModel):
    """One preprocessed source file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    origin: str
    lines: tuple[str, ...] = Field(default_factory=tuple)

    @classmethod
    def from_text(cls, origin: str, text: str) -> "TranslationUnit":
        """Split ``text`` on ``\\n`` and ``\\r\\n`` only; other breaks stay inside a line."""
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return cls(origin=origin, lines=tuple(line.removesuffix("\r") for line in lines))


class Preprocessor(Protocol):
    """Produces the macro-expanded text of a source file."""

    def expand(self, path: Path) -> str: ...


class PreprocessedFileReader:
    """Reads text that was already expanded by the build (e.g. ``cc -E``)."""

    def expand(self, path: Path) -> str:
        return path.read_bytes().decode("utf-8", errors="replace")


def is_header_used(path: Path) -> bool:
    """Whether ``path`` is a header the host program should see."""
    parts = path.parts
    for suffix in UNUSED_HEADERS:
        suffix_parts = tuple(suffix.split("/"))
        if parts[-len(suffix_parts) :] == suffix_parts:
            return False
    return True


class SourceTree:
    """
    The interpreter's source checkout.

    Sources and headers are collected per directory, sorted by name, so the
    order they are scanned in doesn't depend on the file system.

    Used by build scripts that run the compiler themselves: ``source_files``
    are the units to preprocess, ``header_files`` the include set to make
    visible to them. The command line only reads finished ``.i`` output and
    never builds a tree.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.source_files: list[Path] = []
        self.header_files: list[Path] = []
        self._log = logger.bind(component="source_tree", root=str(root))

    def add_dir(self, directory: str | Path) -> None:
        """Add the ``.c`` and usable ``.h`` files directly inside ``directory``."""
        path = self.root / directory
        for entry in sorted(path.iterdir()):
            if not entry.is_file():
                continue
            if entry.suffix == ".c":
                self.source_files.append(entry)
            elif entry.suffix == ".h" and is_header_used(entry):
                self.header_files.append(entry)

        self._log.debug(
            "source_dir_added",
            directory=str(directory),
            sources=len(self.source_files),
            headers=len(self.header_files),
        )

    def add_source(self, path: str | Path) -> None:
        """Add a single source file, relative to the root."""
        self.source_files.append(self.root / path)

    def origin_for(self, path: Path) -> str:
        """Root-relative label for ``path``."""
        return path.relative_to(self.root).as_posix()


def load_units(
    paths: Iterable[Path],
    preprocessor: Preprocessor,
    origin_for: Callable[[Path], str],
    max_workers: int | None = None,
) -> list[TranslationUnit]:
    """
    Expand ``paths`` into translation units.

    Files are expanded concurrently but the units come back in the order of
    ``paths``, never in completion order.
    """
    paths = list(paths)

    def expand(path: Path) -> TranslationUnit:
        return TranslationUnit.from_text(origin_for(path), preprocessor.expand(path))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        units = list(pool.map(expand, paths))

    logger.info("units_loaded", count=len(units), lines=sum(len(u.lines) for u in units))
    return units
