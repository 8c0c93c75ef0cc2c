"""Fatal errors raised while generating a documentation site."""

from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for failures that abort a site generation run."""


class ArchiveParsingError(GenerationError):
    """Raised when a documentation archive cannot be read."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to parse documentation archive: {detail}")


class SymbolGraphGenerationError(GenerationError):
    """Raised when the Swift toolchain fails to emit symbol graphs."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to generate symbol graphs: {detail}")


class DoccNotFoundError(GenerationError):
    """Raised when no ``docc`` executable can be located."""

    def __init__(self) -> None:
        super().__init__(
            "Could not locate the docc executable. Install a Swift toolchain "
            "or set SWIFT_PATH to its bin directory."
        )


__all__ = [
    "ArchiveParsingError",
    "DoccNotFoundError",
    "GenerationError",
    "SymbolGraphGenerationError",
]
