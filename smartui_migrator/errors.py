"""Exception hierarchy raised by the scanner.

    SmartUIMigratorError
    └── ScannerError
        ├── PlatformNotDetectedError
        └── MultiplePlatformsDetectedError

The CLI catches the two terminal detection errors separately to print a
targeted hint; everything else surfaces as a generic ScannerError.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class SmartUIMigratorError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str = "", context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)


class ScannerError(SmartUIMigratorError):
    """Non-recoverable scan failure, usually wrapping an I/O error."""

    @classmethod
    def wrap(cls, exc: BaseException) -> "ScannerError":
        return cls(f"Scanner error: {exc}", context={"cause": type(exc).__name__})


class PlatformNotDetectedError(ScannerError):
    def __init__(
        self,
        message: str = (
            "Could not detect a supported visual testing platform. "
            "Please run this tool from the root of your project."
        ),
    ):
        super().__init__(message)


class MultiplePlatformsDetectedError(ScannerError):
    def __init__(
        self,
        platforms: Iterable[str] = (),
        source: str = "",
        matches: Iterable[str] = (),
        message: str = (
            "Multiple visual testing platforms were detected. "
            "The migration tool supports migrating from only one platform at a time."
        ),
    ):
        self.platforms = [str(getattr(p, "value", p)) for p in platforms]
        self.source = source
        # One "Platform (identifier)" entry per candidate, parallel to platforms.
        self.matches = list(matches) or list(self.platforms)
        super().__init__(
            message,
            context={"platforms": self.platforms, "source": source, "matches": self.matches},
        )
