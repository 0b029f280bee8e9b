"""
solgas/errors.py
════════════════

Error hierarchy for everything outside the analysis core.

    SolgasError (base)
    ├── SourceFileError   - missing file, wrong extension, unreadable file
    ├── TreeLoadError     - the syntax-tree file cannot be decoded
    └── UnknownRuleError  - a requested rule is not registered

The analysis core itself never raises: malformed optional fields degrade
to defaults.  These errors are raised before analysis begins and are fatal
to the invocation.

License: MIT — same as solgas.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

# Exit codes shared with the CLI
EXIT_OK: int = 0
EXIT_FINDINGS: int = 1
EXIT_INFRA: int = 2


class SolgasError(Exception):
    """Base class for all solgas errors."""

    exit_code: int = EXIT_INFRA

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class SourceFileError(SolgasError):
    """Raised for a missing, unreadable or wrongly-typed input file."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class TreeLoadError(SolgasError):
    """Raised when a syntax-tree file cannot be decoded into a tree."""

    def __init__(
        self,
        path: Union[str, Path],
        detail: str,
        line: Optional[int] = None,
    ) -> None:
        self.path = str(path)
        self.detail = detail
        self.line = line
        where = f"{self.path}:{line}" if line else self.path
        super().__init__(f"Failed to load syntax tree {where}: {detail}")


class UnknownRuleError(SolgasError):
    """Raised when a rule name is not present in the registry."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = sorted(available)
        hint = ""
        if self.available:
            hint = f" (available: {', '.join(self.available)})"
        super().__init__(f"Unknown rule '{name}'{hint}")


__all__ = [
    "EXIT_OK",
    "EXIT_FINDINGS",
    "EXIT_INFRA",
    "SolgasError",
    "SourceFileError",
    "TreeLoadError",
    "UnknownRuleError",
]
