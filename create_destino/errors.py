"""Exception hierarchy for the create-destino scaffolder.

Every failure that should end a run derives from ``ScaffoldError`` and
carries the process exit code.  Pipeline code only raises; the single
top-level handler in ``create_destino.cli`` prints and exits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from create_destino.runner import CommandResult


class ScaffoldError(Exception):
    """Base class for all fatal scaffolding errors."""

    exit_code: int = 1


class ProjectNameError(ScaffoldError):
    """Raised when the project name contains disallowed characters."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid project name {name!r}. Only letters, numbers, hyphens, "
            "and underscores are allowed."
        )


class DirectoryConflictError(ScaffoldError):
    """Raised when the target location is not safe to write into."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class CancellationError(ScaffoldError):
    """Raised when the user interrupts the interactive dialogue."""

    def __init__(self, message: str = "Operation cancelled") -> None:
        super().__init__(message)


class RegistryQueryError(ScaffoldError):
    """Raised when the latest version of a package cannot be resolved."""

    def __init__(self, package: str, reason: str) -> None:
        self.package = package
        self.reason = reason
        super().__init__(f"Could not resolve latest version of {package!r}: {reason}")


class CommandError(ScaffoldError):
    """Raised when an external command (install, dev server) exits non-zero."""

    def __init__(self, message: str, result: CommandResult | None = None) -> None:
        self.result = result
        super().__init__(message)
