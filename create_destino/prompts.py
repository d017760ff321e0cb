"""Interactive collection of the project configuration.

``ConfigCollector`` runs the fixed question sequence and returns a
``ProjectConfig``.  Questions are asked through a ``Prompter`` so tests can
script the answers; ``RichPrompter`` is the terminal implementation built on
``rich.prompt``.

An interrupt (Ctrl+C) or closed stdin during any question cancels the shared
``CancellationToken`` and raises ``CancellationError``.  Nothing has been
written to disk at that point.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from rich.prompt import Confirm, IntPrompt, Prompt

from create_destino.errors import CancellationError, ProjectNameError
from create_destino.models import (
    CURRENT_DIRECTORY,
    DEFAULT_PORT,
    MAX_PORT,
    MIN_PORT,
    ConfigurationMode,
    Language,
    PackageManager,
    ProjectConfig,
    StaticMount,
    is_valid_project_name,
)
from create_destino.utils import console, print_warning


class CancellationToken:
    """Set once the user has asked to abort the run."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancellationError()


# ---------------------------------------------------------------------------
# Prompters
# ---------------------------------------------------------------------------


class Prompter(ABC):
    """Asks the user one question at a time."""

    @abstractmethod
    def text(self, message: str, default: Optional[str] = None) -> str: ...

    @abstractmethod
    def select(
        self, message: str, choices: Sequence[str], default: Optional[str] = None
    ) -> str: ...

    @abstractmethod
    def integer(self, message: str, default: int) -> int: ...

    @abstractmethod
    def confirm(self, message: str, default: bool) -> bool: ...


class RichPrompter(Prompter):
    """Terminal prompts rendered with Rich."""

    def text(self, message: str, default: Optional[str] = None) -> str:
        if default is None:
            return Prompt.ask(message, console=console)
        return Prompt.ask(message, default=default, console=console)

    def select(
        self, message: str, choices: Sequence[str], default: Optional[str] = None
    ) -> str:
        return Prompt.ask(
            message,
            choices=list(choices),
            default=default if default is not None else choices[0],
            console=console,
        )

    def integer(self, message: str, default: int) -> int:
        return IntPrompt.ask(message, default=default, console=console)

    def confirm(self, message: str, default: bool) -> bool:
        return Confirm.ask(message, default=default, console=console)


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------


class ConfigCollector:
    """Runs the interactive dialogue that produces a ``ProjectConfig``.

    The order is fixed: name, language, configuration mode, package manager,
    then (custom mode only) port, JSON parser, urlencoded parser, static
    serving, rate limiting.  A field is only asked for once the question that
    gates it has been answered.
    """

    def __init__(
        self,
        prompter: Prompter | None = None,
        token: CancellationToken | None = None,
        default_port: int = DEFAULT_PORT,
    ) -> None:
        self.prompter = prompter or RichPrompter()
        self.token = token or CancellationToken()
        self.default_port = default_port

    def collect(self, default_name: str = "") -> ProjectConfig:
        """Ask every question and return the assembled configuration.

        Raises:
            ProjectNameError: The name is not ``"."`` and contains characters
                other than letters, digits, ``-`` and ``_``.  There is no
                retry.
            CancellationError: The user interrupted a prompt.
        """
        name = default_name or self._ask(self.prompter.text, "Project name:")
        if name != CURRENT_DIRECTORY and not is_valid_project_name(name):
            raise ProjectNameError(name)

        language = Language(
            self._ask(self.prompter.select, "Language:", [lang.value for lang in Language])
        )
        mode = ConfigurationMode(
            self._ask(
                self.prompter.select,
                "Configuration:",
                [m.value for m in ConfigurationMode],
            )
        )
        package_manager = PackageManager(
            self._ask(
                self.prompter.select,
                "Package manager:",
                [p.value for p in PackageManager],
            )
        )

        fields: dict = {
            "name": name,
            "language": language,
            "configuration_mode": mode,
            "package_manager": package_manager,
        }
        if mode is ConfigurationMode.CUSTOM:
            fields.update(self._collect_custom())

        return ProjectConfig(**fields)

    def _collect_custom(self) -> dict:
        fields: dict = {
            "port": self._ask_port(),
            "enable_json_parser": self._ask(
                self.prompter.confirm, "Enable JSON parser?", True
            ),
            "enable_urlencoded": self._ask(
                self.prompter.confirm, "Enable URL encoding?", True
            ),
        }
        if self._ask(self.prompter.confirm, "Do you want to serve static files?", False):
            folder = self._ask(self.prompter.text, "Static files folder:")
            route = self._ask(
                self.prompter.text, "Static files route (leave empty for root):", ""
            )
            fields["serve_static"] = [StaticMount(folder=folder, route=route)]
        fields["enable_rate_limit"] = self._ask(
            self.prompter.confirm, "Enable rate limits?", False
        )
        return fields

    def _ask_port(self) -> int:
        while True:
            port = self._ask(self.prompter.integer, "Enter port number:", self.default_port)
            if MIN_PORT <= port <= MAX_PORT:
                return port
            print_warning(f"Port must be between {MIN_PORT} and {MAX_PORT}.")

    def _ask(self, ask, *args):
        self.token.raise_if_cancelled()
        try:
            return ask(*args)
        except (KeyboardInterrupt, EOFError):
            self.token.cancel()
            raise CancellationError() from None
