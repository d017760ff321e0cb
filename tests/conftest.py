"""Shared pytest fixtures for the create-destino test suite.

Provides reusable fixtures for:
- Scripted prompters that replay canned answers
- A fixed version resolver (no network access)
- A fake command runner that records invocations
- Sample project configurations
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional

import pytest

from create_destino.models import (
    ConfigurationMode,
    Language,
    PackageManager,
    ProjectConfig,
    StaticMount,
)
from create_destino.prompts import Prompter
from create_destino.registry import FixedVersionResolver
from create_destino.runner import CommandResult


FIXED_VERSIONS: dict[str, str] = {
    "express": "4.21.2",
    "destino": "1.3.0",
    "nodemon": "3.1.9",
    "ts-node": "10.9.2",
    "typescript": "5.7.3",
}


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


class ScriptedPrompter(Prompter):
    """Replays *answers* in order and records every question asked.

    An answer that is an exception instance is raised instead of returned,
    which is how tests simulate Ctrl+C or a closed stdin.
    """

    def __init__(self, answers: Sequence[Any]) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str]] = []

    def _next(self, kind: str, message: str) -> Any:
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message!r}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def text(self, message: str, default: Optional[str] = None) -> str:
        return self._next("text", message)

    def select(
        self, message: str, choices: Sequence[str], default: Optional[str] = None
    ) -> str:
        answer = self._next("select", message)
        assert answer in choices, f"{answer!r} not one of {choices!r}"
        return answer

    def integer(self, message: str, default: int) -> int:
        return self._next("integer", message)

    def confirm(self, message: str, default: bool) -> bool:
        return self._next("confirm", message)

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.calls]


@pytest.fixture
def scripted_prompter():
    """Factory: ``scripted_prompter([...answers])``."""
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# External collaborators
# ---------------------------------------------------------------------------


class FakeRunner:
    """Records ``run`` calls and returns canned ``CommandResult`` objects."""

    def __init__(self, exit_code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[dict[str, Any]] = []

    async def run(self, args, cwd=None, timeout=120, *, stream=False, inherit=False):
        self.calls.append(
            {
                "args": list(args),
                "cwd": cwd,
                "timeout": timeout,
                "stream": stream,
                "inherit": inherit,
            }
        )
        return CommandResult(
            command=list(args),
            exit_code=self.exit_code,
            stdout=self.stdout,
            stderr=self.stderr,
        )


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A runner whose commands all succeed."""
    return FakeRunner()


@pytest.fixture
def failing_runner() -> FakeRunner:
    """A runner whose commands all exit 1 with an error on stderr."""
    return FakeRunner(exit_code=1, stderr="npm ERR! network unreachable")


@pytest.fixture
def fixed_resolver() -> FixedVersionResolver:
    """Resolver returning constant versions for every scaffolded dependency."""
    return FixedVersionResolver(FIXED_VERSIONS)


# ---------------------------------------------------------------------------
# Sample configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def js_default_config() -> ProjectConfig:
    return ProjectConfig(name="demo", language=Language.JAVASCRIPT)


@pytest.fixture
def ts_default_config() -> ProjectConfig:
    return ProjectConfig(
        name="demo",
        language=Language.TYPESCRIPT,
        configuration_mode=ConfigurationMode.DEFAULT,
        package_manager=PackageManager.NPM,
    )


@pytest.fixture
def custom_config() -> ProjectConfig:
    """Custom mode with every optional feature switched on."""
    return ProjectConfig(
        name="custom-api",
        language=Language.TYPESCRIPT,
        configuration_mode=ConfigurationMode.CUSTOM,
        package_manager=PackageManager.PNPM,
        port=8080,
        enable_json_parser=False,
        enable_urlencoded=True,
        serve_static=[StaticMount(folder="public", route="")],
        enable_rate_limit=True,
    )


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty directory standing in for the invocation's working directory."""
    cwd = tmp_path / "workspace"
    cwd.mkdir()
    return cwd
