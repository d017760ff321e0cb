"""External command execution for dependency install and the dev server.

Wraps the async subprocess helpers in ``create_destino.utils`` behind a
``CommandRunner`` that returns structured ``CommandResult`` objects, so the
orchestrator can be tested against a fake runner without spawning a real
package manager.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from create_destino.models import PackageManager
from create_destino.utils import console, run_command, run_command_streaming


@dataclass
class CommandResult:
    """Structured result from an external command."""

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def error_output(self) -> str:
        """Best available explanation of a failure."""
        return self.stderr or self.stdout or f"exit code {self.exit_code}"


def install_command(package_manager: PackageManager) -> list[str]:
    """``npm install`` / ``yarn install`` / ``pnpm install``."""
    return [package_manager.value, "install"]


def dev_command(package_manager: PackageManager) -> list[str]:
    """Run the generated ``dev`` script with the chosen package manager."""
    return [package_manager.value, "run", "dev"]


class CommandRunner:
    """Runs external commands and reports their outcome.

    Three modes are supported:

    * captured (default): stdout and stderr are collected and returned.
    * ``stream=True``: stdout lines are echoed to the console as they arrive
      and also collected.
    * ``inherit=True``: the child shares this process's terminal; nothing is
      captured.  Used for the long-lived dev server.
    """

    async def run(
        self,
        args: list[str],
        cwd: str | Path | None = None,
        timeout: float | None = 120,
        *,
        stream: bool = False,
        inherit: bool = False,
    ) -> CommandResult:
        start = time.monotonic()
        if inherit:
            code, out, err = await run_command(
                args, cwd=cwd, timeout=timeout, capture=False
            )
        elif stream:
            code, out, err = await run_command_streaming(
                args, _echo_line, cwd=cwd, timeout=timeout
            )
        else:
            code, out, err = await run_command(args, cwd=cwd, timeout=timeout)

        return CommandResult(
            command=list(args),
            exit_code=code,
            stdout=out,
            stderr=err,
            duration_seconds=time.monotonic() - start,
        )


def _echo_line(line: str) -> None:
    console.print(line, markup=False, highlight=False)
