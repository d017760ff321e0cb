"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` and materialises the starter project:

1. Check that the target location is safe (``check_target``).
2. Create the project directory and its ``routes/`` subdirectory.
3. Run the generators one after another: manifest, application config,
   example route, TypeScript build config (TypeScript only), entry point,
   ignore file.
4. Offer to install dependencies, then (after a successful install) to start
   the dev server.

Any failure ends the run.  Files already written are left on disk; there is
no rollback.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from create_destino.config import Settings
from create_destino.errors import CommandError, DirectoryConflictError, ScaffoldError
from create_destino.models import CURRENT_DIRECTORY, ProjectConfig
from create_destino.prompts import Prompter, RichPrompter
from create_destino.registry import VersionResolver
from create_destino.runner import CommandResult, CommandRunner, dev_command, install_command
from create_destino.utils import format_duration, print_step, print_success, print_warning

from .app_config_gen import AppConfigGenerator
from .entry_gen import EntryPointGenerator
from .gitignore_gen import IgnoreFileGenerator
from .manifest_gen import ManifestGenerator, package_name
from .routes_gen import ROUTES_DIR, ExampleRouteGenerator
from .templates import TemplateRenderer
from .tsconfig_gen import BuildConfigGenerator


class BuildState(str, Enum):
    """States the orchestrator moves through, in order."""
    INIT = "init"
    DIRECTORY_CREATED = "directory_created"
    GENERATED = "generated"
    INSTALL_PROMPTED = "install_prompted"
    INSTALLED = "installed"
    INSTALL_SKIPPED = "install_skipped"
    START_PROMPTED = "start_prompted"
    STARTED = "started"
    START_SKIPPED = "start_skipped"
    DONE = "done"


@dataclass
class BuildReport:
    """What a finished run produced."""

    target: Path
    files: list[Path] = field(default_factory=list)
    state: BuildState = BuildState.INIT
    install_result: CommandResult | None = None
    start_result: CommandResult | None = None

    @property
    def installed(self) -> bool:
        return self.install_result is not None and self.install_result.success


# ---------------------------------------------------------------------------
# Target precondition
# ---------------------------------------------------------------------------


def check_target(cwd: Path, name: str) -> Path:
    """Return the directory to scaffold into, or raise if it is not usable.

    ``"."`` means *cwd* itself, which must be empty.  Any other name maps to
    ``cwd / name``, which must not exist yet.

    Raises:
        DirectoryConflictError: The target exists (or, for ``"."``, is not
            empty).
    """
    cwd = Path(cwd)
    if name == CURRENT_DIRECTORY:
        if any(cwd.iterdir()):
            raise DirectoryConflictError(
                str(cwd),
                f"Current directory {cwd} is not empty. "
                "Use an empty directory or choose a project name.",
            )
        return cwd

    target = cwd / name
    if target.exists():
        raise DirectoryConflictError(
            str(target), "Directory already exists. Please choose another name."
        )
    return target


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectBuilder:
    """Drives a single scaffolding run for one ``ProjectConfig``.

    Attributes:
        config: The collected project configuration.
        cwd: Directory the project is created in (or, for ``"."``, the
            project directory itself).
        history: Every ``BuildState`` entered, in order.
    """

    def __init__(
        self,
        config: ProjectConfig,
        cwd: Path,
        resolver: VersionResolver,
        runner: CommandRunner | None = None,
        prompter: Prompter | None = None,
        settings: Settings | None = None,
        renderer: TemplateRenderer | None = None,
        assume_yes: bool = False,
    ) -> None:
        self.config = config
        self.cwd = Path(cwd)
        self.runner = runner or CommandRunner()
        self.prompter = prompter or RichPrompter()
        self.settings = settings or Settings()
        self.assume_yes = assume_yes
        self.history: list[BuildState] = [BuildState.INIT]

        renderer = renderer or TemplateRenderer()
        self.manifest_gen = ManifestGenerator(resolver)
        self.app_config_gen = AppConfigGenerator(renderer)
        self.routes_gen = ExampleRouteGenerator(renderer)
        self.tsconfig_gen = BuildConfigGenerator()
        self.entry_gen = EntryPointGenerator(renderer)
        self.gitignore_gen = IgnoreFileGenerator(renderer)

    @property
    def state(self) -> BuildState:
        return self.history[-1]

    def _enter(self, state: BuildState) -> None:
        self.history.append(state)

    # -- Public API --------------------------------------------------------

    async def build(self) -> BuildReport:
        """Run every step and return a report of what was produced.

        Raises:
            DirectoryConflictError: The target location is not usable.
                Nothing has been written.
            RegistryQueryError: A dependency version could not be resolved.
            CommandError: Dependency install or the dev server exited
                non-zero.
        """
        target = check_target(self.cwd, self.config.name)
        report = BuildReport(target=target)

        await self.create_directories(target)
        self._enter(BuildState.DIRECTORY_CREATED)

        report.files = await self.generate_files(target)
        self._enter(BuildState.GENERATED)
        print_success(f"Project {package_name(self.config, target)} created successfully.")

        report.install_result = await self._install(target)
        if report.installed:
            report.start_result = await self._start(target)

        self._enter(BuildState.DONE)
        report.state = self.state
        return report

    async def create_directories(self, target: Path) -> None:
        """Create *target* and ``target/routes``."""
        try:
            await asyncio.to_thread(
                target.mkdir, parents=True, exist_ok=self.config.name == CURRENT_DIRECTORY
            )
            await asyncio.to_thread((target / ROUTES_DIR).mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise ScaffoldError(f"Could not create {target}: {exc}") from exc

    async def generate_files(self, target: Path) -> list[Path]:
        """Write every project file into *target* and return their paths."""
        config = self.config
        written: list[Path] = []

        # 1. package.json (resolves dependency versions first)
        written.append(await self.manifest_gen.generate(config, target))

        # 2. destino.config.{ts,js}
        written.append(await self.app_config_gen.generate(config, target))

        # 3. routes/hello.{ts,js}
        written.append(await self.routes_gen.generate(config, target))

        # 4. tsconfig.json
        if self.tsconfig_gen.applies_to(config):
            written.append(await self.tsconfig_gen.generate(config, target))

        # 5. index.{ts,js}
        written.append(await self.entry_gen.generate(config, target))

        # 6. .gitignore
        written.append(await self.gitignore_gen.generate(config, target))

        for path in written:
            print_step(f"  created {path.relative_to(target).as_posix()}")
        return written

    # -- Post-generation steps ---------------------------------------------

    async def _install(self, target: Path) -> CommandResult | None:
        self._enter(BuildState.INSTALL_PROMPTED)
        manager = self.config.package_manager
        wanted = self.assume_yes or self.prompter.confirm(
            "Do you want to install dependencies?", True
        )
        if not wanted:
            self._enter(BuildState.INSTALL_SKIPPED)
            print_warning(
                "Sure, you can always install dependencies later by running "
                f"'{manager.value} install'."
            )
            return None

        print_success(f"Installing dependencies using {manager.value}...")
        result = await self.runner.run(
            install_command(manager),
            cwd=target,
            timeout=self.settings.install_timeout,
            stream=True,
        )
        if not result.success:
            raise CommandError(
                f"'{result.command_line}' failed: {result.error_output()}", result
            )
        self._enter(BuildState.INSTALLED)
        print_success(
            f"Dependencies installed successfully in {format_duration(result.duration_seconds)}."
        )
        return result

    async def _start(self, target: Path) -> CommandResult | None:
        if self.assume_yes:
            self._enter(BuildState.START_SKIPPED)
            return None

        self._enter(BuildState.START_PROMPTED)
        if not self.prompter.confirm("Do you want to start the development server?", False):
            self._enter(BuildState.START_SKIPPED)
            return None

        # Long-lived: returns only when the server process exits.
        result = await self.runner.run(
            dev_command(self.config.package_manager),
            cwd=target,
            timeout=None,
            inherit=True,
        )
        if not result.success:
            raise CommandError(
                f"'{result.command_line}' exited with code {result.exit_code}", result
            )
        self._enter(BuildState.STARTED)
        return result
