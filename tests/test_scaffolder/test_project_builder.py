"""Unit tests for the scaffolding orchestrator (create_destino.scaffolder.generator).

Tests cover:
- check_target (new name, existing directory, "." empty / non-empty)
- Files produced per language, including the current-directory layout
- Install step (accepted, declined, failure leaves files, --yes)
- Start step (only after install, default no, accepted, failure)
- Registry failure part-way through generation
- BuildState history
- Byte-identical output for the same config and versions
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from create_destino.config import Settings
from create_destino.errors import CommandError, DirectoryConflictError, RegistryQueryError
from create_destino.models import PackageManager, ProjectConfig
from create_destino.registry import FixedVersionResolver
from create_destino.runner import CommandResult
from create_destino.scaffolder.generator import BuildState, ProjectBuilder, check_target


pytestmark = pytest.mark.unit


TS_FILES = {
    "package.json",
    "tsconfig.json",
    "destino.config.ts",
    "routes/hello.ts",
    "index.ts",
    ".gitignore",
}
JS_FILES = {
    "package.json",
    "destino.config.js",
    "routes/hello.js",
    "index.js",
    ".gitignore",
}


def _tree(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


# ---------------------------------------------------------------------------
# check_target
# ---------------------------------------------------------------------------


class TestCheckTarget:
    def test_new_directory(self, workdir):
        assert check_target(workdir, "demo") == workdir / "demo"

    def test_existing_directory_conflicts(self, workdir):
        (workdir / "demo").mkdir()
        with pytest.raises(DirectoryConflictError, match="Directory already exists"):
            check_target(workdir, "demo")

    def test_existing_file_conflicts(self, workdir):
        (workdir / "demo").write_text("not a directory")
        with pytest.raises(DirectoryConflictError):
            check_target(workdir, "demo")

    def test_current_directory_empty(self, workdir):
        assert check_target(workdir, ".") == workdir

    def test_current_directory_not_empty(self, workdir):
        (workdir / "README.md").write_text("hi")
        with pytest.raises(DirectoryConflictError, match="not empty") as exc_info:
            check_target(workdir, ".")
        assert exc_info.value.exit_code == 1


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGeneration:
    @pytest.mark.asyncio
    async def test_typescript_tree(
        self, workdir, ts_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        builder = ProjectBuilder(
            ts_default_config,
            workdir,
            fixed_resolver,
            runner=fake_runner,
            prompter=scripted_prompter([False]),
        )
        report = await builder.build()

        assert report.target == workdir / "demo"
        assert _tree(report.target) == TS_FILES
        assert [p.relative_to(report.target).as_posix() for p in report.files] == [
            "package.json",
            "destino.config.ts",
            "routes/hello.ts",
            "tsconfig.json",
            "index.ts",
            ".gitignore",
        ]
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_javascript_tree(
        self, workdir, js_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        builder = ProjectBuilder(
            js_default_config,
            workdir,
            fixed_resolver,
            runner=fake_runner,
            prompter=scripted_prompter([False]),
        )
        report = await builder.build()
        assert _tree(report.target) == JS_FILES

    @pytest.mark.asyncio
    async def test_gitignore_not_written_to_invocation_directory(
        self, workdir, js_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        builder = ProjectBuilder(
            js_default_config,
            workdir,
            fixed_resolver,
            runner=fake_runner,
            prompter=scripted_prompter([False]),
        )
        await builder.build()
        assert sorted(p.name for p in workdir.iterdir()) == ["demo"]

    @pytest.mark.asyncio
    async def test_current_directory(
        self, tmp_path, fixed_resolver, fake_runner, scripted_prompter
    ):
        here = tmp_path / "my-service"
        here.mkdir()
        builder = ProjectBuilder(
            ProjectConfig(name="."),
            here,
            fixed_resolver,
            runner=fake_runner,
            prompter=scripted_prompter([False]),
        )
        report = await builder.build()

        assert report.target == here
        assert _tree(here) == JS_FILES
        manifest = json.loads((here / "package.json").read_text(encoding="utf-8"))
        assert manifest["name"] == "my-service"

    @pytest.mark.asyncio
    async def test_conflict_writes_nothing(
        self, workdir, js_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        existing = workdir / "demo"
        existing.mkdir()
        (existing / "keep.txt").write_text("mine")
        prompter = scripted_prompter([])

        builder = ProjectBuilder(
            js_default_config, workdir, fixed_resolver, runner=fake_runner, prompter=prompter
        )
        with pytest.raises(DirectoryConflictError):
            await builder.build()

        assert _tree(existing) == {"keep.txt"}
        assert prompter.calls == []
        assert builder.state is BuildState.INIT

    @pytest.mark.asyncio
    async def test_registry_failure_leaves_directories(
        self, workdir, js_default_config, fake_runner, scripted_prompter
    ):
        resolver = FixedVersionResolver({"express": "4.21.2"})
        builder = ProjectBuilder(
            js_default_config,
            workdir,
            resolver,
            runner=fake_runner,
            prompter=scripted_prompter([]),
        )
        with pytest.raises(RegistryQueryError):
            await builder.build()

        assert (workdir / "demo" / "routes").is_dir()
        assert _tree(workdir / "demo") == set()
        assert builder.state is BuildState.DIRECTORY_CREATED


class TestRepeatableOutput:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("config_fixture", ["ts_default_config", "custom_config"])
    async def test_same_config_gives_identical_bytes(
        self, request, tmp_path, fixed_resolver, config_fixture
    ):
        config = request.getfixturevalue(config_fixture)
        builder = ProjectBuilder(config, tmp_path, fixed_resolver)
        first = tmp_path / "first" / config.name
        second = tmp_path / "second" / config.name
        for target in (first, second):
            await builder.create_directories(target)
            await builder.generate_files(target)

        assert _tree(first) == _tree(second)
        for relative in _tree(first):
            assert (first / relative).read_bytes() == (second / relative).read_bytes()


# ---------------------------------------------------------------------------
# Install
# ---------------------------------------------------------------------------


class TestInstall:
    @pytest.mark.asyncio
    async def test_declined(
        self, workdir, ts_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        prompter = scripted_prompter([False])
        builder = ProjectBuilder(
            ts_default_config, workdir, fixed_resolver, runner=fake_runner, prompter=prompter
        )
        report = await builder.build()

        assert prompter.calls == [("confirm", "Do you want to install dependencies?")]
        assert report.install_result is None
        assert report.installed is False
        assert fake_runner.calls == []
        assert builder.history == [
            BuildState.INIT,
            BuildState.DIRECTORY_CREATED,
            BuildState.GENERATED,
            BuildState.INSTALL_PROMPTED,
            BuildState.INSTALL_SKIPPED,
            BuildState.DONE,
        ]

    @pytest.mark.asyncio
    async def test_accepted_runs_package_manager_in_project(
        self, workdir, custom_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        builder = ProjectBuilder(
            custom_config,
            workdir,
            fixed_resolver,
            runner=fake_runner,
            prompter=scripted_prompter([True, False]),
            settings=Settings(install_timeout=300),
        )
        report = await builder.build()

        assert report.installed is True
        install = fake_runner.calls[0]
        assert install["args"] == ["pnpm", "install"]
        assert install["cwd"] == workdir / "custom-api"
        assert install["timeout"] == 300
        assert install["stream"] is True

    @pytest.mark.asyncio
    async def test_failure_raises_and_keeps_files(
        self, workdir, js_default_config, fixed_resolver, failing_runner, scripted_prompter
    ):
        prompter = scripted_prompter([True])
        builder = ProjectBuilder(
            js_default_config, workdir, fixed_resolver, runner=failing_runner, prompter=prompter
        )
        with pytest.raises(CommandError, match="network unreachable") as exc_info:
            await builder.build()

        assert exc_info.value.result.exit_code == 1
        assert _tree(workdir / "demo") == JS_FILES
        # No start prompt after a failed install.
        assert prompter.messages == ["Do you want to install dependencies?"]

    @pytest.mark.asyncio
    async def test_assume_yes_installs_without_prompting(
        self, workdir, js_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        prompter = scripted_prompter([])
        builder = ProjectBuilder(
            js_default_config,
            workdir,
            fixed_resolver,
            runner=fake_runner,
            prompter=prompter,
            assume_yes=True,
        )
        report = await builder.build()

        assert prompter.calls == []
        assert [call["args"] for call in fake_runner.calls] == [["npm", "install"]]
        assert report.start_result is None
        assert BuildState.START_SKIPPED in builder.history


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------


class TestStart:
    @pytest.mark.asyncio
    async def test_declined(
        self, workdir, js_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        prompter = scripted_prompter([True, False])
        builder = ProjectBuilder(
            js_default_config, workdir, fixed_resolver, runner=fake_runner, prompter=prompter
        )
        report = await builder.build()

        assert prompter.messages == [
            "Do you want to install dependencies?",
            "Do you want to start the development server?",
        ]
        assert report.start_result is None
        assert len(fake_runner.calls) == 1
        assert builder.history[-3:] == [
            BuildState.START_PROMPTED,
            BuildState.START_SKIPPED,
            BuildState.DONE,
        ]

    @pytest.mark.asyncio
    async def test_accepted_runs_dev_script_with_inherited_io(
        self, workdir, js_default_config, fixed_resolver, fake_runner, scripted_prompter
    ):
        config = js_default_config.model_copy(update={"package_manager": PackageManager.YARN})
        builder = ProjectBuilder(
            config,
            workdir,
            fixed_resolver,
            runner=fake_runner,
            prompter=scripted_prompter([True, True]),
        )
        report = await builder.build()

        start = fake_runner.calls[1]
        assert start["args"] == ["yarn", "run", "dev"]
        assert start["cwd"] == workdir / "demo"
        assert start["timeout"] is None
        assert start["inherit"] is True
        assert report.start_result is not None
        assert report.state is BuildState.DONE
        assert BuildState.STARTED in builder.history

    @pytest.mark.asyncio
    async def test_dev_server_failure(
        self, workdir, js_default_config, fixed_resolver, scripted_prompter
    ):
        class InstallOnlyRunner:
            async def run(self, args, cwd=None, timeout=120, *, stream=False, inherit=False):
                return CommandResult(command=list(args), exit_code=2 if inherit else 0)

        builder = ProjectBuilder(
            js_default_config,
            workdir,
            fixed_resolver,
            runner=InstallOnlyRunner(),
            prompter=scripted_prompter([True, True]),
        )
        with pytest.raises(CommandError, match="exited with code 2"):
            await builder.build()
