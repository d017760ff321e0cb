"""create-destino command line entry point.

Usage::

    create-destino                 # ask for everything
    create-destino my-api          # project name given up front
    create-destino .               # scaffold into the (empty) current directory
    create-destino my-api --resolver npm --yes

This is the only place that prints errors and chooses the exit code; every
other module raises.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import traceback
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from create_destino import __version__
from create_destino.config import ResolverKind, Settings
from create_destino.errors import CancellationError, ScaffoldError
from create_destino.models import ProjectConfig
from create_destino.prompts import CancellationToken, ConfigCollector, Prompter, RichPrompter
from create_destino.registry import VersionResolver, build_resolver
from create_destino.runner import CommandRunner
from create_destino.scaffolder import BuildReport, ProjectBuilder
from create_destino.utils import (
    console,
    print_banner,
    print_error,
    print_summary_table,
    print_warning,
)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-destino",
        description="Scaffold a new destino server project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-destino\n"
            "  create-destino my-api\n"
            "  create-destino . --resolver npm\n"
            "  create-destino my-api --settings destino-settings.json\n"
        ),
    )
    parser.add_argument(
        "name",
        nargs="?",
        default="",
        help="Project name (asked interactively if omitted); '.' uses the current directory",
    )
    parser.add_argument(
        "--cwd",
        type=Path,
        default=None,
        help="Directory to create the project in (default: current directory)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="JSON settings file to use instead of CREATE_DESTINO_* environment variables",
    )
    parser.add_argument(
        "--resolver",
        choices=[kind.value for kind in ResolverKind],
        default=None,
        help="How to look up the latest dependency versions",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Install dependencies without asking and do not start the dev server",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(
    argv: list[str] | None = None,
    *,
    prompter: Prompter | None = None,
    runner: CommandRunner | None = None,
    resolver: VersionResolver | None = None,
    token: CancellationToken | None = None,
) -> int:
    """Run one scaffolding session and return the process exit code."""
    args = build_parser().parse_args(argv)
    prompter = prompter or RichPrompter()
    runner = runner or CommandRunner()
    token = token or CancellationToken()

    print_banner("Welcome to create-destino!")

    try:
        settings = Settings.load(args.settings) if args.settings else Settings.from_env()
        if args.resolver:
            settings = settings.model_copy(update={"resolver": ResolverKind(args.resolver)})

        collector = ConfigCollector(prompter, token, default_port=settings.default_port)
        config = collector.collect(args.name)
        # Last point at which an interrupt is honoured; writing starts below.
        token.raise_if_cancelled()

        builder = ProjectBuilder(
            config,
            args.cwd or Path.cwd(),
            resolver or build_resolver(settings, runner),
            runner=runner,
            prompter=prompter,
            settings=settings,
            assume_yes=args.yes,
        )
        report = asyncio.run(builder.build())
    except CancellationError as exc:
        print_warning(f"{escape(str(exc))}.")
        return exc.exit_code
    except ScaffoldError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return exc.exit_code
    except ValidationError as exc:
        print_error(f"Invalid configuration: {escape(str(exc))}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print_warning("Interrupted.")
        return EXIT_FAILURE
    except Exception as exc:  # noqa: BLE001
        print_error(f"Unexpected error: {escape(str(exc))}")
        console.print(traceback.format_exc(), style="dim", markup=False)
        return EXIT_FAILURE

    _print_next_steps(config, report)
    return EXIT_OK


def _print_next_steps(config: ProjectConfig, report: BuildReport) -> None:
    manager = config.package_manager.value
    steps: list[str] = []
    if not config.in_current_directory:
        steps.append(f"cd {config.name}")
    if not report.installed:
        steps.append(f"{manager} install")
    steps.append(f"{manager} run dev")

    print_summary_table(
        {
            "Project": str(report.target),
            "Language": config.language.value,
            "Configuration": config.configuration_mode.value,
            "Files": ", ".join(p.relative_to(report.target).as_posix() for p in report.files),
            "Next steps": " && ".join(steps),
        },
        title="create-destino",
    )
    console.print("[bold green]Done. Keep coding and fly on.[/bold green]")


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point for ``create-destino``."""
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
