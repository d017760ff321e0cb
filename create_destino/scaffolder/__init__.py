"""create-destino scaffolder -- writes a destino starter project to disk.

Quick usage::

    from create_destino.models import ProjectConfig
    from create_destino.registry import RegistryVersionResolver
    from create_destino.scaffolder import ProjectBuilder

    config = ProjectConfig(name="my-api", language="TypeScript")
    builder = ProjectBuilder(config, Path.cwd(), RegistryVersionResolver())
    report = await builder.build()
"""

from create_destino.scaffolder.app_config_gen import AppConfigGenerator, build_app_config
from create_destino.scaffolder.entry_gen import EntryPointGenerator
from create_destino.scaffolder.generator import (
    BuildReport,
    BuildState,
    ProjectBuilder,
    check_target,
)
from create_destino.scaffolder.gitignore_gen import IgnoreFileGenerator
from create_destino.scaffolder.manifest_gen import ManifestGenerator
from create_destino.scaffolder.routes_gen import ExampleRouteGenerator
from create_destino.scaffolder.templates import TemplateRenderer
from create_destino.scaffolder.tsconfig_gen import BuildConfigGenerator

__all__ = [
    "AppConfigGenerator",
    "BuildConfigGenerator",
    "BuildReport",
    "BuildState",
    "EntryPointGenerator",
    "ExampleRouteGenerator",
    "IgnoreFileGenerator",
    "ManifestGenerator",
    "ProjectBuilder",
    "TemplateRenderer",
    "build_app_config",
    "check_target",
]
