"""``package.json`` generation.

Scripts and entry point follow the project language; every dependency is
pinned to ``^<latest>`` as reported by the injected ``VersionResolver``.
Versions are resolved one at a time, in declaration order, before anything is
written.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from create_destino.models import ProjectConfig
from create_destino.registry import VersionResolver

from .templates import write_file

MANIFEST_FILE = "package.json"
MANIFEST_VERSION = "1.0.0"

FRAMEWORK_PACKAGE = "destino"
SERVER_PACKAGE = "express"

RUNTIME_DEPENDENCIES: tuple[str, ...] = (SERVER_PACKAGE, FRAMEWORK_PACKAGE)
DEV_DEPENDENCIES: tuple[str, ...] = ("nodemon",)
TYPESCRIPT_DEV_DEPENDENCIES: tuple[str, ...] = ("ts-node", "typescript")


class ManifestGenerator:
    """Builds and writes the project's ``package.json``."""

    def __init__(self, resolver: VersionResolver) -> None:
        self.resolver = resolver

    def dependency_names(self, config: ProjectConfig) -> tuple[list[str], list[str]]:
        """Return ``(dependencies, devDependencies)`` package names for *config*."""
        dev = list(DEV_DEPENDENCIES)
        if config.is_typescript:
            dev.extend(TYPESCRIPT_DEV_DEPENDENCIES)
        return list(RUNTIME_DEPENDENCIES), dev

    async def build_manifest(self, config: ProjectConfig, target: Path) -> dict[str, Any]:
        """Resolve every dependency version and return the manifest mapping.

        Raises:
            RegistryQueryError: A version could not be resolved.  Nothing is
                written in that case.
        """
        runtime, dev = self.dependency_names(config)
        dependencies = {name: await self._range(name) for name in runtime}
        dev_dependencies = {name: await self._range(name) for name in dev}

        ext = config.language.extension
        scripts: dict[str, str] = {
            "start": "node dist/index.js" if config.is_typescript else "node index.js",
            "dev": "nodemon",
        }
        if config.is_typescript:
            scripts["build"] = "tsc -p ."

        return {
            "name": package_name(config, target),
            "version": MANIFEST_VERSION,
            "main": f"index.{ext}",
            "scripts": scripts,
            "dependencies": dependencies,
            "devDependencies": dev_dependencies,
        }

    def render(self, manifest: dict[str, Any]) -> str:
        return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"

    async def generate(self, config: ProjectConfig, target: Path) -> Path:
        manifest = await self.build_manifest(config, target)
        out = target / MANIFEST_FILE
        await asyncio.to_thread(write_file, out, self.render(manifest))
        return out

    async def _range(self, package: str) -> str:
        return f"^{await self.resolver.latest_version(package)}"


def package_name(config: ProjectConfig, target: Path) -> str:
    """Manifest name: the project name, or the directory name for ``"."``."""
    if config.in_current_directory:
        return target.resolve().name
    return config.name
