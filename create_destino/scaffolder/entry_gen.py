"""Entry point generation: ``index.{ts,js}`` that boots the destino server."""

from __future__ import annotations

from pathlib import Path

from create_destino.models import ProjectConfig

from .templates import TemplateRenderer


class EntryPointGenerator:
    """Writes the file that imports ``createServer`` and calls it."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def filename(self, config: ProjectConfig) -> str:
        return f"index.{config.language.extension}"

    def render(self, config: ProjectConfig) -> str:
        return self.renderer.render(f"{self.filename(config)}.j2", {})

    async def generate(self, config: ProjectConfig, target: Path) -> Path:
        filename = self.filename(config)
        return await self.renderer.render_to_file(f"{filename}.j2", target / filename, {})
