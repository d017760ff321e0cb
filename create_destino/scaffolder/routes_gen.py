"""Example route generation: ``routes/hello.{ts,js}`` with GET and POST handlers."""

from __future__ import annotations

from pathlib import Path

from create_destino.models import ProjectConfig

from .templates import TemplateRenderer

ROUTES_DIR = "routes"
EXAMPLE_ROUTE = "hello"


class ExampleRouteGenerator:
    """Writes the demonstration route handler file."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def relative_path(self, config: ProjectConfig) -> str:
        return f"{ROUTES_DIR}/{EXAMPLE_ROUTE}.{config.language.extension}"

    def render(self, config: ProjectConfig) -> str:
        return self.renderer.render(f"{self.relative_path(config)}.j2", {})

    async def generate(self, config: ProjectConfig, target: Path) -> Path:
        rel = self.relative_path(config)
        return await self.renderer.render_to_file(f"{rel}.j2", target / rel, {})
