"""``destino.config.{ts,js}`` generation.

Default mode always emits ``DEFAULT_APP_CONFIG`` regardless of the custom
fields on the config.  Custom mode assembles the object field by field; keys
for declined options (static serving, rate limiting) are left out entirely
rather than written as empty values.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from create_destino.models import ProjectConfig

from .templates import TemplateRenderer

CORS_OPTIONS: dict[str, Any] = {"options": {"origin": "*"}}

DEFAULT_APP_CONFIG: dict[str, Any] = {
    "cors": CORS_OPTIONS,
    "enableJsonParser": True,
    "enableUrlencoded": True,
}

RATE_LIMIT_POLICY: dict[str, Any] = {
    "route": "/*",
    "options": {
        "duration": "15m",
        "max": 100,
        "headers": True,
        "message": "Limit exceeded",
    },
}


def build_app_config(config: ProjectConfig) -> dict[str, Any]:
    """Return the application config object for *config*.

    A fresh copy is returned each time so callers may mutate it freely.
    """
    if not config.is_custom:
        return copy.deepcopy(DEFAULT_APP_CONFIG)

    app_config: dict[str, Any] = {
        "port": config.port,
        "cors": copy.deepcopy(CORS_OPTIONS),
        "enableJsonParser": config.enable_json_parser,
        "enableUrlencoded": config.enable_urlencoded,
    }
    if config.serve_static is not None:
        app_config["serveStatic"] = [mount.model_dump() for mount in config.serve_static]
    if config.enable_rate_limit:
        app_config["rateLimit"] = copy.deepcopy(RATE_LIMIT_POLICY)
    return app_config


class AppConfigGenerator:
    """Writes the destino application config in the project's language."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def filename(self, config: ProjectConfig) -> str:
        return f"destino.config.{config.language.extension}"

    def render(self, config: ProjectConfig) -> str:
        return self.renderer.render(
            f"{self.filename(config)}.j2", self._context(config)
        )

    async def generate(self, config: ProjectConfig, target: Path) -> Path:
        filename = self.filename(config)
        return await self.renderer.render_to_file(
            f"{filename}.j2", target / filename, self._context(config)
        )

    @staticmethod
    def _context(config: ProjectConfig) -> dict[str, Any]:
        return {
            "config_json": json.dumps(
                build_app_config(config), indent=2, ensure_ascii=False
            )
        }
