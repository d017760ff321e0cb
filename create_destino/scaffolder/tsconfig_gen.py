"""``tsconfig.json`` generation (TypeScript projects only)."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from create_destino.models import ProjectConfig

from .templates import write_file

TSCONFIG_FILE = "tsconfig.json"

TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES6",
        "module": "commonjs",
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "outDir": "./dist",
    },
    "exclude": ["node_modules", "dist"],
}


class BuildConfigGenerator:
    """Writes the fixed TypeScript compiler configuration."""

    def applies_to(self, config: ProjectConfig) -> bool:
        return config.is_typescript

    def render(self) -> str:
        return json.dumps(TSCONFIG, indent=2) + "\n"

    async def generate(self, config: ProjectConfig, target: Path) -> Path:
        out = target / TSCONFIG_FILE
        await asyncio.to_thread(write_file, out, self.render())
        return out
