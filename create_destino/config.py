"""create-destino runtime settings.

Typed settings for the registry lookups and subprocess limits, built once by
the CLI (usually via ``Settings.from_env()``) and passed to the pieces that
need them.  Pydantic validates every value at construction time.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from create_destino.errors import ScaffoldError
from create_destino.models import DEFAULT_PORT


class ResolverKind(str, Enum):
    """How the latest dependency versions are looked up."""
    REGISTRY = "registry"
    NPM = "npm"


class Settings(BaseModel):
    """Global create-destino settings."""

    registry_url: str = Field(default="https://registry.npmjs.org")
    registry_timeout: float = Field(
        default=15.0, ge=1, description="Per-request registry timeout in seconds"
    )
    resolver: ResolverKind = Field(default=ResolverKind.REGISTRY)
    default_port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    install_timeout: int = Field(
        default=900, ge=10, description="Dependency install timeout in seconds"
    )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load settings from a JSON file.

        Keys that are absent keep their defaults.

        Raises:
            ScaffoldError: The file cannot be read.
            ValidationError: The file is not valid JSON or holds invalid values.
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ScaffoldError(f"Cannot read settings file {path}: {exc}") from exc
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            CREATE_DESTINO_REGISTRY, CREATE_DESTINO_REGISTRY_TIMEOUT,
            CREATE_DESTINO_RESOLVER, CREATE_DESTINO_INSTALL_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_DESTINO_REGISTRY"):
            kwargs["registry_url"] = os.environ["CREATE_DESTINO_REGISTRY"].rstrip("/")
        if os.environ.get("CREATE_DESTINO_REGISTRY_TIMEOUT"):
            kwargs["registry_timeout"] = os.environ["CREATE_DESTINO_REGISTRY_TIMEOUT"]
        if os.environ.get("CREATE_DESTINO_RESOLVER"):
            kwargs["resolver"] = os.environ["CREATE_DESTINO_RESOLVER"]
        if os.environ.get("CREATE_DESTINO_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = os.environ["CREATE_DESTINO_INSTALL_TIMEOUT"]
        return cls(**kwargs)
