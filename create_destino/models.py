"""Pydantic v2 models describing the project to scaffold.

``ProjectConfig`` is built once by the interactive collector and then read by
every generator.  It is frozen so no generator can change what another one
sees.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")

# Scaffold into the invocation directory instead of a new subdirectory.
CURRENT_DIRECTORY = "."

DEFAULT_PORT = 3344
MIN_PORT = 1
MAX_PORT = 65535


def is_valid_project_name(name: str) -> bool:
    """Return ``True`` if *name* only contains letters, digits, ``-`` and ``_``."""
    return bool(PROJECT_NAME_RE.fullmatch(name))


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Language(str, Enum):
    """Source language of the generated project."""
    JAVASCRIPT = "JavaScript"
    TYPESCRIPT = "TypeScript"

    @property
    def extension(self) -> str:
        return "ts" if self is Language.TYPESCRIPT else "js"


class ConfigurationMode(str, Enum):
    """Whether the application config is the fixed default or user-tailored."""
    DEFAULT = "default"
    CUSTOM = "custom"


class PackageManager(str, Enum):
    """Package manager used for the install and run commands."""
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------

class StaticMount(BaseModel):
    """A folder served as static files; an empty route mounts it at the root."""
    model_config = ConfigDict(frozen=True)

    folder: str = Field(..., description="Folder path relative to the project")
    route: str = Field(default="", description="Mount route, '' for root")


class ProjectConfig(BaseModel):
    """Answers collected from the user, read-only once constructed.

    The custom-mode fields are only consulted when ``configuration_mode`` is
    ``custom``.  ``serve_static`` is ``None`` when static serving was declined,
    which is distinct from an empty list.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name and output directory, or '.'")
    language: Language = Field(default=Language.JAVASCRIPT)
    configuration_mode: ConfigurationMode = Field(default=ConfigurationMode.DEFAULT)
    package_manager: PackageManager = Field(default=PackageManager.NPM)

    port: int = Field(default=DEFAULT_PORT, ge=MIN_PORT, le=MAX_PORT)
    enable_json_parser: bool = Field(default=True)
    enable_urlencoded: bool = Field(default=True)
    serve_static: Optional[list[StaticMount]] = Field(default=None)
    enable_rate_limit: bool = Field(default=False)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if value != CURRENT_DIRECTORY and not is_valid_project_name(value):
            raise ValueError(
                "project name may only contain letters, numbers, hyphens, and underscores"
            )
        return value

    @property
    def is_typescript(self) -> bool:
        return self.language is Language.TYPESCRIPT

    @property
    def is_custom(self) -> bool:
        return self.configuration_mode is ConfigurationMode.CUSTOM

    @property
    def in_current_directory(self) -> bool:
        return self.name == CURRENT_DIRECTORY
