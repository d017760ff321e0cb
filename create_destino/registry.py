"""Latest-version lookups for the packages pinned in ``package.json``.

Each lookup is a single blocking round trip with no caching, so a freshly
scaffolded project always starts on current releases.  Any failure raises
``RegistryQueryError``; a manifest is never written with a guessed version.

Typical usage::

    resolver = RegistryVersionResolver()
    version = await resolver.latest_version("express")   # "4.21.2"
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from urllib.parse import quote

import httpx

from create_destino.config import ResolverKind, Settings
from create_destino.errors import RegistryQueryError
from create_destino.runner import CommandRunner

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.+-]+)?$")


class VersionResolver(ABC):
    """Resolves the latest published version of a named package."""

    @abstractmethod
    async def latest_version(self, package: str) -> str:
        """Return the latest version string, e.g. ``"5.1.0"``."""


class RegistryVersionResolver(VersionResolver):
    """Queries the npm registry HTTP API (``GET /<package>/latest``)."""

    def __init__(
        self, base_url: str = "https://registry.npmjs.org", timeout: float = 15.0
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"Accept": "application/json"},
        )

    async def latest_version(self, package: str) -> str:
        # Scoped names keep their leading "@" but the slash must be encoded.
        path = f"/{quote(package, safe='@')}/latest"
        try:
            async with self._client() as client:
                response = await client.get(path)
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError as exc:
            raise RegistryQueryError(
                package, f"cannot connect to registry at {self.base_url}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise RegistryQueryError(
                package, f"registry request timed out after {self.timeout}s"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise RegistryQueryError(
                package, f"registry returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RegistryQueryError(package, f"registry request failed: {exc}") from exc
        except ValueError as exc:
            raise RegistryQueryError(package, "registry returned malformed JSON") from exc

        version = data.get("version") if isinstance(data, dict) else None
        return _checked_version(package, version)


class NpmVersionResolver(VersionResolver):
    """Asks the local ``npm`` binary (``npm show <package> version``)."""

    def __init__(self, runner: CommandRunner | None = None, timeout: float = 60) -> None:
        self.runner = runner or CommandRunner()
        self.timeout = timeout

    async def latest_version(self, package: str) -> str:
        result = await self.runner.run(
            ["npm", "show", package, "version"], timeout=self.timeout
        )
        if not result.success:
            raise RegistryQueryError(
                package, f"'{result.command_line}' failed: {result.error_output()}"
            )
        return _checked_version(package, result.stdout.strip())


class FixedVersionResolver(VersionResolver):
    """Returns versions from a fixed mapping; no network access."""

    def __init__(self, versions: Mapping[str, str]) -> None:
        self.versions = dict(versions)

    async def latest_version(self, package: str) -> str:
        if package not in self.versions:
            raise RegistryQueryError(package, "no fixed version configured")
        return _checked_version(package, self.versions[package])


def build_resolver(settings: Settings, runner: CommandRunner | None = None) -> VersionResolver:
    """Pick the resolver named by ``settings.resolver``."""
    if settings.resolver is ResolverKind.NPM:
        return NpmVersionResolver(runner)
    return RegistryVersionResolver(settings.registry_url, settings.registry_timeout)


def _checked_version(package: str, version: object) -> str:
    if not isinstance(version, str) or not VERSION_RE.match(version.strip()):
        raise RegistryQueryError(package, f"unexpected version value {version!r}")
    return version.strip()
