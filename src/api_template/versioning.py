"""URL-segment API versioning.

The version lives in the first path segment (`/v1/...`, `/v2.1/...`).
Routers are built with `versioned_router`, and the description provider
knows every version the application exposes so that documentation and
the reporting middleware can enumerate them.
"""

import logging
import re
from dataclasses import dataclass
from functools import total_ordering
from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import APIRouter
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

SUPPORTED_VERSIONS_HEADER = "api-supported-versions"
DEPRECATED_VERSIONS_HEADER = "api-deprecated-versions"

_VERSION_PATTERN = re.compile(r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:-(?P<status>[A-Za-z0-9]+))?$")


# =============================================================================
#   ApiVersion
# =============================================================================
@total_ordering
@dataclass(frozen=True)
class ApiVersion:
    """A single API version, e.g. 1.0 or 2.1-beta."""

    major: int
    minor: int = 0
    status: Optional[str] = None
    deprecated: bool = False

    @classmethod
    def parse(cls, text: str, deprecated: bool = False) -> "ApiVersion":
        match = _VERSION_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid API version: '{text}'")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"] or 0),
            status=match["status"],
            deprecated=deprecated,
        )

    @property
    def group_name(self) -> str:
        """'v' + major[.minor][-status]; a zero minor is dropped."""
        name = f"v{self.major}"
        if self.minor:
            name += f".{self.minor}"
        if self.status:
            name += f"-{self.status}"
        return name

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}"
        return f"{text}-{self.status}" if self.status else text

    def _key(self) -> tuple:
        # releases sort after their pre-release status builds
        return (self.major, self.minor, self.status is None, self.status or "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "ApiVersion") -> bool:
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())


# =============================================================================
#   ApiVersionDescriptionProvider
# =============================================================================
class ApiVersionDescriptionProvider:
    """Knows every API version exposed by the application."""

    def __init__(self, versions: Iterable[ApiVersion]) -> None:
        self._versions: List[ApiVersion] = sorted(set(versions))
        if not self._versions:
            raise ValueError("At least one API version must be registered.")

    @property
    def api_version_descriptions(self) -> List[ApiVersion]:
        return list(self._versions)

    @property
    def latest(self) -> ApiVersion:
        return self._versions[-1]

    @property
    def supported_versions(self) -> List[ApiVersion]:
        return [v for v in self._versions if not v.deprecated]

    @property
    def deprecated_versions(self) -> List[ApiVersion]:
        return [v for v in self._versions if v.deprecated]

    def by_group_name(self, group_name: str) -> Optional[ApiVersion]:
        for version in self._versions:
            if version.group_name == group_name:
                return version
        return None

    def for_path(self, path: str) -> Optional[ApiVersion]:
        """Resolve the version from the first URL segment, if it names one."""
        segment = path.lstrip("/").split("/", 1)[0]
        return self.by_group_name(segment) if segment else None


# =============================================================================
#   Router factory
# =============================================================================
def versioned_router(version: ApiVersion, prefix: str = "", **kwargs) -> APIRouter:
    """APIRouter mounted under the version's URL segment, e.g. /v1/samples."""
    return APIRouter(prefix=f"/{version.group_name}{prefix}", **kwargs)


# =============================================================================
#   ApiVersionReportingMiddleware
# =============================================================================
class ApiVersionReportingMiddleware(BaseHTTPMiddleware):
    """Adds supported/deprecated version headers to responses of versioned paths."""

    def __init__(self, app: ASGIApp, provider: ApiVersionDescriptionProvider) -> None:
        super().__init__(app)
        self._provider = provider
        self._supported = ", ".join(str(v) for v in provider.supported_versions)
        self._deprecated = ", ".join(str(v) for v in provider.deprecated_versions)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if self._provider.for_path(request.url.path) is not None:
            if self._supported:
                response.headers[SUPPORTED_VERSIONS_HEADER] = self._supported
            if self._deprecated:
                response.headers[DEPRECATED_VERSIONS_HEADER] = self._deprecated
        return response
