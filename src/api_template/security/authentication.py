"""JWT bearer authentication.

Protect a router or endpoint with the `authorize` dependency:

    router = versioned_router(V1, "/orders", dependencies=[Depends(authorize)])

    @router.get("/mine")
    async def mine(claims: TokenClaims = Depends(authorize)): ...

Opt a single endpoint out again with `@allow_anonymous`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from fastapi.dependencies.models import Dependant
from fastapi.routing import APIRoute
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from api_template.config.config import JwtConfig
from api_template.data_models.api_models import TokenClaims
from api_template.utils.exceptions import UnauthorizedError

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

BEARER_PREFIX = "bearer"
_ALLOW_ANONYMOUS_ATTR = "__allow_anonymous__"


# =============================================================================
#   JwtSettings
# =============================================================================
@dataclass(frozen=True)
class JwtSettings:
    """Resolved token validation parameters, secret included."""

    issuer: str
    audience: str
    secret_key: str
    algorithm: str = "HS256"
    validate_issuer: bool = True
    validate_audience: bool = True
    validate_lifetime: bool = True
    clock_skew_seconds: int = 0
    access_token_minutes: int = 60

    @classmethod
    def from_config(cls, config: JwtConfig) -> "JwtSettings":
        secret_key = config.secret_key
        if not secret_key:
            raise RuntimeError(
                f"{config.secret_key_env_var} environment variable is not set"
            )
        return cls(
            issuer=config.issuer,
            audience=config.audience,
            secret_key=secret_key,
            algorithm=config.algorithm,
            validate_issuer=config.validate_issuer,
            validate_audience=config.validate_audience,
            validate_lifetime=config.validate_lifetime,
            clock_skew_seconds=config.clock_skew_seconds,
            access_token_minutes=config.access_token_minutes,
        )


# =============================================================================
#   Token issuing / validation
# =============================================================================
def create_access_token(
    subject: str,
    settings: JwtSettings,
    claims: Optional[Dict[str, Any]] = None,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Issue a token signed with the configured secret.

    Args:
        subject: Value of the `sub` claim.
        settings: Resolved JWT settings.
        claims: Extra claims merged into the payload.
        expires_in: Lifetime; defaults to `access_token_minutes`. A negative
            value yields an already-expired token.

    Returns:
        The encoded JWT.
    """
    now = datetime.now(tz=timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(minutes=settings.access_token_minutes)

    payload: Dict[str, Any] = {
        "sub": subject,
        "iss": settings.issuer,
        "aud": settings.audience,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    payload.update(claims or {})

    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str, settings: JwtSettings) -> TokenClaims:
    """Validate a token and return its claims.

    Raises:
        UnauthorizedError: On a bad signature, expired or missing `exp`, wrong issuer
            or audience, or claims that do not fit `TokenClaims`.
    """
    options = {
        "verify_iss": settings.validate_issuer,
        "verify_aud": settings.validate_audience,
        "verify_exp": settings.validate_lifetime,
        "require_exp": settings.validate_lifetime,
        "leeway": settings.clock_skew_seconds,
    }

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            audience=settings.audience if settings.validate_audience else None,
            issuer=settings.issuer if settings.validate_issuer else None,
            options=options,
        )
        return TokenClaims.model_validate(payload)

    except ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired") from exc

    except JWTError as exc:
        raise UnauthorizedError(f"Invalid token: {exc}") from exc

    except ValidationError as exc:
        raise UnauthorizedError("Invalid token: unexpected claims") from exc


# =============================================================================
#   Anonymous access
# =============================================================================
def allow_anonymous(endpoint: Callable) -> Callable:
    """Mark an endpoint as reachable without a token, even under an authorized router."""
    setattr(endpoint, _ALLOW_ANONYMOUS_ATTR, True)
    return endpoint


def is_anonymous(endpoint: Optional[Callable]) -> bool:
    return bool(getattr(endpoint, _ALLOW_ANONYMOUS_ATTR, False))


# =============================================================================
#   Dependency
# =============================================================================
def get_jwt_settings(request: Request) -> JwtSettings:
    """FastAPI dependency that resolves the JwtSettings from app state."""
    return request.app.state.jwt_settings


async def authorize(request: Request) -> Optional[TokenClaims]:
    """Require a valid bearer token unless the endpoint allows anonymous access.

    The raw token and its claims are kept on `request.state` for later use.

    Returns:
        The token claims, or None for anonymous endpoints.

    Raises:
        UnauthorizedError: If the header is missing, malformed or the token
            does not validate.
    """
    if is_anonymous(request.scope.get("endpoint")):
        return None

    header = request.headers.get("Authorization")
    if not header:
        raise UnauthorizedError("Missing Authorization header")

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_PREFIX or not token:
        raise UnauthorizedError("Authorization header is not a bearer token")

    claims = decode_token(token, get_jwt_settings(request))

    request.state.token = token
    request.state.claims = claims
    logger.debug("Authenticated subject '%s'", claims.sub)
    return claims


# =============================================================================
#   Route inspection
# =============================================================================
def _depends_on(dependant: Dependant, call: Callable) -> bool:
    for sub in dependant.dependencies:
        if sub.call is call or _depends_on(sub, call):
            return True
    return False


def requires_authorization(route: APIRoute) -> bool:
    """True when the route depends on `authorize` and is not marked anonymous."""
    if is_anonymous(route.endpoint):
        return False
    return _depends_on(route.dependant, authorize)
