from api_template.security.authentication import (
    JwtSettings,
    allow_anonymous,
    authorize,
    create_access_token,
    decode_token,
    requires_authorization,
)

__all__ = [
    "JwtSettings",
    "allow_anonymous",
    "authorize",
    "create_access_token",
    "decode_token",
    "requires_authorization",
]
