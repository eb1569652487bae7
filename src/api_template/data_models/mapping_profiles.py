from api_template.data_models.api_models import TokenClaims, UserResponse
from api_template.utils.mapping import MappingProfile, ObjectMapper


class DefaultMappingProfile(MappingProfile):
    """Mappings used by the bundled endpoints."""

    def configure(self, mapper: ObjectMapper) -> None:
        mapper.register(
            TokenClaims,
            UserResponse,
            lambda claims: UserResponse(
                id=claims.sub,
                email=claims.email,
                name=claims.name,
                roles=list(claims.roles),
            ),
        )
