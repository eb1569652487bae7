from api_template.versioning import ApiVersion

# =============================================================================
#   API versions exposed by the application
# =============================================================================
V1 = ApiVersion(1, 0, deprecated=True)
V2 = ApiVersion(2, 0)

API_VERSIONS = [V1, V2]
