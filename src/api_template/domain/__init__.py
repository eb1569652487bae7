from api_template.domain.error_codes import APPLICATION_ERROR, UNAUTHORIZED_ERROR, VALIDATION_ERROR

__all__ = ["APPLICATION_ERROR", "UNAUTHORIZED_ERROR", "VALIDATION_ERROR"]
