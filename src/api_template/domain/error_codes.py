# =============================================================================
#   Error codes carried in the `code` field of every error envelope
# =============================================================================
VALIDATION_ERROR = "VALIDATION_ERROR"        # 400
UNAUTHORIZED_ERROR = "UNAUTHORIZED_ERROR"    # 401
APPLICATION_ERROR = "APPLICATION_ERROR"      # 500
