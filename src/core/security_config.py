"""Security configuration constants for the Smart Meeting Assistant API.

This module centralizes:
- Keys whose values are redacted from logs (credentials and meeting content)
- Which error response fields each environment may expose
"""

# Matched case-insensitively as substrings of a log key, so keep entries
# specific enough not to hit ordinary fields (e.g. no bare "key", which would
# redact "key_points").
SENSITIVE_KEYS: set[str] = {
    # Credentials
    "password",
    "secret",
    "token",
    "authorization",
    "api_key",
    "apikey",
    "bearer",
    "cookie",
    "x-api-key",
    "credential",
    # Meeting content
    "transcript",
    "question",
    "answer",
    "prompt",
    "raw_text",
    # Personal information
    "email",
    "phone",
}

# Production error responses only contain these fields
PRODUCTION_ERROR_FIELDS: set[str] = {
    "correlation_id",
    "type",
}

# Additional diagnostics allowed outside production
DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "details",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed error response fields based on environment.

    Args:
        environment: The application environment (production, development, etc.)

    Returns:
        Set of allowed field names for error responses
    """
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
