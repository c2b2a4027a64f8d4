"""HTTP header names read or written by the engine."""

ORGANIZATION_OVERRIDE_HEADER = "X-Organization-Id"
IMPERSONATED_ORGANIZATION_HEADER = "X-Impersonated-Organization"
IMPERSONATED_ORGANIZATION_NAME_HEADER = "X-Impersonated-Organization-Name"
USAGE_WARNING_HEADER = "X-Usage-Warning"
REQUEST_ID_HEADER = "X-Request-ID"
