"""
Custom Exceptions - Application-specific error types
"""


class VerificationGatewayException(Exception):
    """Base exception for all verification gateway errors"""
    code = "GATEWAY_ERROR"


class RequestInvalidError(VerificationGatewayException):
    """Raised when a request is missing or has invalid fields"""
    code = "REQUEST_INVALID"


class ConfigurationError(VerificationGatewayException):
    """Raised when the inference client cannot be built from settings"""
    code = "CONFIGURATION_ERROR"


class VerificationError(VerificationGatewayException):
    """Base for failures after validation; all surface as a generic server error"""
    code = "VERIFICATION_FAILED"


class UpstreamError(VerificationError):
    """Raised when the inference backend fails (status, network, envelope)"""
    code = "UPSTREAM_ERROR"


class ExtractionError(VerificationError):
    """Raised when no JSON object can be located in upstream text"""
    code = "EXTRACTION_FAILED"


class SchemaViolationError(VerificationError):
    """Raised when the extracted JSON does not match the kind's schema"""
    code = "SCHEMA_VIOLATION"
