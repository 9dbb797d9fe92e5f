"""Custom exception hierarchy for the HTTP relay."""


class RelayError(Exception):
    """Base exception for all relay errors.

    Attributes:
        message: Human-readable message returned to the caller
        status_code: HTTP status used for the outer response
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""


class ValidationError(RelayError):
    """Raised when the inbound request description is invalid."""

    status_code = 400


class InvalidJSON(ValidationError):
    """Request body is not valid JSON."""


class InvalidPayload(ValidationError):
    """Request body is valid JSON but not an object."""


class MissingField(ValidationError):
    """A required field is absent from the request description."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidUrl(ValidationError):
    """The target URL is not an absolute http(s) URI."""


class InvalidMethod(ValidationError):
    """The HTTP method is not one of the supported verbs."""


class InvalidHeader(ValidationError):
    """The headers field is not a flat string-to-string mapping."""


class InvalidHeaderEncoding(ValidationError):
    """A header name or value cannot be encoded for HTTP."""

    def __init__(self, message: str, header: str) -> None:
        super().__init__(message)
        self.header = header


class InvalidBody(ValidationError):
    """The body has a type the current relay mode cannot send."""


class BodySerializationError(ValidationError):
    """The body cannot be serialized to bytes."""


class RequestTooLarge(RelayError):
    """Request body exceeds size limit."""

    status_code = 413


class TransportError(RelayError):
    """Raised when the outbound call fails at the network level."""


class TransportTimeout(TransportError):
    """Raised when the outbound call times out."""


class DecodeError(RelayError):
    """Raised when the target response cannot be decoded."""


class BodyDecodeError(DecodeError):
    """The target response body is not valid text."""
