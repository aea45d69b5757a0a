"""Error kinds surfaced to callers of the inference client."""


class ImageCheckError(Exception):
    retryable: bool = False


class ConfigurationError(ImageCheckError, ValueError):
    """Missing or invalid configuration. Raised before any network call."""


class InferenceError(ImageCheckError):
    """The remote call failed, timed out or returned no payload."""

    retryable = True


class UnsupportedImageError(InferenceError):
    """The image was rejected before it was sent."""

    retryable = False


class SchemaValidationError(ImageCheckError):
    """The payload is not JSON or does not match the analysis schema."""

    def __init__(self, message: str, payload: str | None = None) -> None:
        super().__init__(message)
        self.payload = payload
