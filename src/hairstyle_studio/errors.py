"""Error types shared by services and the HTTP layer."""


class InvalidRequestError(ValueError):
    """Raised when a request is missing required fields or is malformed."""


class ImageDecodeError(InvalidRequestError):
    """Raised when an inline image reference carries malformed base64 data."""


class StorageError(RuntimeError):
    """Raised when an image cannot be written to managed storage."""


class ExternalServiceError(RuntimeError):
    """Raised by model adapters when a reply has an unexpected shape."""
