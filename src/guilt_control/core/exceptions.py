class BlobDecodeError(ValueError):
    """Raised when a persisted blob does not match the expected format."""


class ConfigurationError(ValueError):
    """Raised for an invalid scoring configuration."""
