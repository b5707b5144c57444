class BaseCustomError(Exception):
    """Base class for custom exceptions with metadata support."""

    def __init__(self, message: str, **metadata):
        """Initializes the exception with a message and optional metadata.

        :param message: Error message.
        :param metadata: Additional context or metadata for debugging.
        """
        super().__init__(message)
        self.message = message
        self.metadata = {k: v for k, v in metadata.items() if v is not None}

    def __str__(self):
        if not self.metadata:
            return self.message
        metadata_info = ", ".join(f"{k}={v}" for k, v in sorted(self.metadata.items()))
        return f"{self.message} | Metadata: {metadata_info}"
