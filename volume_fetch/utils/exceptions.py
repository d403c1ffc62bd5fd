"""Custom exception hierarchy for the application."""


class VolumeFetchError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        """Initialize exception.

        Args:
            message: Error message
            is_retryable: Whether the operation can be retried
        """
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class ConfigurationError(VolumeFetchError):
    """Configuration or environment setup error."""

    pass


class ValidationError(VolumeFetchError):
    """Required CMS field is missing or malformed.

    Attributes:
        path: Entity descriptors from the volume down to the offending field,
            e.g. ``("page 'Intro'", "chunk 2", "Slug")``
    """

    def __init__(self, message: str, path: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.path = path


class FormatError(ValidationError):
    """Embedded structured text (a generated quiz question) is malformed."""

    pass


class TransportError(VolumeFetchError):
    """HTTP or network failure talking to Strapi or Supabase."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status returned by the server, if any
            is_retryable: Whether the request could succeed if repeated
        """
        super().__init__(message, is_retryable=is_retryable)
        self.status_code = status_code


class OutputWriteError(VolumeFetchError):
    """Rendered document could not be written (e.g. the file already exists)."""

    pass


def format_error_chain(error: BaseException) -> list[str]:
    """Collect messages from an exception and everything it was raised from.

    Args:
        error: Outermost exception

    Returns:
        Messages ordered from the outermost context to the root cause
    """
    messages: list[str] = []
    current: BaseException | None = error
    while current is not None:
        message = str(current) or type(current).__name__
        # Wrappers often repeat the cause's message as a suffix
        if not messages or message not in messages[-1]:
            messages.append(message)
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__
    return messages
