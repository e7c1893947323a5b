"""Defines exceptions raised by the post linter."""


class PostLintError(Exception):
    """Base exception for linter errors.

    Raised when the linter itself cannot continue, e.g. a post cannot be
    read or the configuration is unusable. Problems found inside posts are
    reported as findings, never raised.
    """

    def __init__(self, message: str, *args: object) -> None:
        """Initialize the exception with a descriptive message.

        Args:
            message: Detailed error message
            *args: Additional positional arguments for Exception

        """
        super().__init__(message, *args)
        self.message = message


class FrontMatterError(PostLintError):
    """Error when a front matter block cannot be split or parsed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        """Initialize the error with the offending line, if known."""
        super().__init__(message)
        self.line = line


class ConfigurationError(PostLintError):
    """Error when configuration values are invalid."""
