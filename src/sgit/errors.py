"""Exception hierarchy for sgit."""


class SgitError(Exception):
    """Base class for failures reported to the user as a single line."""

    pass


class NotARepositoryError(SgitError):
    """Raised when an augmented command runs outside a git repository."""

    def __init__(self, message: str = "not a git repository (or any of the parent directories)"):
        super().__init__(message)


class ConfigurationError(SgitError):
    """Raised when no usable credential is available after setup."""

    pass


class EditorError(SgitError):
    """Raised when the commit message editor cannot be found or fails."""

    pass


class FlagError(SgitError):
    """Raised for malformed flag usage, such as a valued flag without a value."""

    pass


class SetupCancelled(Exception):
    """The user interrupted interactive setup. Nothing was persisted."""

    pass
