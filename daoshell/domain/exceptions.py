"""
Domain exceptions for the DAO shell.

Implements a hierarchy distinguishing between recoverable errors, which
only concern the caller that issued the failing request (a rejected path
change, a failed identity write), and fatal errors, which end the session
and must reach the top of the presentation layer.
"""


class DaoShellError(Exception):
    """Base class for all DAO shell domain exceptions."""
    pass


class RecoverableError(DaoShellError):
    """
    Errors that only affect the request that raised them.

    Examples:
    - An inactive app asking to change the visible path
    - A failed or cancelled identity modification
    - An intent issued while no organization is loaded
    """
    pass


class FatalError(DaoShellError):
    """
    Errors that end the current session.

    Examples:
    - The organization client could not be constructed
    - Invalid configuration
    """
    pass


class NavigationRejectedError(RecoverableError):
    """An app instance asked to change the path while not active."""

    def __init__(self, app_address: str):
        super().__init__(
            f"Can't change the path of {app_address}: the app is not currently active."
        )
        self.app_address = app_address


class IdentityModificationCancelled(RecoverableError):
    """The identity modification was cancelled before being saved."""

    def __init__(self, message: str = "Identity modification cancelled"):
        super().__init__(message)


class IdentityWriteError(RecoverableError):
    """The organization client failed to store an identity label."""
    pass


class NoOrganizationError(RecoverableError):
    """An intent needed a loaded organization client but none is attached."""
    pass


class SessionSupersededError(RecoverableError):
    """A request arrived from the client of a DAO that is no longer loaded."""

    def __init__(self, address: str):
        super().__init__(f"Request from {address} ignored: its organization is no longer loaded.")
        self.address = address


class DaoConnectionError(FatalError):
    """The organization client for a DAO could not be constructed."""

    def __init__(self, dao: str, cause: BaseException):
        super().__init__(f"Unable to connect to {dao}: {type(cause).__name__}. {cause}")
        self.dao = dao
        self.cause = cause


class ConfigurationError(FatalError):
    """Invalid system configuration."""
    pass
