"""
Domain exceptions for the Crypto Tracker.

Separates recoverable runtime errors (provider glitches, network failures)
that only surface in the title bar from fatal errors (bad configuration,
failed persistence) that the caller must handle.
"""


class TrackerError(Exception):
    """Base class for all tracker exceptions."""
    pass


class RecoverableError(TrackerError):
    """
    Errors the dashboard keeps running through.

    Examples:
    - Network timeout while polling prices
    - Provider returned a non-zero status code
    - Malformed provider response
    """
    pass


class FatalError(TrackerError):
    """
    Errors that need the caller (or the operator) to intervene.

    Examples:
    - Missing or malformed configuration at startup
    - Portfolio file could not be written
    """
    pass


class PriceFetchError(RecoverableError):
    """Fetching or decoding provider data failed."""
    pass


class ConfigurationError(FatalError):
    """Invalid or missing configuration; the process cannot start."""
    pass


class PersistenceError(FatalError):
    """Saving the portfolio file failed after an in-memory mutation."""
    pass
