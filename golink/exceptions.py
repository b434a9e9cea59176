class GolinkError(Exception):
    """Base class for errors raised inside golink."""


class StrategyError(GolinkError):
    """A product data strategy could not produce a record."""

    reason = "error"


class TransportError(StrategyError):
    """Network failure, timeout or non-2xx response from an upstream."""

    reason = "transport"


class PaapiError(StrategyError):
    """PA-API answered, but with errors, an auth failure or an unreadable body."""

    reason = "paapi"


class ScrapeBlockedError(StrategyError):
    """Amazon served a robot check or other block page."""

    reason = "blocked"
