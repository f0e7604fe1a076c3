"""Error types raised across the identification pipeline."""


class ParseFailure(ValueError):
    """Provider output could not be turned into an identification result."""


class ConfigurationError(RuntimeError):
    """Required provider credentials are missing."""
