"""Exception types raised by the combat engine."""


class EngineError(Exception):
    """Base class for engine failures."""


class InvariantViolation(EngineError):
    """Combat state broke a data-integrity rule (duplicated card, HP out of range)."""


class ConfigError(EngineError):
    """An engine setting could not be parsed."""


class ProfileGenerationError(EngineError):
    """The enemy profile generator returned something unusable."""
