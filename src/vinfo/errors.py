class VinfoError(Exception):
    """Base error for vinfo domain exceptions."""


class DocumentError(VinfoError):
    """Raised when a state document cannot be decoded."""


class MatcherError(VinfoError, ValueError):
    """Raised when a matcher or filter expression fails to compile."""


class OptionError(VinfoError):
    """Raised for unknown options or values that do not fit the option type."""


class StateError(VinfoError):
    """Raised when a live-state store rejects a mutation (bad name, bad tags)."""
