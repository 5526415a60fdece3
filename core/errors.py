"""
SUBCRACK - Error taxonomy.
Operations raise; only the CLI catches and turns these into exit codes.
"""


class SubcrackError(Exception):
    """Base class for every error raised by the cracking engine."""


class ConfigurationError(SubcrackError, ValueError):
    """Caller supplied an invalid key, table or tuning value."""


class DataUnavailableError(SubcrackError):
    """Reference statistics could not be loaded or are incomplete."""
