"""
Error Taxonomy
==============

Every failure the comparison can report to a user is one of:

    ConfigError      - missing or out-of-range settings, unknown modes
    DataIOError      - file missing, unreadable or unwritable
    FormatError      - mismatched byte lengths, non-positive row count

All of them derive from TraceCompareError and map to exit code 1 in the CLI.
Anything else escaping the run is an internal fault (exit code 2).

Non-finite numeric results (zero norms, zero maxima) are NOT errors.
"""

from typing import Optional


EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_INTERNAL_ERROR = 2


class TraceCompareError(Exception):
    """Base class for errors reported to the user."""
    exit_code: int = EXIT_USER_ERROR


class ConfigError(TraceCompareError):
    """Raised when a setting is missing, malformed or out of range."""
    pass


class InvalidModeError(ConfigError):
    """Raised when an engine receives a mode value it does not implement."""

    def __init__(self, option: str, value, valid: Optional[tuple] = None):
        self.option = option
        self.value = value
        self.valid = valid
        message = f"Unknown {option} option: {value}"
        if valid:
            message += f". The valid options are: {', '.join(str(v) for v in valid)}"
        super().__init__(message)


class DataIOError(TraceCompareError, OSError):
    """Raised when a data file cannot be opened for reading or writing."""

    def __init__(self, path, action: str = 'read'):
        self.path = str(path)
        self.action = action
        if action == 'read':
            message = f"File '{self.path}' can't be opened. Check that it exists."
        else:
            message = f"File '{self.path}' can't be opened for writing."
        super().__init__(message)


class FormatError(TraceCompareError):
    """Raised when input files do not form a valid comparison pair."""
    pass
