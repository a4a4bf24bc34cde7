"""
Comparison Parameters
=====================

Holds every setting a comparison run reads, plus the closed registry that
binds command-line keys to those settings.

Each option is an OptionSpec tagged with an OptionKind. Parsing and
formatting dispatch on the tag through _PARSERS / _FORMATTERS; there is no
per-type class hierarchy.

Usage:
    from tracecompare.config.parameters import Configuration, parse_command_line

    config = parse_command_line(['-f0', 'ref.bin', '-f1', 'cand.bin', '-ncols', '64'])
    config.validate()
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable, Dict, List, Optional, Any

from tracecompare.errors import ConfigError


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_FILE_NAME = "no-file"
DEFAULT_PRINT_LEN = 10
SPACE_BETWEEN = 5

# Unset upper bound of a region (resolved after load)
UNSET = -1

SCALE_MODES = (0, 1, 2)
XCOR_MODES = (0, 1, 2)
RMS_MODES = (0, 1, 2)
VERBOSITY_LEVELS = (0, 1, 2)


# =============================================================================
# OPTION REGISTRY
# =============================================================================

class OptionKind(Enum):
    """Value type of a command-line option."""
    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"not a boolean: {text!r}")


_PARSERS: Dict[OptionKind, Callable[[str], Any]] = {
    OptionKind.STR: str,
    OptionKind.INT: int,
    OptionKind.FLOAT: float,
    OptionKind.BOOL: _parse_bool,
}

_FORMATTERS: Dict[OptionKind, Callable[[Any], str]] = {
    OptionKind.STR: str,
    OptionKind.INT: str,
    OptionKind.FLOAT: lambda v: f"{v:g}",
    OptionKind.BOOL: lambda v: "1" if v else "0",
}


@dataclass(frozen=True)
class OptionSpec:
    """One command-line option bound to a Configuration attribute."""
    key: str
    attr: str
    kind: OptionKind
    description: str
    priority: int

    def parse(self, text: str) -> Any:
        try:
            return _PARSERS[self.kind](text)
        except ValueError:
            raise ConfigError(
                f"Command line argument '{self.key}' expects a {self.kind.value} "
                f"value, got '{text}'"
            )

    def format(self, value: Any) -> str:
        if value is None:
            return ""
        return _FORMATTERS[self.kind](value)


def _build_registry() -> Dict[str, OptionSpec]:
    entries = [
        ('-f0', 'file_0', OptionKind.STR, "file name (reference solution or Ux)"),
        ('-f1', 'file_1', OptionKind.STR, "file name (solution to compare or Uz)"),
        ('-ncols', 'n_cols', OptionKind.INT, "number of columns in the files"),
        ('-c0', 'col_beg', OptionKind.INT, "first column for comparison"),
        ('-c1', 'col_end', OptionKind.INT, "last column for comparison (not including)"),
        ('-r0', 'row_beg', OptionKind.INT, "first row for comparison"),
        ('-r1', 'row_end', OptionKind.INT, "last row for comparison (not including)"),
        ('-v', 'verbose', OptionKind.INT, "verbosity level"),
        ('-l2l1', 'l2l1', OptionKind.INT, "compute L2 and L1 norms of difference"),
        ('-df', 'diff_file', OptionKind.STR, "name of file with difference"),
        ('-sc1', 'scale_mode', OptionKind.INT,
         "scale data 1 with respect to data 0 (1) or to scale factor (2)"),
        ('-sf', 'scale_factor', OptionKind.FLOAT, "scale factor for data 1"),
        ('-sh1', 'shift', OptionKind.BOOL, "shift data 1 with respect to data 0"),
        ('-xcor', 'xcor', OptionKind.INT,
         "compute cross correlation (1 - by traces, 2 - whole region)"),
        ('-lag', 'lag_region', OptionKind.INT, "lag region for cross correlation computation"),
        ('-rms', 'rms', OptionKind.INT,
         "compute RMS of traces (1 - both files, 2 - amplitude of two components)"),
        ('-sym', 'check_symmetry', OptionKind.BOOL, "check symmetry of columns of both datasets"),
    ]
    return {
        key: OptionSpec(key, attr, kind, desc, priority)
        for priority, (key, attr, kind, desc) in enumerate(entries, start=1)
    }


OPTIONS: Dict[str, OptionSpec] = _build_registry()


def options_by_priority() -> List[OptionSpec]:
    """Options in display order."""
    return sorted(OPTIONS.values(), key=lambda spec: spec.priority)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class Configuration:
    """
    Settings of one comparison run.

    Region bounds are half-open: [row_beg, row_end) x [col_beg, col_end).
    A negative row_end means "up to the last row" and is resolved once the
    matrices are loaded.
    """
    file_0: str = DEFAULT_FILE_NAME
    file_1: str = DEFAULT_FILE_NAME
    n_cols: int = 0
    col_beg: int = 0
    col_end: int = UNSET
    row_beg: int = 0
    row_end: int = UNSET
    verbose: int = 2
    l2l1: int = 0
    diff_file: str = DEFAULT_FILE_NAME
    scale_mode: int = 0
    scale_factor: float = 0.0
    shift: bool = False
    xcor: int = 0
    lag_region: int = 0
    rms: int = 0
    check_symmetry: bool = False
    results_dir: Optional[str] = None

    # -------------------------------------------------------------------------
    # Option binding
    # -------------------------------------------------------------------------

    def set_option(self, key: str, text: str) -> None:
        """Parse `text` for the option `key` and store it."""
        spec = OPTIONS.get(key)
        if spec is None:
            raise ConfigError(f"Command line argument '{key}' wasn't found")
        setattr(self, spec.attr, spec.parse(text))

    def get_option(self, key: str) -> str:
        """Formatted value of option `key`."""
        spec = OPTIONS[key]
        return spec.format(getattr(self, spec.attr))

    def update(self, values: Dict[str, Any]) -> None:
        """Set attributes from a mapping of attribute names (e.g. a YAML file)."""
        known = {f.name: f for f in fields(self)}
        for name, value in values.items():
            if name not in known:
                raise ConfigError(f"Unknown configuration key '{name}'")
            setattr(self, name, value)

    def resolve_columns(self) -> None:
        """Replace an unset col_end with the number of columns."""
        if self.col_end < 0:
            self.col_end = self.n_cols

    # -------------------------------------------------------------------------
    # Derived switches
    # -------------------------------------------------------------------------

    @property
    def wants_diff_file(self) -> bool:
        return bool(self.diff_file) and self.diff_file != DEFAULT_FILE_NAME

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check that the parameters make sense.

        Raises:
            ConfigError: on the first invalid setting
        """
        if not self.file_0 or self.file_0 == DEFAULT_FILE_NAME:
            raise ConfigError("File0 with reference solution is empty or not defined")
        if not self.file_1 or self.file_1 == DEFAULT_FILE_NAME:
            raise ConfigError("File1 with solution for comparison is empty or not defined")
        if self.n_cols <= 0:
            raise ConfigError(f"Number of columns of the data is wrong: {self.n_cols}")
        if self.col_end > self.n_cols:
            raise ConfigError(
                f"Last column for comparison ({self.col_end}) is out of range "
                f"(0, {self.n_cols}]"
            )
        if self.col_beg < 0:
            raise ConfigError(f"First column for comparison ({self.col_beg}) must be >= 0")
        if self.col_end >= 0 and self.col_beg >= self.col_end:
            raise ConfigError(
                f"First column for comparison ({self.col_beg}) must be less than "
                f"the last column for comparison ({self.col_end})"
            )
        if self.row_beg < 0:
            raise ConfigError(f"First row for comparison ({self.row_beg}) must be >= 0")
        if self.row_end > 0 and self.row_beg >= self.row_end:
            raise ConfigError(
                f"First row for comparison ({self.row_beg}) must be less than "
                f"the last row for comparison ({self.row_end})"
            )

        _require_choice('-v', self.verbose, VERBOSITY_LEVELS)
        _require_choice('-l2l1', self.l2l1, (0, 1))
        _require_choice('-sc1', self.scale_mode, SCALE_MODES)
        _require_choice('-xcor', self.xcor, XCOR_MODES)
        _require_choice('-rms', self.rms, RMS_MODES)

        if self.lag_region < 0:
            raise ConfigError(f"The lag region parameter ({self.lag_region}) should be >= 0")

    # -------------------------------------------------------------------------
    # Printing
    # -------------------------------------------------------------------------

    def format_options(self) -> str:
        """Help table: key, description and [default]."""
        defaults = Configuration()
        width = max(len(key) for key in OPTIONS) + SPACE_BETWEEN
        lines = ["", "Available options [default values in brackets]", ""]
        for spec in options_by_priority():
            lines.append(
                f"{spec.key:<{width}}{spec.description} "
                f"[{defaults.get_option(spec.key)}]"
            )
        return "\n".join(lines)

    def format_parameters(self) -> str:
        """Table of the values this run works with."""
        key_width = max(len(key) for key in OPTIONS) + SPACE_BETWEEN
        value_width = max(
            [DEFAULT_PRINT_LEN] + [len(self.get_option(key)) for key in OPTIONS]
        ) + SPACE_BETWEEN
        lines = [
            f"{spec.key:<{key_width}}{self.get_option(spec.key):<{value_width}}{spec.description}"
            for spec in options_by_priority()
        ]
        return "\n".join(lines) + "\n"


def _require_choice(key: str, value: int, valid: tuple) -> None:
    if value not in valid:
        raise ConfigError(
            f"The parameter {key} has invalid value: {value}. The valid options "
            f"are: {', '.join(str(v) for v in valid)}"
        )


# =============================================================================
# COMMAND LINE
# =============================================================================

HELP_KEYS = ('-h', '-help', '--help')


def wants_help(argv: List[str]) -> bool:
    """No arguments at all, or an explicit help key."""
    return len(argv) == 0 or any(arg in HELP_KEYS for arg in argv)


def parse_command_line(
    argv: List[str],
    config: Optional[Configuration] = None,
) -> Configuration:
    """
    Read "key value key value ..." pairs into a Configuration.

    Args:
        argv: Arguments without the program name
        config: Configuration to update (a fresh default one if None)

    Returns:
        The updated Configuration, with col_end resolved
    """
    config = config or Configuration()

    if len(argv) % 2 != 0:
        raise ConfigError(
            "The number of command line arguments must be even, because every "
            f"parameter is accompanied by a value. But there are {len(argv)} of "
            "the arguments"
        )

    for key, value in zip(argv[0::2], argv[1::2]):
        config.set_option(key, value)

    config.resolve_columns()
    return config
