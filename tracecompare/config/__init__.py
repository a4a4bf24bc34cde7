"""tracecompare configuration module."""

from tracecompare.config.parameters import (
    Configuration,
    OptionKind,
    OptionSpec,
    OPTIONS,
    DEFAULT_FILE_NAME,
    UNSET,
    options_by_priority,
    parse_command_line,
    wants_help,
)

from tracecompare.config.loader import (
    load_config_file,
    read_config_values,
)

__all__ = [
    # Parameters and option registry
    'Configuration',
    'OptionKind',
    'OptionSpec',
    'OPTIONS',
    'DEFAULT_FILE_NAME',
    'UNSET',
    'options_by_priority',
    'parse_command_line',
    'wants_help',
    # YAML configuration files
    'load_config_file',
    'read_config_values',
]
