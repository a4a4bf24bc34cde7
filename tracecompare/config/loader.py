"""
Configuration file loader.

Reads a YAML file whose keys are Configuration attribute names and
returns the values coerced through the option registry. Command-line
options are applied on top of what the file provides.

Example (compare.yaml):

    file_0: runs/reference/seismo_x.bin
    file_1: runs/candidate/seismo_x.bin
    n_cols: 101
    l2l1: 1
    xcor: 1
    lag_region: 5

Usage:
    from tracecompare.config.loader import load_config_file

    config = load_config_file('compare.yaml')
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from tracecompare.config.parameters import OPTIONS, Configuration
from tracecompare.errors import ConfigError, DataIOError

logger = logging.getLogger(__name__)

_SPECS_BY_ATTR = {spec.attr: spec for spec in OPTIONS.values()}


def read_config_values(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read and coerce the values of a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        dict of attribute name -> typed value
    """
    path = Path(path)
    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except OSError:
        raise DataIOError(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Configuration file '{path}' is not valid YAML: {e}")

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"Configuration file '{path}' must contain a mapping")

    values = {}
    for name, value in content.items():
        spec = _SPECS_BY_ATTR.get(name)
        if spec is not None and value is not None:
            value = spec.parse(str(value))
        elif name == 'results_dir' and value is not None:
            value = str(value)
        values[name] = value

    logger.debug(f"Read {len(values)} settings from {path}")
    return values


def load_config_file(
    path: Union[str, Path],
    config: Optional[Configuration] = None,
) -> Configuration:
    """Apply a YAML configuration file to `config` (or to a default one)."""
    config = config or Configuration()
    config.update(read_config_values(path))
    return config
