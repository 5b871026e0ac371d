"""
Central configuration for txplan.

Platform names are dependency names that stand for capabilities of the host
(language runtime, extensions, rpmlib features, files) rather than for
installable packages. They never pull packages forward when ordering
plugins.

Lookup order:
    1. File named by $TXPLAN_CONFIG
    2. .txplan.local in the current directory
    3. Built-in defaults

Config file format (one setting per line):
    platform_regex=^(?:php|ext-.+)$
    extra_platform_names=python3,perl
    # Comments start with #
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Config file name
LOCAL_CONFIG_FILE = ".txplan.local"
CONFIG_ENV_VAR = "TXPLAN_CONFIG"

PLATFORM_PACKAGE_REGEX = (
    r'^(?:php(?:-64bit|-ipv6|-zts|-debug)?|hhvm|(?:ext|lib)-[a-z0-9](?:[_.-]?[a-z0-9]+)*'
    r'|composer-(?:plugin|runtime)-api'
    r'|rpmlib\(.*\)|/.*)$'
)

# Cache for loaded config (avoid repeated filesystem checks)
_cached_config: Optional[dict] = None


class ConfigError(Exception):
    """Raised when the configuration is invalid."""


def _read_config_file(config_path: Path) -> Optional[dict]:
    """Read a key=value config file.

    Returns:
        Dict with config values, or None if file doesn't exist
    """
    if not config_path.exists():
        return None

    config = {}
    try:
        with open(config_path) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if '=' in line:
                    key, value = line.split('=', 1)
                    config[key.strip()] = value.strip()
    except (OSError, IOError) as e:
        logger.warning(f"Cannot read config file {config_path}: {e}")
        return None

    return config


def _find_config_file() -> Optional[Path]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    local = Path.cwd() / LOCAL_CONFIG_FILE
    if local.exists():
        return local
    return None


def _compile(regex: str) -> re.Pattern:
    try:
        return re.compile(regex, re.IGNORECASE)
    except re.error as e:
        raise ConfigError(f"Invalid platform_regex {regex!r}: {e}") from e


def get_config() -> dict:
    """Load configuration (cached).

    Returns:
        Dict with 'platform_pattern', 'extra_platform_names', 'config_file'
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    config_file = _find_config_file()
    values = {}
    if config_file is not None:
        values = _read_config_file(config_file) or {}
        logger.debug(f"Loaded {len(values)} settings from {config_file}")

    extra = values.get('extra_platform_names', '')
    _cached_config = {
        'platform_pattern': _compile(values.get('platform_regex') or PLATFORM_PACKAGE_REGEX),
        'extra_platform_names': frozenset(n.strip() for n in extra.split(',') if n.strip()),
        'config_file': config_file,
    }
    return _cached_config


def reset_config():
    """Forget cached configuration (next access reloads it)."""
    global _cached_config
    _cached_config = None


def get_platform_pattern() -> re.Pattern:
    """Get the compiled platform name pattern."""
    return get_config()['platform_pattern']


def is_platform_name(name: str, pattern: Optional[re.Pattern] = None) -> bool:
    """Check if a dependency name is a platform name.

    Args:
        name: Dependency target name
        pattern: Pattern to use instead of the configured one

    Returns:
        True if the name stands for a host capability
    """
    if pattern is not None:
        return bool(pattern.match(name))
    config = get_config()
    if name in config['extra_platform_names']:
        return True
    return bool(config['platform_pattern'].match(name))
