"""Runtime settings and logging setup."""

import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "config/config.yaml"
DIAGNOSTICS_LOGGER = "fastdomaincheck.diagnostics"

ENV_OVERRIDES = {
    'FASTDOMAINCHECK_REQUEST_DELAY': 'request_delay',
    'FASTDOMAINCHECK_WHOIS_TIMEOUT': 'whois_timeout',
}


@dataclass
class Settings:
    """Tunables for the availability engine."""
    whois_timeout: float = 10.0
    whois_max_follow: int = 5
    request_delay: float = 0.3
    burst: int = 1
    dns_timeout: Optional[float] = None
    whois_servers_file: Optional[str] = None
    debug_whois: bool = False


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_settings(settings: Settings) -> Settings:
    """Reject values the engine cannot run with.

    Raises:
        ConfigError: naming the first offending setting.
    """
    checks = (
        ('whois_timeout', _is_number(settings.whois_timeout) and settings.whois_timeout > 0,
         'a positive number'),
        ('whois_max_follow', _is_count(settings.whois_max_follow) and settings.whois_max_follow >= 0,
         'a non-negative integer'),
        ('request_delay', _is_number(settings.request_delay) and settings.request_delay >= 0,
         'a non-negative number'),
        ('burst', _is_count(settings.burst) and settings.burst >= 1,
         'an integer of at least 1'),
        ('dns_timeout', settings.dns_timeout is None
         or (_is_number(settings.dns_timeout) and settings.dns_timeout > 0),
         'a positive number'),
        ('whois_servers_file', settings.whois_servers_file is None
         or isinstance(settings.whois_servers_file, str),
         'a path'),
        ('debug_whois', isinstance(settings.debug_whois, bool), 'true or false'),
    )
    for name, ok, expected in checks:
        if not ok:
            raise ConfigError(f"{name} must be {expected}, got {getattr(settings, name)!r}")
    return settings


def env_flag(name: str) -> bool:
    value = os.environ.get(name, '').strip().lower()
    return value not in ('', '0', 'false', 'no', 'off')


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Build Settings from an optional YAML file and the environment.

    A missing file at the default path is not an error; an explicitly
    given path must exist.
    """
    path = Path(config_path or DEFAULT_CONFIG_PATH)
    data = {}
    if path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
    elif config_path:
        raise ConfigError(f"Config file not found: {path}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    settings = Settings(**data)

    for env_name, attr in ENV_OVERRIDES.items():
        if env_name in os.environ:
            try:
                setattr(settings, attr, float(os.environ[env_name]))
            except ValueError as e:
                raise ConfigError(f"{env_name} must be a number") from e

    if env_flag('DEBUG_WHOIS'):
        settings.debug_whois = True

    return validate_settings(settings)


def configure_logging(verbose: bool = False, debug_whois: bool = False):
    """Send log output to stderr; stdout is reserved for results and MCP traffic."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("fastdomaincheck").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger(DIAGNOSTICS_LOGGER).setLevel(logging.DEBUG if debug_whois else logging.WARNING)

    # Suppress noisy library logging
    logging.getLogger("dns").setLevel(logging.CRITICAL)
    logging.getLogger("mcp").setLevel(logging.WARNING)
