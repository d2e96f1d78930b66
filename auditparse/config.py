"""Parser configuration — frozen dataclass loaded from YAML and environment variables."""

import copy
import logging
import os
import re
from dataclasses import dataclass

import yaml

from auditparse.errors import ConfigError

logger = logging.getLogger(__name__)

POLICIES = ("basic", "enhanced")

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$", re.ASCII)
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}

DEFAULTS = {
    "parser": {
        "max_line_length": 100000,  # 100KB
        "max_parse_errors": 1000,
        "timeout": 30.0,
        "enable_validation": True,
        "enable_json": True,
        "enable_permissive_json": True,
        "enable_structured_regex": True,
        "enable_grep_fallback": True,
        "fallback_policy": "enhanced",
    },
}

_ENV_OVERRIDES = {
    "AUDITPARSE_MAX_LINE_LENGTH": "max_line_length",
    "AUDITPARSE_MAX_PARSE_ERRORS": "max_parse_errors",
    "AUDITPARSE_TIMEOUT": "timeout",
    "AUDITPARSE_ENABLE_VALIDATION": "enable_validation",
    "AUDITPARSE_ENABLE_JSON": "enable_json",
    "AUDITPARSE_ENABLE_PERMISSIVE_JSON": "enable_permissive_json",
    "AUDITPARSE_ENABLE_STRUCTURED_REGEX": "enable_structured_regex",
    "AUDITPARSE_ENABLE_GREP_FALLBACK": "enable_grep_fallback",
    "AUDITPARSE_FALLBACK_POLICY": "fallback_policy",
}


_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean: {value!r}")


def parse_duration(value) -> float:
    """Convert 30, "30", "30s", "500ms", "2m" or "1h" to seconds."""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    m = _DURATION_RE.match(str(value))
    if not m:
        raise ConfigError(f"Invalid duration: {value!r}")
    amount, unit = m.groups()
    return float(amount) * _DURATION_UNITS[unit or "s"]


@dataclass(frozen=True)
class ParserConfig:
    max_line_length: int = 100000
    max_parse_errors: int = 1000
    timeout: float = 30.0  # seconds
    enable_validation: bool = True
    enable_json: bool = True
    enable_permissive_json: bool = True
    enable_structured_regex: bool = True
    enable_grep_fallback: bool = True
    fallback_policy: str = "enhanced"

    def __post_init__(self):
        if self.max_line_length <= 0:
            raise ConfigError(f"max_line_length must be positive, got {self.max_line_length}")
        if self.max_parse_errors < 0:
            raise ConfigError(f"max_parse_errors must be >= 0, got {self.max_parse_errors}")
        if self.timeout < 0:
            raise ConfigError(f"timeout must be >= 0, got {self.timeout}")
        if self.fallback_policy not in POLICIES:
            raise ConfigError(
                f"fallback_policy must be one of {', '.join(POLICIES)}, got {self.fallback_policy!r}"
            )

    @classmethod
    def from_dict(cls, d: dict) -> "ParserConfig":
        defaults = DEFAULTS["parser"]
        try:
            return cls(
                max_line_length=int(d.get("max_line_length", defaults["max_line_length"])),
                max_parse_errors=int(d.get("max_parse_errors", defaults["max_parse_errors"])),
                timeout=parse_duration(d.get("timeout", defaults["timeout"])),
                enable_validation=_parse_bool(d.get("enable_validation", True)),
                enable_json=_parse_bool(d.get("enable_json", True)),
                enable_permissive_json=_parse_bool(d.get("enable_permissive_json", True)),
                enable_structured_regex=_parse_bool(d.get("enable_structured_regex", True)),
                enable_grep_fallback=_parse_bool(d.get("enable_grep_fallback", True)),
                fallback_policy=str(d.get("fallback_policy", defaults["fallback_policy"])).lower(),
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid parser configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override dict into base dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_yaml_config(path: str | None) -> dict:
    """Load a YAML config file. Returns empty dict if no path, a missing file, or bad YAML."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s (%s), using defaults", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(path: str | None = None, env: dict | None = None) -> ParserConfig:
    """Build ParserConfig from defaults, an optional YAML file, then env vars.

    The path can also be supplied via the ``AUDITPARSE_CONFIG`` environment variable.
    """
    env = os.environ if env is None else env
    path = path or env.get("AUDITPARSE_CONFIG")
    merged = _deep_merge(DEFAULTS, load_yaml_config(path))
    section = merged.get("parser") or {}
    if not isinstance(section, dict):
        raise ConfigError("'parser' section must be a mapping")

    for var, key in _ENV_OVERRIDES.items():
        if var in env:
            section[key] = env[var]

    return ParserConfig.from_dict(section)
