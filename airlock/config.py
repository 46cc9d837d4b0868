"""Config loading for Airlock.

Reads `.airlock/config.yaml` (or `~/.airlock/config.yaml`).
Raises SystemExit on parse errors, a missing `version` field, or a catalog
that cannot be built. If no config file is found, returns default values
(safe to run without config).

Config search order:
  1. `config_path` argument (if provided: for testing or explicit override)
  2. AIRLOCK_CONFIG environment variable (if set)
  3. `.airlock/config.yaml` (working directory)
  4. `~/.airlock/config.yaml` (home directory)

Environment variable overrides:
  AIRLOCK_LOG_LEVEL - overrides logging.level
  AIRLOCK_CONFIG    - sets an explicit config file path to try first

Example::

    version: 1
    scanner:
      disabled: [email]
      custom_detectors:
        - key: slackToken
          display_name: Slack Token
          description: Slack token detected
          pattern: 'xox[baprs]-[A-Za-z0-9-]{10,}'
    gate:
      scan_deadline_ms: 250
    logging:
      level: INFO
      format: json
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from airlock.constants import (
    SCAN_DEADLINE_S,
    SUPPORTED_CONFIG_VERSION,
    VALID_LOG_FORMATS,
)
from airlock.models.scan import Confidence, Detector
from airlock.scanner.catalog import Catalog
from airlock.scanner.definitions import DEFAULT_CATALOG, DEFAULT_DETECTORS
from airlock.scanner.errors import CatalogError
from airlock.utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_VERSIONS: frozenset[int] = frozenset({SUPPORTED_CONFIG_VERSION})

VALID_LOG_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)

DEFAULT_CONFIG_PATHS = [
    ".airlock/config.yaml",
    os.path.expanduser("~/.airlock/config.yaml"),
]

_DEFAULT_KEYS: frozenset[str] = frozenset(d.key for d in DEFAULT_DETECTORS)


def _config_error(msg: str) -> SystemExit:
    print(f"CONFIG ERROR: {msg}", file=sys.stderr)
    return SystemExit(1)


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class ScannerConfig:
    """Catalog customisation.

    disabled:         Default detector keys to drop. Order of the rest is kept.
    custom_detectors: Extra detectors, appended after the defaults in file order.
    """

    disabled: list[str] = field(default_factory=list)
    custom_detectors: list[Detector] = field(default_factory=list)


@dataclass
class GateConfig:
    """Transfer gate settings."""

    scan_deadline_ms: int = round(SCAN_DEADLINE_S * 1000)

    @property
    def scan_deadline_s(self) -> float:
        return self.scan_deadline_ms / 1000


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"  # "json" | "console"


@dataclass
class Config:
    """Root configuration object populated from .airlock/config.yaml.

    All fields have safe defaults; Airlock can start without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    gate: GateConfig = field(default_factory=GateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Optional[str] = None
    _catalog: Optional[Catalog] = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def defaults(cls) -> "Config":
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On malformed scanner, gate or logging sections.
        """
        # ── Scanner ───────────────────────────────────────────────────────────
        scanner_raw = _section(raw, "scanner")

        disabled = scanner_raw.get("disabled") or []
        if not isinstance(disabled, list) or not all(isinstance(k, str) for k in disabled):
            raise _config_error("scanner.disabled must be a list of detector keys.")
        unknown = sorted(set(disabled) - _DEFAULT_KEYS)
        if unknown:
            raise _config_error(
                f"scanner.disabled names unknown detectors: {unknown}. "
                f"Known detectors: {sorted(_DEFAULT_KEYS)}."
            )

        custom_raw = scanner_raw.get("custom_detectors") or []
        if not isinstance(custom_raw, list):
            raise _config_error("scanner.custom_detectors must be a list.")
        custom = [_parse_custom_detector(entry, i) for i, entry in enumerate(custom_raw)]

        # ── Gate ──────────────────────────────────────────────────────────────
        gate_raw = _section(raw, "gate")
        deadline_ms = gate_raw.get("scan_deadline_ms", GateConfig.scan_deadline_ms)
        if isinstance(deadline_ms, bool) or not isinstance(deadline_ms, int) or deadline_ms <= 0:
            raise _config_error(
                f"gate.scan_deadline_ms must be a positive integer, got {deadline_ms!r}."
            )

        # ── Logging ───────────────────────────────────────────────────────────
        logging_raw = _section(raw, "logging")
        level = str(logging_raw.get("level", "INFO")).upper()
        if level not in VALID_LOG_LEVELS:
            raise _config_error(
                f"Invalid logging.level: '{level}'. Supported values: {sorted(VALID_LOG_LEVELS)}."
            )
        log_format = logging_raw.get("format", "json")
        if log_format not in VALID_LOG_FORMATS:
            raise _config_error(
                f"Invalid logging.format: '{log_format}'. "
                f"Supported values: {sorted(VALID_LOG_FORMATS)}."
            )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            scanner=ScannerConfig(disabled=list(disabled), custom_detectors=custom),
            gate=GateConfig(scan_deadline_ms=deadline_ms),
            logging=LoggingConfig(level=level, format=log_format),
            path=path,
        )

    def build_catalog(self) -> Catalog:
        """Frozen catalog: defaults minus disabled, then custom detectors.

        Returns ``DEFAULT_CATALOG`` itself when nothing is customised. The
        catalog is built on first call and reused afterwards, so custom
        patterns are compiled once per Config.

        Raises:
            DuplicateKeyError:   a custom key collides with another detector.
            InvalidPatternError: a custom pattern does not compile.
        """
        if self._catalog is not None:
            return self._catalog

        if not self.scanner.disabled and not self.scanner.custom_detectors:
            self._catalog = DEFAULT_CATALOG
        else:
            disabled = set(self.scanner.disabled)
            detectors = [d for d in DEFAULT_DETECTORS if d.key not in disabled]
            detectors.extend(self.scanner.custom_detectors)
            self._catalog = Catalog.from_detectors(detectors)
        return self._catalog

    def gate_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``guard_transfer_async()`` under this config.

        Usage:
            decision = await guard_transfer_async(text, **config.gate_kwargs())
        """
        return {
            "catalog": self.build_catalog(),
            "timeout_s": self.gate.scan_deadline_s,
        }


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise _config_error(f"'{name}' must be a mapping.")
    return section


def _parse_custom_detector(entry: Any, index: int) -> Detector:
    where = f"scanner.custom_detectors[{index}]"
    if not isinstance(entry, dict):
        raise _config_error(f"{where} must be a mapping.")

    key = entry.get("key")
    pattern = entry.get("pattern")
    if not isinstance(key, str) or not key:
        raise _config_error(f"{where} is missing the required 'key' field.")
    if not isinstance(pattern, str) or not pattern:
        raise _config_error(f"{where} ({key}) is missing the required 'pattern' field.")

    confidence_raw = str(entry.get("confidence", Confidence.HIGH.value)).upper()
    try:
        confidence = Confidence(confidence_raw)
    except ValueError:
        raise _config_error(
            f"{where} ({key}) has invalid confidence '{confidence_raw}'. "
            f"Supported values: {[c.value for c in Confidence]}."
        )

    return Detector(
        key=key,
        display_name=str(entry.get("display_name", key)),
        description=str(entry.get("description", f"{key} pattern matched")),
        pattern=pattern,
        confidence=confidence,
    )


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate Airlock configuration.

    If no file is found at any search path, returns default Config (not an error).
    If a file is found but invalid, writes the error to stderr and raises SystemExit(1).

    The catalog described by the file is built once here so that a bad custom
    pattern or key collision stops startup instead of surfacing mid-scan.
    The built catalog is kept on the Config and returned by ``build_catalog()``.

    Raises:
        SystemExit(1): On YAML parse error, missing or unsupported ``version``,
                       malformed sections, an invalid catalog, or an invalid
                       ``AIRLOCK_LOG_LEVEL``.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("AIRLOCK_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    if found_path is None:
        logger.debug("No config file found, using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    logger.debug("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise _config_error(
            f"Failed to parse {found_path}: {exc}\n"
            "Airlock refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
    except OSError as exc:
        raise _config_error(f"Could not read {found_path}: {exc}")

    if not isinstance(raw, dict):
        if raw is None:
            raise _config_error(
                f"{found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        raise _config_error(
            f"{found_path} is not a valid YAML mapping.\n"
            "The config file must be a YAML dictionary at the top level."
        )

    version = raw.get("version")
    if version is None:
        raise _config_error(
            f"{found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
    if version not in SUPPORTED_VERSIONS:
        raise _config_error(
            f"Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = Config.from_dict(raw, path=found_path)

    try:
        catalog = config.build_catalog()
    except CatalogError as exc:
        raise _config_error(f"{found_path}: {exc}")

    _apply_env_overrides(config)

    logger.debug(
        "Config loaded",
        path=found_path,
        version=config.version,
        detectors=len(catalog),
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Raises:
        SystemExit(1): If AIRLOCK_LOG_LEVEL is set to an unknown level.
    """
    env_level = os.environ.get("AIRLOCK_LOG_LEVEL")
    if env_level is not None:
        level = env_level.upper()
        if level not in VALID_LOG_LEVELS:
            raise _config_error(
                f"AIRLOCK_LOG_LEVEL environment variable is not a valid level: '{env_level}'"
            )
        config.logging.level = level
