"""Terminator configuration from YAML file.

Configuration is opt-in: the default Terminator uses TerminatorConfig()
defaults and reads no file or environment on its own. Hosts that want file
based settings call load_config() and pass the result to Terminator or
set_config().

Configuration structure:
    terminator:
      base_reservation_bytes: 102400
      default_priority: 5
      late_registration: error     # error | run | drop
      ignore_interrupts: true
      report_to_stdout: true

Environment variables ARE supported using ${VAR_NAME} and
${VAR_NAME:-default} syntax in YAML files.
"""

import json
import logging
import os
import re
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from terminator.registry import DEFAULT_PRIORITY
from terminator.reservation import DEFAULT_BASE_RESERVATION_BYTES
from terminator.types import LateRegistrationPolicy

logger = logging.getLogger(__name__)

_LATE_REGISTRATION_VALUES = [policy.value for policy in LateRegistrationPolicy]


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    # Expanded env vars arrive as strings
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"terminator: {key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"terminator: {key} must be an integer, got {value!r}") from None


@dataclass
class TerminatorConfig:
    """Shutdown registry settings.

    All sizes in bytes.
    """

    base_reservation_bytes: int = DEFAULT_BASE_RESERVATION_BYTES
    default_priority: int = DEFAULT_PRIORITY
    late_registration: str = LateRegistrationPolicy.ERROR.value
    ignore_interrupts: bool = True
    report_to_stdout: bool = True

    @property
    def late_registration_policy(self) -> LateRegistrationPolicy:
        return LateRegistrationPolicy(self.late_registration)

    @staticmethod
    def _validate_min(value: int, key: str, min_value: int) -> None:
        if value < min_value:
            raise ValueError(f"terminator: {key} must be >= {min_value}, got {value}")

    @staticmethod
    def _validate_enum(value: Any, key: str, valid_values: List[Any]) -> None:
        if value not in valid_values:
            raise ValueError(
                f"terminator: {key} must be one of {valid_values}, got '{value}'"
            )

    def validate(self) -> None:
        """Validate configuration for correctness and constraints."""
        self._validate_min(self.base_reservation_bytes, "base_reservation_bytes", 0)
        self._validate_min(self.default_priority, "default_priority", 0)
        self._validate_enum(
            self.late_registration, "late_registration", _LATE_REGISTRATION_VALUES
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_from_dict(data: Dict[str, Any]) -> TerminatorConfig:
    """Build and validate a TerminatorConfig from a ``terminator:`` section."""
    defaults = TerminatorConfig()
    config = TerminatorConfig(
        base_reservation_bytes=_as_int(
            data.get("base_reservation_bytes", defaults.base_reservation_bytes),
            "base_reservation_bytes",
        ),
        default_priority=_as_int(
            data.get("default_priority", defaults.default_priority),
            "default_priority",
        ),
        late_registration=str(
            data.get("late_registration", defaults.late_registration)
        ).lower(),
        ignore_interrupts=_as_bool(
            data.get("ignore_interrupts", defaults.ignore_interrupts)
        ),
        report_to_stdout=_as_bool(
            data.get("report_to_stdout", defaults.report_to_stdout)
        ),
    )
    config.validate()
    return config


def load_config(
    config_path: Path,
    overrides: Optional[Dict[str, Any]] = None,
) -> TerminatorConfig:
    """Load terminator configuration from a YAML file.

    Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the file has no ``terminator:`` section or fails validation
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from file: {config_path}")
    yaml_data = _expand_env_vars(load_yaml(config_path))

    if "terminator" not in yaml_data:
        raise ValueError("Invalid config file: missing 'terminator:' section")

    section = yaml_data["terminator"] or {}
    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        section = _deep_merge(section, overrides)

    config = config_from_dict(section)
    logger.debug("Configuration loaded: %s", config.to_dict())
    return config


_config: Optional[TerminatorConfig] = None


def get_config() -> TerminatorConfig:
    """Get the singleton config instance (defaults unless set_config() was called)."""
    global _config
    if _config is None:
        _config = TerminatorConfig()
    return _config


def set_config(config: TerminatorConfig) -> None:
    """Set the singleton config instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the singleton config instance back to defaults on next get_config()."""
    global _config
    _config = None


def _cli_main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for config validation and debugging."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Terminator Configuration Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate configuration
  python -m terminator.config --config terminator.yaml --validate

  # JSON output for automation
  python -m terminator.config --config terminator.yaml --validate --json
        """,
    )
    parser.add_argument("--config", type=Path, required=True, help="Path to YAML config file")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and print the resolved settings",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format instead of human-readable",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path.cwd() / ".env",
        help="Environment file loaded before ${VAR} expansion (default: ./.env)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    # Existing environment variables take precedence over the file
    load_dotenv(args.env_file)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if not args.validate:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        if args.json:
            print(json.dumps({"validation": {"passed": False, "error": str(e)}}, indent=2))
        else:
            print(f"Configuration invalid: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps({"validation": {"passed": True}, "config": config.to_dict()}, indent=2))
    else:
        print("Configuration valid")
        for key, value in config.to_dict().items():
            print(f"  {key}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(_cli_main())
