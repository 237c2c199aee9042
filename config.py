"""
Configuration and constants for the movement validator.

This module provides:
- Fixed reconciliation constants (tolerance, rounding, duplicate window)
- Support for user-configurable settings via environment variables
- Loading overrides from YAML files
"""
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# =============================================================================
# Reconciliation Constants
# =============================================================================

# Two balances closer than this are considered equal
BALANCE_TOLERANCE: Decimal = Decimal("0.001")

# All monetary comparisons are rounded to cents first
MONEY_QUANTUM: Decimal = Decimal("0.01")

# Movements with the same amount and label this close together look duplicated
DUPLICATE_WINDOW_DAYS: int = 7

# Serialized periodStart when a period has no lower bound
UNBOUNDED_PERIOD_START: str = "N/A"

# =============================================================================
# Date Formats
# =============================================================================

# Accepted input date formats, tried after ISO-8601 parsing fails
DATE_FORMATS: List[str] = [
    "%Y-%m-%d",      # YYYY-MM-DD (ISO format)
    "%Y/%m/%d",      # YYYY/MM/DD
]

# Date format used inside human-readable messages. Reason messages are
# English free text for people; clients must branch on the reason type.
DISPLAY_DATE_FORMAT: str = "%d/%m/%Y"

# =============================================================================
# Payload Field Names
# =============================================================================

PAYLOAD_FIELDS: List[str] = ["movements", "balances"]
MOVEMENT_FIELDS: List[str] = ["id", "date", "label", "amount"]
CHECKPOINT_FIELDS: List[str] = ["date", "balance"]

# Sheet names for workbook input
MOVEMENTS_SHEET: str = "Movements"
BALANCES_SHEET: str = "Balances"

# =============================================================================
# File Encodings to Try
# =============================================================================

FILE_ENCODINGS: List[str] = [
    "utf-8-sig",      # Excel CSV with BOM
    "utf-8",
    "cp1252",
    "iso-8859-1",
]

# =============================================================================
# Application Info
# =============================================================================

APP_NAME: str = "Movement Validator"
APP_VERSION: str = "1.0.0"

# Maximum accepted request body
MAX_CONTENT_LENGTH: int = 4 * 1024 * 1024

DEFAULT_MAX_MOVEMENTS: int = int(os.environ.get("MAX_MOVEMENTS", "10000"))
DEFAULT_MAX_BALANCES: int = int(os.environ.get("MAX_BALANCES", "1000"))


# =============================================================================
# Flexible Configuration System
# =============================================================================

class Config:
    """
    Configuration manager that supports:
    - Environment variables
    - Custom YAML configuration files
    - Runtime overrides
    """

    _instance: Optional["Config"] = None
    _settings: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_defaults()
            cls._instance._load_custom_config()
        return cls._instance

    def _load_defaults(self) -> None:
        """Load default settings."""
        self._settings = {
            # Request limits
            "max_movements": DEFAULT_MAX_MOVEMENTS,
            "max_balances": DEFAULT_MAX_BALANCES,

            # Heuristics
            "duplicate_window_days": int(
                os.environ.get("DUPLICATE_WINDOW_DAYS", str(DUPLICATE_WINDOW_DAYS))
            ),

            # Messages
            "display_date_format": os.environ.get("DISPLAY_DATE_FORMAT", DISPLAY_DATE_FORMAT),
            "currency_symbol": os.environ.get("CURRENCY_SYMBOL", ""),

            # File settings
            "supported_encodings": FILE_ENCODINGS,
        }

    def _load_custom_config(self) -> None:
        """Load custom configuration from YAML file if available."""
        config_paths = [
            Path.cwd() / "config.yaml",
            Path.cwd() / "config.yml",
            Path(__file__).parent / "config.yaml",
            Path.home() / ".movement_validator" / "config.yaml",
        ]

        for config_path in config_paths:
            if config_path.exists():
                with open(config_path, 'r', encoding='utf-8') as f:
                    custom_config = yaml.safe_load(f) or {}
                if not isinstance(custom_config, dict):
                    raise ValueError(f"Config file {config_path} must contain a mapping")
                self._settings.update(custom_config)
                break

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value at runtime."""
        self._settings[key] = value

    @property
    def max_movements(self) -> int:
        return int(self.get("max_movements", DEFAULT_MAX_MOVEMENTS))

    @property
    def max_balances(self) -> int:
        return int(self.get("max_balances", DEFAULT_MAX_BALANCES))

    @property
    def duplicate_window_days(self) -> int:
        return int(self.get("duplicate_window_days", DUPLICATE_WINDOW_DAYS))

    @property
    def display_date_format(self) -> str:
        return self.get("display_date_format", DISPLAY_DATE_FORMAT)

    def reload(self) -> None:
        """Reload configuration from files."""
        self._load_defaults()
        self._load_custom_config()


def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
