"""
Configuration management for the bistatic Doppler core.
Loads configuration from YAML files and environment variables.
"""

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.bistatic.core.config_validator import ConfigValidator
from src.bistatic.core.exceptions import ConfigurationError
from src.bistatic.models.schemas import GeodeticPosition, StationGeometry

logger = logging.getLogger(__name__)

ENV_PREFIX = "BISTATIC_"


@dataclass
class AppConfig:
    """Application configuration."""

    APP_NAME: str = "bistatic-doppler"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"


@dataclass
class StationConfig:
    """Receiver / illuminator geometry and carrier."""

    STATION_RX_LATITUDE: float = -35.0
    STATION_RX_LONGITUDE: float = 138.7
    STATION_RX_ALTITUDE_M: float = 50.0
    STATION_TX_LATITUDE: float = -35.0
    STATION_TX_LONGITUDE: float = 138.6
    STATION_TX_ALTITUDE_M: float = 50.0
    STATION_CARRIER_FREQ_MHZ: float = 204.64

    def rx_position(self) -> GeodeticPosition:
        return GeodeticPosition(
            self.STATION_RX_LATITUDE, self.STATION_RX_LONGITUDE, self.STATION_RX_ALTITUDE_M
        )

    def tx_position(self) -> GeodeticPosition:
        return GeodeticPosition(
            self.STATION_TX_LATITUDE, self.STATION_TX_LONGITUDE, self.STATION_TX_ALTITUDE_M
        )

    def to_geometry(self) -> StationGeometry:
        """Convert the configured stations to ECEF once for the session."""
        return StationGeometry.from_geodetic(self.rx_position(), self.tx_position())


@dataclass
class EstimatorConfig:
    """Doppler estimator configuration."""

    ESTIMATOR_HISTORY_CAPACITY: int = 10
    ESTIMATOR_SMOOTHING_WINDOW: int = 1
    ESTIMATOR_PREFER_VELOCITY: bool = True


@dataclass
class ValidationConfig:
    """Cross-check classification thresholds (percent relative difference)."""

    VALIDATION_PASS_THRESHOLD_PCT: float = 1.0
    VALIDATION_WARN_THRESHOLD_PCT: float = 5.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE_PATH: str = "logs/bistatic.log"
    LOG_FILE_MAX_BYTES: int = 10485760
    LOG_FILE_BACKUP_COUNT: int = 5
    LOG_ENABLE_CONSOLE: bool = True
    LOG_ENABLE_FILE: bool = False


@dataclass
class Config:
    """Main configuration container."""

    app: AppConfig = field(default_factory=AppConfig)
    station: StationConfig = field(default_factory=StationConfig)
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app": self.app.__dict__,
            "station": self.station.__dict__,
            "estimator": self.estimator.__dict__,
            "validation": self.validation.__dict__,
            "logging": self.logging.__dict__,
        }


class ConfigLoader:
    """Configuration loader that handles YAML files and environment variables."""

    def __init__(self, config_path: str | Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to configuration file. Defaults to profile-based selection.
        """
        if config_path is None:
            # Get project root (4 levels up from this file)
            project_root = Path(__file__).parent.parent.parent.parent

            profile = os.getenv(f"{ENV_PREFIX}CONFIG_PROFILE", "default")
            if profile in ["development", "dev"]:
                config_file = "development.yaml"
            elif profile in ["production", "prod"]:
                config_file = "production.yaml"
            else:
                config_file = "default.yaml"

            self.config_path = project_root / "config" / config_file
            logger.info(f"Selected configuration profile: {profile} -> {config_file}")
        else:
            self.config_path = Path(config_path)
        self.config = Config()

    def _section_for(self, key: str) -> Any | None:
        """Map a flat configuration key to its section by prefix."""
        if key.startswith("APP_"):
            return self.config.app
        elif key.startswith("STATION_"):
            return self.config.station
        elif key.startswith("ESTIMATOR_"):
            return self.config.estimator
        elif key.startswith("VALIDATION_"):
            return self.config.validation
        elif key.startswith("LOG_"):
            return self.config.logging
        return None

    def load(self) -> Config:
        """
        Load configuration from file and environment variables.

        Environment variables override file configuration.

        Returns:
            Loaded configuration object

        Raises:
            ConfigurationError: If the file or the final values are invalid
        """
        config_data = self._load_with_inheritance()

        if config_data:
            validator = ConfigValidator()
            is_valid, errors = validator.validate_config_dict(config_data)
            if not is_valid:
                error_msg = "Configuration validation failed:\n" + "\n".join(
                    f"  - {error}" for error in errors
                )
                logger.error(f"Failed to load configuration from {self.config_path}: {error_msg}")
                raise ConfigurationError(error_msg)

            self._apply_yaml_config(config_data)
            logger.info(f"Loaded and validated configuration from {self.config_path}")
        else:
            logger.warning(f"Configuration file {self.config_path} not found, using defaults")

        self._apply_env_overrides()
        self._validate_config()

        return self.config

    def _load_with_inheritance(self) -> dict[str, Any] | None:
        """
        Load configuration with inheritance from base configuration.

        Returns:
            Merged configuration dictionary or None if file not found
        """
        if not self.config_path.exists():
            return None

        try:
            with open(self.config_path) as f:
                config_data = yaml.safe_load(f) or {}

            # Profile-specific settings override default.yaml
            if self.config_path.name != "default.yaml":
                base_config_path = self.config_path.parent / "default.yaml"
                if base_config_path.exists():
                    with open(base_config_path) as f:
                        base_config = yaml.safe_load(f) or {}
                    logger.info(f"Inherited base configuration from {base_config_path}")
                    return {**base_config, **config_data}

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        return config_data

    def _apply_yaml_config(self, yaml_config: dict[str, Any]) -> None:
        """Apply configuration from YAML dictionary with proper type conversion."""
        for key, value in yaml_config.items():
            section = self._section_for(key)
            if section is None:
                logger.warning(f"Ignoring configuration key without a section: {key}")
                continue
            self._set_config_value(section, key, str(value))

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            config_key = env_key[len(ENV_PREFIX) :]
            section = self._section_for(config_key)
            if section is not None:
                self._set_config_value(section, config_key, env_value)

    def _set_config_value(self, config_section: Any, key: str, value: str) -> None:
        """
        Set configuration value with appropriate type conversion.

        Args:
            config_section: Configuration section object
            key: Configuration key
            value: String value from file or environment

        Raises:
            ConfigurationError: If the value cannot be converted to the key's type
        """
        if not hasattr(config_section, key):
            logger.warning(f"Unknown configuration key: {key}")
            return

        current_value = getattr(config_section, key)

        converted_value: Any
        try:
            if isinstance(current_value, bool):
                converted_value = value.lower() in ("true", "1", "yes", "on")
            elif isinstance(current_value, int):
                converted_value = int(value)
            elif isinstance(current_value, float):
                converted_value = float(value)
            else:
                converted_value = value
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {key}: {value}") from e

        setattr(config_section, key, converted_value)
        logger.debug(f"Set {key} = {converted_value}")

    def _validate_config(self) -> None:
        """Validate cross-field constraints after all loading is complete."""
        station = self.config.station
        estimator = self.config.estimator
        validation = self.config.validation

        for name in ("STATION_RX_LATITUDE", "STATION_TX_LATITUDE"):
            latitude = getattr(station, name)
            if not -90.0 <= latitude <= 90.0:
                raise ConfigurationError(f"{name} must be within [-90, 90], got {latitude}")

        if not math.isfinite(station.STATION_CARRIER_FREQ_MHZ) or (
            station.STATION_CARRIER_FREQ_MHZ <= 0
        ):
            raise ConfigurationError(
                f"STATION_CARRIER_FREQ_MHZ must be positive, got "
                f"{station.STATION_CARRIER_FREQ_MHZ}"
            )

        if estimator.ESTIMATOR_HISTORY_CAPACITY < 2:
            raise ConfigurationError(
                f"ESTIMATOR_HISTORY_CAPACITY must be >= 2, got "
                f"{estimator.ESTIMATOR_HISTORY_CAPACITY}"
            )

        if not 1 <= estimator.ESTIMATOR_SMOOTHING_WINDOW <= estimator.ESTIMATOR_HISTORY_CAPACITY:
            raise ConfigurationError(
                "ESTIMATOR_SMOOTHING_WINDOW must be between 1 and ESTIMATOR_HISTORY_CAPACITY, "
                f"got {estimator.ESTIMATOR_SMOOTHING_WINDOW}"
            )

        if not (
            0
            < validation.VALIDATION_PASS_THRESHOLD_PCT
            < validation.VALIDATION_WARN_THRESHOLD_PCT
        ):
            raise ConfigurationError(
                "Validation thresholds must satisfy 0 < pass < warn: "
                f"pass({validation.VALIDATION_PASS_THRESHOLD_PCT}) "
                f"warn({validation.VALIDATION_WARN_THRESHOLD_PCT})"
            )


# Global configuration instance
_config: Config | None = None


def get_config(config_path: str | Path | None = None) -> Config:
    """
    Get configuration instance (singleton pattern).

    Args:
        config_path: Optional path to configuration file

    Returns:
        Configuration object
    """
    global _config

    if _config is None:
        loader = ConfigLoader(config_path)
        _config = loader.load()

    return _config


def reload_config(config_path: str | Path | None = None) -> Config:
    """
    Reload configuration from file and environment.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Reloaded configuration object
    """
    global _config

    loader = ConfigLoader(config_path)
    _config = loader.load()

    return _config
