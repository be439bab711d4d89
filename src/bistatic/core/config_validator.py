"""
Configuration validation for the bistatic Doppler core.
Provides JSON schema validation for YAML configuration files.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import jsonschema
import yaml

logger = logging.getLogger(__name__)


class ConfigValidator:
    """Validates configuration files against JSON schemas."""

    def __init__(self) -> None:
        """Initialize the configuration validator."""
        self.schemas = self._load_schemas()

    def _load_schemas(self) -> Dict[str, Dict[str, Any]]:
        """Load JSON schema definitions for configuration validation."""

        main_schema = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": {
                # Application settings
                "APP_NAME": {"type": "string", "minLength": 1},
                "APP_VERSION": {"type": "string", "pattern": r"^\d+\.\d+\.\d+$"},
                "APP_ENV": {"type": "string", "enum": ["development", "production", "testing"]},
                # Station geometry
                "STATION_RX_LATITUDE": {"type": "number", "minimum": -90, "maximum": 90},
                "STATION_RX_LONGITUDE": {"type": "number"},
                "STATION_RX_ALTITUDE_M": {"type": "number", "minimum": -500, "maximum": 10000},
                "STATION_TX_LATITUDE": {"type": "number", "minimum": -90, "maximum": 90},
                "STATION_TX_LONGITUDE": {"type": "number"},
                "STATION_TX_ALTITUDE_M": {"type": "number", "minimum": -500, "maximum": 10000},
                "STATION_CARRIER_FREQ_MHZ": {"type": "number", "exclusiveMinimum": 0},
                # Estimators
                "ESTIMATOR_HISTORY_CAPACITY": {"type": "integer", "minimum": 2, "maximum": 1000},
                "ESTIMATOR_SMOOTHING_WINDOW": {"type": "integer", "minimum": 1, "maximum": 1000},
                "ESTIMATOR_PREFER_VELOCITY": {"type": "boolean"},
                # Cross-check thresholds
                "VALIDATION_PASS_THRESHOLD_PCT": {
                    "type": "number",
                    "exclusiveMinimum": 0,
                    "maximum": 100,
                },
                "VALIDATION_WARN_THRESHOLD_PCT": {
                    "type": "number",
                    "exclusiveMinimum": 0,
                    "maximum": 100,
                },
                # Logging Configuration
                "LOG_LEVEL": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
                "LOG_FORMAT": {"type": "string", "minLength": 10},
                "LOG_FILE_PATH": {"type": "string"},
                "LOG_FILE_MAX_BYTES": {
                    "type": "integer",
                    "minimum": 1048576,
                    "maximum": 1073741824,
                },
                "LOG_FILE_BACKUP_COUNT": {"type": "integer", "minimum": 1, "maximum": 50},
                "LOG_ENABLE_CONSOLE": {"type": "boolean"},
                "LOG_ENABLE_FILE": {"type": "boolean"},
            },
            "required": [
                "STATION_RX_LATITUDE",
                "STATION_RX_LONGITUDE",
                "STATION_TX_LATITUDE",
                "STATION_TX_LONGITUDE",
                "STATION_CARRIER_FREQ_MHZ",
            ],
            "additionalProperties": True,  # Allow additional config keys
        }

        return {"main": main_schema}

    def validate_yaml_file(self, file_path: Path) -> tuple[bool, list[str]]:
        """
        Validate a YAML configuration file against its schema.

        Args:
            file_path: Path to the YAML file to validate

        Returns:
            Tuple of (is_valid, error_messages)
        """
        if not file_path.exists():
            return False, [f"Configuration file not found: {file_path}"]

        with open(file_path) as f:
            try:
                config_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                line_info = "unknown"
                if hasattr(e, "problem_mark") and e.problem_mark:
                    line_info = str(e.problem_mark.line + 1)
                return False, [f"YAML syntax error at line {line_info}: {e}"]

        is_valid, errors = self.validate_config_dict(config_data or {})
        if is_valid:
            logger.info(f"Configuration file validation passed: {file_path}")
        return is_valid, errors

    def validate_config_dict(self, config_data: Dict[str, Any]) -> tuple[bool, list[str]]:
        """
        Validate configuration data dictionary against schema.

        Args:
            config_data: Configuration dictionary to validate

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        try:
            schema = self.schemas["main"]
            jsonschema.validate(config_data, schema)

        except jsonschema.ValidationError as e:
            error_path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
            errors.append(f"Validation error at {error_path}: {e.message}")
            return False, errors

        except jsonschema.SchemaError as e:
            errors.append(f"Schema error: {e.message}")
            return False, errors

        return self.validate_parameter_ranges(config_data)

    def validate_parameter_ranges(self, config_data: Dict[str, Any]) -> tuple[bool, list[str]]:
        """
        Perform additional parameter range validation beyond schema.

        Args:
            config_data: Configuration dictionary to validate

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if (
            "VALIDATION_PASS_THRESHOLD_PCT" in config_data
            and "VALIDATION_WARN_THRESHOLD_PCT" in config_data
        ):
            if (
                config_data["VALIDATION_PASS_THRESHOLD_PCT"]
                >= config_data["VALIDATION_WARN_THRESHOLD_PCT"]
            ):
                errors.append(
                    "VALIDATION_PASS_THRESHOLD_PCT must be below VALIDATION_WARN_THRESHOLD_PCT"
                )

        if (
            "ESTIMATOR_SMOOTHING_WINDOW" in config_data
            and "ESTIMATOR_HISTORY_CAPACITY" in config_data
        ):
            if (
                config_data["ESTIMATOR_SMOOTHING_WINDOW"]
                > config_data["ESTIMATOR_HISTORY_CAPACITY"]
            ):
                errors.append(
                    "ESTIMATOR_SMOOTHING_WINDOW must not exceed ESTIMATOR_HISTORY_CAPACITY"
                )

        return len(errors) == 0, errors
