"""
Configuration Management

Resolves the connection parameters for an export from command-line flags,
environment variables, an optional YAML configuration file and built-in
defaults, in that order of precedence.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from decouple import AutoConfig, UndefinedValueError

from .exceptions import ConfigurationError
from .constants import ConnectionConstants, EnvironmentConstants, FileConstants, ErrorMessages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionParameters:
    """Resolved connection details for one export call"""
    scheme: str = ConnectionConstants.DEFAULT_SCHEME
    host: str = ConnectionConstants.DEFAULT_HOST
    port: str = ConnectionConstants.DEFAULT_PORT
    auth: str = ConnectionConstants.DEFAULT_AUTH


CONFIG_TEMPLATE = """# SurrealDB Export Configuration File
# Place this file at ./surreal-export.yaml, ~/.surreal-export.yaml
# or ~/.config/surreal-export.yaml, or pass it with --config.

# Connection settings (flags and SURREAL_* environment variables take precedence)
connection:
  scheme: "{scheme}"
  host: "{host}"
  port: "{port}"
  # auth: ${{SURREAL_AUTH}}  # Environment variable expansion supported
  auth: "{auth}"

# Global settings
global:
  skip_tls: false
  verbose: false
  debug: false
"""


class ConfigManager:
    """Manages configuration loading, validation and parameter resolution"""

    # Configuration schema - defines expected structure and types
    CONFIG_SCHEMA = {
        'connection': {
            'type': dict,
            'required': False,
            'fields': {
                'scheme': {'type': str, 'required': False, 'choices': ConnectionConstants.Scheme.values()},
                'host': {'type': str, 'required': False},
                'port': {'type': (str, int), 'required': False},
                'auth': {'type': str, 'required': False},
            }
        },
        'global': {
            'type': dict,
            'required': False,
            'fields': {
                'skip_tls': {'type': bool, 'required': False},
                'verbose': {'type': bool, 'required': False},
                'debug': {'type': bool, 'required': False},
            }
        },
    }

    # Connection field -> environment variable
    ENVIRONMENT_KEYS = {
        'auth': EnvironmentConstants.AUTH,
        'scheme': EnvironmentConstants.SCHEME,
        'host': EnvironmentConstants.HOST,
        'port': EnvironmentConstants.PORT,
    }

    def __init__(self, custom_config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            custom_config_path: Optional explicit path to a configuration file
        """
        self.custom_config_path = custom_config_path
        self.config_data: Dict[str, Any] = {}
        self.config_file_used: Optional[str] = None

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from the explicit path or the default locations

        Returns:
            Dict containing configuration data, empty when no file is found

        Raises:
            ConfigurationError: If an explicit file is missing, or a file
                cannot be parsed or fails validation
        """
        config_path = self._find_config_file()

        if not config_path:
            logger.debug("No configuration file found")
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration from {config_path}: {e}", cause=e)

        # Expand environment variables in config content
        config_content = os.path.expandvars(config_content)

        try:
            config_data = yaml.safe_load(config_content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {config_path}: {e}", cause=e)

        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        self._validate_against_schema(config_data, self.CONFIG_SCHEMA, "config")

        self.config_data = config_data
        self.config_file_used = config_path
        logger.info(f"Loaded configuration from: {config_path}")
        return self.config_data

    def _find_config_file(self) -> Optional[str]:
        """
        Find the configuration file to use

        Returns:
            Path to config file or None if not found

        Raises:
            ConfigurationError: If an explicit path was given but does not exist
        """
        # If custom path provided, use it exclusively
        if self.custom_config_path:
            custom_path = Path(os.path.expanduser(self.custom_config_path))
            if not custom_path.is_file():
                raise ConfigurationError(
                    ErrorMessages.CONFIG_FILE_NOT_FOUND.format(config_path=self.custom_config_path)
                )
            return str(custom_path)

        for location in FileConstants.DEFAULT_CONFIG_LOCATIONS:
            expanded_path = os.path.expanduser(location)
            if os.path.isfile(expanded_path):
                return expanded_path

        return None

    def _validate_against_schema(self, data: Dict[str, Any], schema: Dict[str, Any], path: str = "") -> None:
        """
        Validate data against schema definition

        Args:
            data: Data to validate
            schema: Schema definition
            path: Current path for error reporting

        Raises:
            ConfigurationError: If data doesn't match schema
        """
        for key, field_schema in schema.items():
            current_path = f"{path}.{key}" if path else key

            if key in data:
                value = data[key]

                # Skip None values for optional fields
                if value is None and not field_schema.get('required', False):
                    continue

                expected_type = field_schema['type']
                # bool is an int subclass; never accept it for non-bool fields
                if not isinstance(value, expected_type) or (isinstance(value, bool) and expected_type is not bool):
                    if isinstance(expected_type, tuple):
                        type_name = " or ".join(t.__name__ for t in expected_type)
                    else:
                        type_name = expected_type.__name__
                    raise ConfigurationError(f"{current_path} must be a {type_name}")

                if 'choices' in field_schema and value not in field_schema['choices']:
                    choices_str = ', '.join(f"'{c}'" for c in field_schema['choices'])
                    raise ConfigurationError(f"{current_path} must be one of: {choices_str}")

                # Recursively validate nested dictionaries
                if expected_type == dict and 'fields' in field_schema:
                    self._validate_against_schema(value, field_schema['fields'], current_path)

            elif field_schema.get('required', False):
                raise ConfigurationError(f"Required field {current_path} is missing")

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get specific configuration section

        Args:
            section: Section name (e.g., 'connection', 'global')

        Returns:
            Dict containing section data, empty dict if section doesn't exist
        """
        return self.config_data.get(section) or {}

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key

        Args:
            key: Configuration key (supports dot notation like 'global.debug')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config_data
        try:
            for k in key.split('.'):
                value = value[k]
        except (KeyError, TypeError):
            return default
        return default if value is None else value

    def _get_from_environment(self, name: str) -> Optional[str]:
        """Read one SURREAL_* variable from the environment or a .env file"""
        # .env is searched from the working directory upwards
        env_config = AutoConfig(search_path=os.getcwd())
        try:
            return env_config(name)
        except UndefinedValueError:
            return None

    def resolve_connection(self, overrides: Optional[Dict[str, Optional[str]]] = None) -> ConnectionParameters:
        """
        Build the connection parameters for an export

        Precedence per field: explicit override (command-line flag),
        environment variable, configuration file, built-in default.

        Args:
            overrides: Values given on the command line; None entries are unset

        Returns:
            ConnectionParameters: Immutable resolved parameters
        """
        overrides = overrides or {}
        file_values = self.get_section('connection')
        defaults = ConnectionParameters()

        resolved = {}
        for field_name, env_name in self.ENVIRONMENT_KEYS.items():
            value = overrides.get(field_name)
            source = "flag"
            if value is None:
                value = self._get_from_environment(env_name)
                source = "environment"
            if value is None and file_values.get(field_name) is not None:
                value = file_values[field_name]
                source = "config file"
            if value is None:
                value = getattr(defaults, field_name)
                source = "default"
            resolved[field_name] = str(value)
            if field_name != 'auth':
                logger.debug(f"Resolved {field_name}={resolved[field_name]} from {source}")

        return ConnectionParameters(**resolved)

    def get_config_template_content(self) -> str:
        """
        Generate configuration template content as string without file I/O

        Returns:
            str: YAML configuration template content
        """
        return CONFIG_TEMPLATE.format(
            scheme=ConnectionConstants.DEFAULT_SCHEME,
            host=ConnectionConstants.DEFAULT_HOST,
            port=ConnectionConstants.DEFAULT_PORT,
            auth=ConnectionConstants.DEFAULT_AUTH,
        )

    def generate_config_template(self, output_dir: str = None) -> str:
        """
        Write the configuration template file

        Args:
            output_dir: Directory to save template (optional)

        Returns:
            str: Path to generated template file

        Raises:
            ConfigurationError: If template generation fails
        """
        yaml_content = self.get_config_template_content()

        if output_dir:
            output_path = Path(output_dir)
            config_file = output_path / FileConstants.DEFAULT_CONFIG_FILE
        else:
            config_file = Path(FileConstants.DEFAULT_CONFIG_FILE)

        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'w', encoding='utf-8') as f:
                f.write(yaml_content)
        except OSError as e:
            raise ConfigurationError(f"Failed to generate configuration template: {e}", cause=e)

        logger.info(f"Configuration template generated: {config_file}")
        return str(config_file)
