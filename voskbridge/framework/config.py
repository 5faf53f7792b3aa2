# VoskBridge Project
# Copyright (C) 2025 Rubén Gómez - khromalabs.org
#
# This file is dual-licensed under:
# 1. GNU Lesser General Public License v3.0 (LGPL-3.0)
#    (See the included LICENSE_LGPL3.txt file or look into
#    <https://www.gnu.org/licenses/lgpl-3.0.html> for details)
# 2. Commercial license
#    (Contact: rgomez@khromalabs.org for licensing options)
#
# You may use, distribute and modify this code under the terms of either license.
# This notice must be preserved in all copies or substantial portions of the code.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# Lesser General Public License for more details.

import copy
import json
import logging
import os
from pathlib import Path

import yaml
from jsonschema import Draft7Validator

from voskbridge.framework.platform_utils import get_default_config_paths

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).parent.parent / "resources"


def _merge_defaults(target, defaults):
    """Fill keys missing from target with the values found in defaults"""
    for key, value in defaults.items():
        if key not in target:
            target[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(target[key], dict):
            _merge_defaults(target[key], value)
    return target


class ConfigManager:
    """Manages binding configuration following platform-specific standards"""

    def __init__(self):
        self.config = {}
        self.config_file_path = None
        self.last_modified_time = 0
        self.validation_errors = []
        self.initial_config_valid = True
        self.load_config()

    def _get_config_paths(self):
        """Get platform-specific configuration paths"""
        # First check environment variable
        env_config_path = os.environ.get("VOSKBRIDGE_CONFIG")
        if env_config_path:
            return [Path(env_config_path)]

        return get_default_config_paths()

    def _get_default_config_path(self):
        """Get the path to the default configuration template"""
        path = RESOURCES_DIR / "voskbridge.yaml.defaults"
        return path if path.exists() else None

    def _get_schema_path(self):
        """Get the path to the configuration schema"""
        path = RESOURCES_DIR / "config.schema.json"
        return path if path.exists() else None

    def _load_defaults(self):
        default_path = self._get_default_config_path()
        if not default_path:
            logger.warning("Default configuration template not found.")
            return {}
        with open(default_path) as f:
            return yaml.safe_load(f) or {}

    def _validate(self, user_config, default_config):
        """Validate user_config against the schema.

        Sections reported invalid are replaced with their default values.
        Returns the corrected configuration.
        """
        schema_path = self._get_schema_path()
        if not schema_path:
            logger.warning("Schema not found, skipping validation.")
            return user_config

        with open(schema_path) as f:
            schema = json.load(f)
        validator = Draft7Validator(schema)
        errors = sorted(
            validator.iter_errors(user_config),
            key=lambda e: list(map(str, e.path)),
        )
        if not errors:
            return user_config

        self.initial_config_valid = False
        self.validation_errors = [
            f"{'.'.join(map(str, e.path)) or 'root'}: {e.message}"
            for e in errors
        ]
        logger.error(
            "Configuration validation failed. Restoring invalid sections"
            " from defaults."
        )
        for error in self.validation_errors:
            logger.error(f" - {error}")

        def get_nested(d, path):
            for key in path:
                d = d[key]
            return d

        def set_nested(d, path, value):
            for key in path[:-1]:
                d = d.setdefault(key, {})
            d[path[-1]] = value

        corrected_config = copy.deepcopy(user_config)
        for error_path in {tuple(e.path) for e in errors}:
            path = list(error_path)
            if not path:
                return copy.deepcopy(default_config)
            try:
                default_value = get_nested(default_config, path)
            except (KeyError, IndexError, TypeError):
                # No default for an unknown key, drop it
                parent = get_nested(corrected_config, path[:-1])
                parent.pop(path[-1], None)
                continue
            set_nested(corrected_config, path, copy.deepcopy(default_value))

        return corrected_config

    def load_config(self, force=False):
        """Load config from the first existing location, falling back to defaults

        Args:
            force: If True, forces reload even if file hasn't changed
        """
        default_config = self._load_defaults()

        for config_path in self._get_config_paths():
            if not config_path.exists():
                continue
            if self.config and not force and not self.needs_load():
                logger.debug("Avoiding configuration reload")
                return

            with open(config_path) as f:
                user_config = yaml.safe_load(f) or {}
            if not isinstance(user_config, dict):
                raise ValueError(
                    f"Configuration file {config_path} must contain a mapping"
                )

            self.validation_errors = []
            self.initial_config_valid = True
            user_config = self._validate(user_config, default_config)
            self.config = _merge_defaults(user_config, default_config)
            self.config_file_path = config_path
            self.last_modified_time = os.path.getmtime(config_path)
            logger.debug(f"Configuration loaded from: {config_path}")
            return

        # No user configuration, run with the bundled defaults
        self.config = default_config
        self.config_file_path = None
        logger.debug("No configuration file found, using defaults")

    def get(self, key_path: str, default=None):
        """Get a config value using dot notation"""
        # Check if the config file has been modified and reload if necessary
        if self.needs_load():
            logger.info("Configuration file has changed, reloading.")
            self.load_config(force=True)

        keys = key_path.split(".")
        value = self.config

        for key in keys:
            try:
                value = value[key]
            except (KeyError, TypeError):
                return default

        return default if value is None else value

    def set(self, key_path: str, value):
        """Override a config value in memory using dot notation"""
        keys = key_path.split(".")
        target = self.config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    def needs_load(self):
        """Check if the config file has been modified since last load"""
        if not self.config_file_path or not os.path.exists(
            self.config_file_path
        ):
            return False
        return (
            os.path.getmtime(self.config_file_path) > self.last_modified_time
        )

    def get_log_directory(self):
        """Get the log directory from the environment or the config.

        Returns None when neither names one, meaning console logging only.
        """
        env_log_path = os.environ.get("VOSKBRIDGE_LOGS")
        if env_log_path:
            return Path(os.path.expanduser(env_log_path))

        configured = self.get("logging.directory")
        if configured:
            return Path(os.path.expanduser(configured))

        return None


# Global config instance
config = ConfigManager()
