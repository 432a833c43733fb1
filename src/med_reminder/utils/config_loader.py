# src/med_reminder/utils/config_loader.py
# -*- coding: utf-8 -*-

"""
Loads YAML/JSON configuration files and resolves ${env:VAR} references.
"""

import json
import logging
import os
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class ConfigLoader:
    REF_PATTERN = re.compile(r"\$\{([^:}]+):([^}]+)\}")

    def __init__(self, config_path: str):
        self.config_path = config_path
        file_extension = os.path.splitext(config_path)[1].lower()

        try:
            with open(config_path, "r") as file:
                if file_extension in (".yaml", ".yml"):
                    self.config = yaml.safe_load(file)
                elif file_extension == ".json":
                    self.config = json.load(file)
                else:
                    raise ValueError(
                        f"Unsupported configuration file format: {file_extension}"
                    )
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(
                f"Error parsing configuration file {config_path}: {e}"
            ) from e

        if self.config is None:
            # Empty file
            self.config = {}
        elif not isinstance(self.config, dict):
            raise ValueError(
                f"Top level of {config_path} must be a mapping, got {type(self.config).__name__}"
            )
        else:
            self.config = self._resolve_references(self.config)

    def _resolve_references(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: self._resolve_references(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._resolve_references(i) for i in data]
        if isinstance(data, str):
            resolved_string = data
            while True:
                match = self.REF_PATTERN.search(resolved_string)
                if not match:
                    break

                ref_type, ref_key = match.groups()
                if ref_type != "env":
                    logger.warning(
                        f"Unsupported reference type '{ref_type}' in '{resolved_string}'. Skipping."
                    )
                    break

                ref_value = os.getenv(ref_key)
                if ref_value is None:
                    logger.warning(
                        f"Environment variable '{ref_key}' not found, replacing with empty string."
                    )
                    ref_value = ""
                resolved_string = resolved_string.replace(match.group(0), ref_value)

            return resolved_string

        return data

    def get(self, key: str, default=None):
        """Dotted-path lookup, e.g. ``loader.get("check.grace_minutes", 30)``."""
        val = self.config
        for k in key.split("."):
            if not isinstance(val, dict):
                return default
            val = val.get(k)
            if val is None:
                return default
        return val
