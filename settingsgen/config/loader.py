# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Generator configuration loading and merging for settingsgen.

Settings documents describe one settings class each. Project-wide choices
that would otherwise be repeated in every document (the backend accessor,
a class prefix, common type aliases) live in a generator configuration
file instead.

Configuration Layers:
    1. **Built-in defaults**
       - No prefix, no backend, no type mappings

    2. **Project file** (settingsgen.yaml)
       - Found by walking upward from the settings document's directory
       - Optional; the nearest file wins

    3. **Explicit file** (--config FILE)
       - Always required if given
       - Overrides the project file

Merge Behavior:
    The loader performs deep merging with "last wins" semantics:

    - **Dicts**: Recursively merged (keys from overlay override base)
    - **Lists**: Completely replaced (NOT appended/extended)
    - **Scalars**: Overwritten (strings, numbers, booleans)

Recognized Keys:
    defaults:
      prefix: EXPORT_MACRO
      backend:
        class: Some::SettingsAccessor
        params:
          - {type: QString, value: "settings.ini", as_str: true}
    type_mappings:
      range: "QPair<int, int>"

Values from the settings document always take precedence over these.

Example:
    Basic usage:
        ```python
        from pathlib import Path
        from settingsgen.config import load_generator_config

        cfg = load_generator_config(Path("settings/app.xml"))
        print(cfg["defaults"]["prefix"])
        ```

"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from settingsgen.exceptions import ConfigError
from settingsgen.logging import Logger, get_global_logger

__all__ = ["CONFIG_FILENAME", "DEFAULT_CONFIG", "load_generator_config"]

CONFIG_FILENAME = "settingsgen.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "defaults": {
        "prefix": None,
        "backend": None,
    },
    "type_mappings": {},
}

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """Loads a YAML configuration file.

    An empty file counts as an empty mapping.

    Raises:
        ConfigError: When the file does not exist, cannot be parsed, or its
            top level is not a mapping.
    """
    if not p.exists():
        raise ConfigError(f"config file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"error parsing YAML: {p}: {err}") from err
    except OSError as err:
        raise ConfigError(f"cannot read config file: {p}: {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Discovery
# -------------------------------


def _find_project_config(start_dir: Path) -> Path | None:
    """Walk upward from start_dir looking for settingsgen.yaml."""
    for parent in [start_dir, *start_dir.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _check_shape(cfg: dict[str, Any], origin: str) -> None:
    """Reject values of the wrong kind for the recognized keys."""
    if not isinstance(cfg.get("defaults"), dict):
        raise ConfigError(f"'defaults' must be a mapping ({origin})")
    if not isinstance(cfg.get("type_mappings"), dict):
        raise ConfigError(f"'type_mappings' must be a mapping ({origin})")
    backend = cfg["defaults"].get("backend")
    if backend is not None:
        if not isinstance(backend, dict) or not backend.get("class"):
            raise ConfigError(f"'defaults.backend' needs a 'class' ({origin})")
        params = backend.get("params", [])
        if not isinstance(params, list):
            raise ConfigError(f"'defaults.backend.params' must be a list ({origin})")
        for index, param in enumerate(params):
            if not isinstance(param, dict) or not param.get("type"):
                raise ConfigError(
                    f"'defaults.backend.params[{index}]' must be a mapping "
                    f"with a 'type' ({origin})"
                )


# -------------------------------
# Public API
# -------------------------------


def load_generator_config(
    document_path: Path | None = None,
    *,
    config_path: Path | None = None,
    logger: Logger | None = None,
) -> dict[str, Any]:
    """Load and merge the generator configuration.

    Steps
      1) Start from the built-in defaults.
      2) If document_path is given, walk upward from its directory for
         settingsgen.yaml and merge it on top.
      3) If config_path is given, load it (must exist) and merge on top.

    Returns
      The merged configuration dict.

    Raises
      ConfigError on YAML errors, non-mapping files, a missing explicit
      config file, or recognized keys of the wrong kind.
    """
    if logger is None:
        logger = get_global_logger()

    merged = copy.deepcopy(DEFAULT_CONFIG)
    origin = "built-in defaults"

    if document_path is not None:
        project_config = _find_project_config(document_path.resolve().parent)
        if project_config is not None:
            logger.verbose("CONFIG", f"Loading: {project_config}")
            merged = _deep_merge_dicts(merged, _load_yaml_file(project_config))
            origin = str(project_config)

    if config_path is not None:
        logger.verbose("CONFIG", f"Loading: {config_path}")
        merged = _deep_merge_dicts(merged, _load_yaml_file(config_path))
        origin = str(config_path)

    _check_shape(merged, origin)
    logger.debug("CONFIG", f"Effective configuration: {merged}")
    return merged
