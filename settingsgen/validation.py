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

"""Settings document validation.

Validation runs a complete build (imports included) and reports the
outcome instead of raising, which gives quick feedback while editing
documents and in CI pre-checks.

Validation Checks:

- Every document in the import graph can be read and is well-formed XML
- Root elements and nesting follow their grammar
- Required attributes are present and booleans parse
- No two entries collide at the same key path
- Imports do not form a cycle
- The generator configuration (settingsgen.yaml) is valid

Example:
    Validate a document and handle results:
        ```python
        from pathlib import Path
        from settingsgen.validation import validate_document

        result = validate_document(Path("settings.xml"))
        if result.status == "valid":
            print(f"{result.entry_count} entries")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from settingsgen.config import load_generator_config
from settingsgen.core import build_settings
from settingsgen.dump import count_nodes
from settingsgen.exceptions import SettingsGenError
from settingsgen.logging import RecordingLogger
from settingsgen.results import ValidationResult

__all__ = ["validate_document"]


def validate_document(
    document_path: Path,
    *,
    config: dict[str, Any] | None = None,
    config_path: Path | None = None,
) -> ValidationResult:
    """Validate a settings document without writing anything.

    Args:
        document_path: Path to the top-level settings document.
        config: Pre-loaded generator configuration, if any.
        config_path: Explicit generator configuration file, if any.

    Returns:
        A ValidationResult. Errors carry the kind and message of the first
        fatal problem; warnings list skipped optional imports.
    """
    logger = RecordingLogger()
    try:
        if config is None and config_path is not None:
            config = load_generator_config(
                document_path, config_path=config_path, logger=logger
            )
        document = build_settings(document_path, config=config, logger=logger)
    except SettingsGenError as err:
        return ValidationResult(
            status="invalid",
            errors=[f"{type(err).__name__}: {err}"],
            warnings=list(logger.warnings),
            node_count=0,
            entry_count=0,
            document_path=str(document_path),
        )

    node_count, entry_count = count_nodes(document.root)
    return ValidationResult(
        status="valid",
        errors=[],
        warnings=list(logger.warnings),
        node_count=node_count,
        entry_count=entry_count,
        document_path=str(document_path),
    )
