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

"""Core orchestration for settingsgen.

build_settings() runs one complete build for a top-level settings document:

1. Load the generator configuration (settingsgen.yaml layers)
2. Read the document, resolving its imports recursively and merging every
   Node and Entry into one tree
3. Fill in document metadata the document left out (name, prefix,
   backend, type mappings) from the defaults

The result is a conflict-free SettingsDocument ready for an emission layer.
Any fatal error propagates as a SettingsGenError subclass before anything
is returned, so callers never see a partial tree.

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from settingsgen.core import build_settings

        document = build_settings(Path("settings.xml"), default_name="AppSettings")
        print(document.name, len(document.root))
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any

from settingsgen.config import load_generator_config
from settingsgen.document import Backend, BackendParam, SettingsDocument
from settingsgen.dump import count_nodes, document_to_data, dump_yaml, write_atomic
from settingsgen.imports import ImportContext
from settingsgen.logging import Logger, get_global_logger
from settingsgen.reader import read_source
from settingsgen.results import ResolveResult

__all__ = ["build_settings", "resolve_document"]


def _backend_from_config(raw: dict[str, Any]) -> Backend:
    return Backend(
        class_name=str(raw["class"]),
        params=[
            BackendParam(
                type=str(param["type"]),
                value=str(param.get("value", "")),
                as_str=bool(param.get("as_str", False)),
            )
            for param in raw.get("params", [])
        ],
    )


def _apply_config_defaults(document: SettingsDocument, config: dict[str, Any]) -> None:
    """Fill metadata the document did not set. Document values win."""
    defaults = config.get("defaults", {})
    if document.prefix is None and defaults.get("prefix"):
        document.prefix = str(defaults["prefix"])
    if document.backend is None and defaults.get("backend"):
        document.backend = _backend_from_config(defaults["backend"])
    for alias, concrete in config.get("type_mappings", {}).items():
        document.type_mappings.setdefault(str(alias), str(concrete))


def build_settings(
    source: Path | IO[bytes],
    *,
    default_name: str | None = None,
    config: dict[str, Any] | None = None,
    logger: Logger | None = None,
) -> SettingsDocument:
    """Build the merged settings tree for a top-level document.

    Args:
        source: Path of the settings document, or an open binary stream.
        default_name: Name used when the document has none, typically the
            base name of the output artifact. Falls back to the document's
            file stem.
        config: Pre-loaded generator configuration. Loaded from
            settingsgen.yaml layers when omitted.
        logger: Logger for progress and warnings. Uses the global logger
            when omitted.

    Returns:
        The fully merged, conflict-free document.

    Raises:
        DocumentIOError: The document or a required import cannot be read.
        MalformedDocumentError: Invalid input, or an import cycle.
        DuplicateEntryError: Two entries collide at the same key path.
        ConfigError: The generator configuration is invalid.
    """
    if logger is None:
        logger = get_global_logger()

    path = source if isinstance(source, Path) else None
    if config is None:
        config = load_generator_config(path, logger=logger)

    context = ImportContext(logger=logger)
    document = read_source(source, context)

    if not document.name:
        if default_name:
            document.name = default_name
        elif path is not None:
            document.name = path.stem
    _apply_config_defaults(document, config)

    logger.verbose(
        "BUILD",
        f"Built '{document.name}' from {context.documents_read} document(s), "
        f"{len(context.skipped_imports)} optional import(s) skipped",
    )
    return document


def resolve_document(
    document_path: Path,
    *,
    output_path: Path | None = None,
    name: str | None = None,
    config_path: Path | None = None,
    logger: Logger | None = None,
) -> ResolveResult:
    """Build a document and dump its resolved tree as YAML.

    The dump is produced only after the whole build succeeded. With an
    output_path it is written atomically, so a failed run never leaves a
    complete-looking file behind.

    Args:
        document_path: Path of the top-level settings document.
        output_path: File to write the YAML dump to; None keeps it in the
            result only.
        name: Settings name when the document has none. Defaults to the
            output file's stem, then the document's stem.
        config_path: Explicit generator configuration file.
        logger: Logger for progress and warnings.

    Returns:
        A ResolveResult with the dump text and tree statistics.

    Raises:
        SettingsGenError: Any build error from build_settings().
        OutputWriteError: The dump cannot be written to output_path.
    """
    if logger is None:
        logger = get_global_logger()

    config = load_generator_config(document_path, config_path=config_path, logger=logger)
    if name is None and output_path is not None:
        name = output_path.stem
    document = build_settings(
        document_path, default_name=name, config=config, logger=logger
    )

    text = dump_yaml(document_to_data(document))
    if output_path is not None:
        write_atomic(output_path, text)
        logger.verbose("BUILD", f"Wrote {output_path}")

    node_count, entry_count = count_nodes(document.root)
    return ResolveResult(
        name=document.name,
        text=text,
        output_path=output_path,
        node_count=node_count,
        entry_count=entry_count,
    )
