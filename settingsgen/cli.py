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

"""Command-line interface for settingsgen.

Commands:

    validate: Read and merge a settings document, report problems
    resolve: Print or write the resolved settings tree as YAML

Example:
    Validate a document:
        ```bash
        $ settingsgen validate settings/app.xml
        ```

    Write the resolved tree:
        ```bash
        $ settingsgen resolve settings/app.xml --output build/AppSettings.yaml
        ```

Exit Codes:

- 0: Success
- 1: Error (unreadable document, malformed input, duplicate entry, config,
  unwritable output)

Note:
    Errors are reported as "Error [<Kind>]: <message>", where the message
    carries the offending key path or source location. Verbose mode also
    shows the full traceback.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
import traceback

from settingsgen.core import resolve_document
from settingsgen.exceptions import SettingsGenError
from settingsgen.logging import get_logger, set_global_logger
from settingsgen.validation import validate_document


def _report_error(err: SettingsGenError, show_traceback: bool) -> None:
    print(f"Error [{type(err).__name__}]: {err}", file=sys.stderr)
    if show_traceback:
        traceback.print_exc()


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'settingsgen validate' command.

    Args:
        args: Parsed command-line arguments containing the document path,
            optional config path and verbose flag.

    Returns:
        Exit code (0 for a valid document, 1 for invalid).

    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    document_path = Path(args.document).resolve()
    print(f"Validating document: {document_path}")
    print()

    result = validate_document(
        document_path,
        config_path=Path(args.config) if args.config else None,
    )

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Document:    {result.document_path}")
    print(f"Status:      {result.status.upper()}")
    print(f"Nodes:       {result.node_count}")
    print(f"Entries:     {result.entry_count}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Document is valid!")
        return 0
    print()
    print(f"[FAILED] Document validation failed with {len(result.errors)} error(s).")
    return 1


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handler for 'settingsgen resolve' command.

    Builds the merged tree and prints it as YAML, or writes it atomically
    to --output.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    document_path = Path(args.document).resolve()
    output_path = Path(args.output).resolve() if args.output else None

    try:
        result = resolve_document(
            document_path,
            output_path=output_path,
            name=args.name,
            config_path=Path(args.config) if args.config else None,
            logger=logger,
        )
    except SettingsGenError as err:
        _report_error(err, args.verbose or args.debug)
        return 1

    if output_path is None:
        sys.stdout.write(result.text)
        return 0

    print(f"Settings:  {result.name}")
    print(f"Nodes:     {result.node_count}")
    print(f"Entries:   {result.entry_count}")
    print(f"Output:    {result.output_path}")
    print()
    print("[SUCCESS] Settings tree resolved successfully!")
    return 0


def _program_version() -> str:
    try:
        return version("settingsgen")
    except PackageNotFoundError:
        from settingsgen import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="settingsgen",
        description="settingsgen - merge settings tree documents into one typed tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"settingsgen {_program_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate a settings document and its imports",
        description="Read and merge a settings document, reporting conflicts and errors.",
    )
    parser_validate.add_argument("document", help="Path to the settings XML document")
    parser_validate.add_argument(
        "--config",
        default=None,
        help="Generator configuration file (default: nearest settingsgen.yaml)",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'resolve' command
    parser_resolve = subparsers.add_parser(
        "resolve",
        help="Print or write the resolved settings tree as YAML",
        description="Merge a settings document and dump the resulting tree as YAML.",
    )
    parser_resolve.add_argument("document", help="Path to the settings XML document")
    parser_resolve.add_argument(
        "-o",
        "--output",
        default=None,
        help="File to write the YAML tree to (default: stdout)",
    )
    parser_resolve.add_argument(
        "--name",
        default=None,
        help="Settings name if the document has none (default: output or document base name)",
    )
    parser_resolve.add_argument(
        "--config",
        default=None,
        help="Generator configuration file (default: nearest settingsgen.yaml)",
    )
    parser_resolve.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_resolve.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_resolve.set_defaults(func=cmd_resolve)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the settingsgen CLI.

    This function is registered as the 'settingsgen' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
