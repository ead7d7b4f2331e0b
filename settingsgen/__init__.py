"""
settingsgen - settings tree builder

Merges hierarchical settings documents into a single, typed, conflict-free
tree that a code generator can emit settings classes from.

settingsgen provides:
  - Two XML grammars: the generic <Settings> tree and the <SettingsConfig>
    dialog layout, both driving one merge engine
  - Deterministic conflict handling: containers promoted to entries keep
    their children, duplicate entries are reported with their key path
  - Recursive <Import> directives with optional sub-tree selection,
    optional imports and cycle detection
  - Project-wide generator defaults from settingsgen.yaml

Quick Start
-----------
Validate a document:

    $ settingsgen validate settings/app.xml

Dump the resolved tree:

    $ settingsgen resolve settings/app.xml

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level build orchestration.
tree : module
    Node model, key lookup and the conflict-resolving merge.
reader : package
    XML reading for both grammars.
imports : module
    Cross-document import resolution.
config : package
    YAML generator configuration loading and merging.

Public API
----------
    from settingsgen.core import build_settings
    from settingsgen.validation import validate_document
    from settingsgen.tree import merge_entry, locate
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Settings tree builder with conflict-resolving merge and imports"

from settingsgen.core import build_settings, resolve_document
from settingsgen.document import SettingsDocument
from settingsgen.tree import EntryDescriptor, locate, merge_entry
from settingsgen.validation import validate_document

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "build_settings",
    "resolve_document",
    "validate_document",
    "SettingsDocument",
    "EntryDescriptor",
    "locate",
    "merge_entry",
]
