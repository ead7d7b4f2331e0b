"""
Tests for settingsgen.reader.config module.

Tests the <SettingsConfig> grammar including:
- Parsing into the Category / Section / Group / Entry model
- Nesting rules per level
- Normalization into the shared merge engine
- Equivalence with the native grammar
"""

from __future__ import annotations

import pytest

from settingsgen.dump import key_paths, tree_to_data
from settingsgen.exceptions import DuplicateEntryError, MalformedDocumentError
from settingsgen.reader import read_source
from settingsgen.reader.config import (
    ConfigCategory,
    ConfigEntry,
    ConfigGroup,
    ConfigSection,
    normalize_config,
    parse_settings_config,
)
from settingsgen.reader.xml_source import open_document
from settingsgen.tree import ContentGroup, EntryNode

CONFIG_XML = """
    <SettingsConfig>
        <Category title="General" icon="general.svg">
            <Section title="Network">
                <Group title="Proxy">
                    <Entry key="network/proxy/host" type="QString" default="localhost" trdefault="true"/>
                    <Entry key="network/proxy" type="bool" title="Use proxy"/>
                </Group>
            </Section>
            <Entry key="network/home" type="QUrl"/>
        </Category>
        <Entry key="name" type="QString">
            <Default>anonymous</Default>
            <SearchKey>user</SearchKey>
        </Entry>
    </SettingsConfig>
"""

NATIVE_XML = """
    <Settings>
        <Node key="network">
            <Entry key="proxy" type="bool">
                <Entry key="host" type="QString" default="localhost" tr="true"/>
            </Entry>
            <Entry key="home" type="QUrl"/>
        </Node>
        <Entry key="name" type="QString" default="anonymous"/>
    </Settings>
"""


class TestParseSettingsConfig:
    """Tests for parsing the config grammar."""

    def test_parses_levels(self, write_document):
        """Test that each level becomes its own config type."""
        path = write_document("config.xml", CONFIG_XML)

        config = parse_settings_config(open_document(path))

        category, entry = config.content
        assert isinstance(category, ConfigCategory)
        assert isinstance(entry, ConfigEntry)
        section, home = category.content
        assert isinstance(section, ConfigSection)
        assert isinstance(home, ConfigEntry)
        group = section.content[0]
        assert isinstance(group, ConfigGroup)
        assert [e.key for e in group.content] == ["network/proxy/host", "network/proxy"]
        assert group.content[0].tr is True
        assert entry.default == "anonymous"

    @pytest.mark.parametrize(
        "body, parent",
        [
            ("<Group><Section/></Group>", "<Group>"),
            ("<Section><Category/></Section>", "<Section>"),
            ("<Category><Category/></Category>", "<Category>"),
            ("<Group><Node key='a'/></Group>", "<Group>"),
            ("<Node key='a'/>", "<SettingsConfig>"),
            ("<Category><Import>x.xml</Import></Category>", "<Category>"),
            ("<Entry key='a' type='int'><Entry key='b' type='int'/></Entry>", "<Entry>"),
        ],
    )
    def test_rejects_wrong_nesting(self, write_document, body, parent):
        """Test that elements outside their allowed level are rejected."""
        path = write_document("config.xml", f"<SettingsConfig>\n{body}\n</SettingsConfig>\n")

        with pytest.raises(MalformedDocumentError) as exc_info:
            read_source(path)

        assert f"in {parent}" in str(exc_info.value)
        assert exc_info.value.location.startswith(f"{path}:2:")

    def test_entry_requires_type(self, write_document):
        """Test that config entries need a type."""
        path = write_document("config.xml", '<SettingsConfig><Entry key="a"/></SettingsConfig>')

        with pytest.raises(MalformedDocumentError, match="'type'"):
            read_source(path)

    def test_second_default_rejected(self, write_document):
        """Test that an entry may carry only one <Default> element."""
        path = write_document(
            "config.xml",
            """
            <SettingsConfig>
                <Entry key="a" type="int">
                    <Default>1</Default>
                    <Default>2</Default>
                </Entry>
            </SettingsConfig>
            """,
        )

        with pytest.raises(MalformedDocumentError, match="only one <Default>") as exc_info:
            read_source(path)

        assert exc_info.value.location.startswith(f"{path}:4:")

    def test_default_attribute_wins(self, write_document):
        """Test that the default attribute takes precedence over <Default>."""
        path = write_document(
            "config.xml",
            """
            <SettingsConfig>
                <Entry key="a" type="int" default="7"><Default>1</Default></Entry>
            </SettingsConfig>
            """,
        )

        config = parse_settings_config(open_document(path))

        assert config.content[0].default == "7"


class TestNormalizeConfig:
    """Tests for merging config documents into a tree."""

    def test_entries_merge_by_key_path(self, write_document, import_context):
        """Test that unkeyed levels add nothing to the key path."""
        path = write_document("config.xml", CONFIG_XML)
        target = ContentGroup()

        normalize_config(
            parse_settings_config(open_document(path)), target, path, import_context
        )

        assert key_paths(target) == [
            "network",
            "network/proxy",
            "network/proxy/host",
            "network/home",
            "name",
        ]

    def test_promotion_through_config(self, write_document):
        """Test that a later entry promotes the container an earlier one created."""
        path = write_document("config.xml", CONFIG_XML)

        document = read_source(path)

        network = document.root.content_nodes[0]
        proxy = network.content.content_nodes[0]
        assert isinstance(proxy, EntryNode)
        assert proxy.type == "bool"
        assert proxy.content.content_nodes[0].key == "host"

    def test_keyed_levels_prefix_paths(self, write_document):
        """Test that keyed categories, sections and groups prefix their entries."""
        path = write_document(
            "config.xml",
            """
            <SettingsConfig>
                <Category key="ui">
                    <Section key="editor">
                        <Group title="Font">
                            <Entry key="font/size" type="int"/>
                        </Group>
                    </Section>
                </Category>
            </SettingsConfig>
            """,
        )

        document = read_source(path)

        assert key_paths(document.root) == [
            "ui",
            "ui/editor",
            "ui/editor/font",
            "ui/editor/font/size",
        ]

    def test_duplicate_entries_across_levels(self, write_document):
        """Test that the same key in two groups is a duplicate."""
        path = write_document(
            "config.xml",
            """
            <SettingsConfig>
                <Group><Entry key="a/b" type="int"/></Group>
                <Section><Entry key="a/b" type="int"/></Section>
            </SettingsConfig>
            """,
        )

        with pytest.raises(DuplicateEntryError) as exc_info:
            read_source(path)

        assert exc_info.value.key_path == "a/b"

    def test_config_document_has_no_metadata(self, write_document):
        """Test that config documents leave document metadata empty."""
        path = write_document("config.xml", CONFIG_XML)

        document = read_source(path)

        assert document.name is None
        assert document.backend is None
        assert document.type_mappings == {}


class TestGrammarEquivalence:
    """Tests that both grammars produce the same tree."""

    def test_same_tree_from_both_grammars(self, write_document):
        """Test that equivalent documents produce identical trees."""
        config_path = write_document("config.xml", CONFIG_XML)
        native_path = write_document("native.xml", NATIVE_XML)

        from_config = read_source(config_path)
        from_native = read_source(native_path)

        assert key_paths(from_config.root) == key_paths(from_native.root)
        assert tree_to_data(from_config.root) == tree_to_data(from_native.root)
