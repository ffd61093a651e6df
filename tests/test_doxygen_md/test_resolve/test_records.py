"""Tests for definition records and the definitions artifact."""

import json

import pytest

from doxygen_md.resolve import (
    DefinitionKind,
    DefinitionRecord,
    load_definitions,
    write_definitions,
)
from doxygen_md.shared import OutputError
from doxygen_md.tree import Node, convert_xml

MEMBER = convert_xml(
    b'<memberdef kind="function" id="f1"><name>neco_start</name>'
    b'<location file="neco.h" line="42"/></memberdef>'
)
GROUP = convert_xml(b'<compounddef kind="group" id="group__g"><compoundname>g</compoundname></compounddef>')


class TestDefinitionRecord:
    """Test record validation and derived values."""

    def test_definition_property(self):
        """Test that the definition is whichever side is present."""
        member = DefinitionRecord("neco_start", DefinitionKind.FUNCTION, "f1", header_def=MEMBER)
        group = DefinitionRecord("g", DefinitionKind.GROUP, "group__g", compound_def=GROUP)

        assert member.definition is MEMBER
        assert group.definition is GROUP

    @pytest.mark.parametrize("kwargs,message", [
        ({"name": "", "header_def": MEMBER}, "name cannot be empty"),
        ({"name": "x"}, "exactly one"),
        ({"name": "x", "header_def": MEMBER, "compound_def": GROUP}, "exactly one"),
    ])
    def test_validation(self, kwargs, message):
        """Test that malformed records are rejected."""
        with pytest.raises(ValueError, match=message):
            DefinitionRecord(kind=DefinitionKind.FUNCTION, refid="f1", **kwargs)

    def test_group_needs_compound_def(self):
        """Test that a group cannot carry a member definition."""
        with pytest.raises(ValueError, match="groups carry a compound definition"):
            DefinitionRecord("g", DefinitionKind.GROUP, "group__g", header_def=MEMBER)

    def test_source_line(self):
        """Test the location line, defaulting to zero."""
        member = DefinitionRecord("neco_start", DefinitionKind.FUNCTION, "f1", header_def=MEMBER)
        group = DefinitionRecord("g", DefinitionKind.GROUP, "group__g", compound_def=GROUP)

        assert member.source_line == 42
        assert group.source_line == 0

    def test_records_are_immutable(self):
        """Test that records cannot be modified after construction."""
        record = DefinitionRecord("neco_start", DefinitionKind.FUNCTION, "f1", header_def=MEMBER)

        with pytest.raises(AttributeError):
            record.name = "other"


class TestSerialization:
    """Test the artifact form of records."""

    def test_to_dict_keys(self):
        """Test the artifact keys and their order."""
        record = DefinitionRecord(
            "neco_start", DefinitionKind.FUNCTION, "f1", header_def=MEMBER, show_full_layout=True
        )

        data = record.to_dict()

        assert list(data) == ["name", "kind", "refid", "headerDef", "showFullLayout"]
        assert data["kind"] == "function"
        assert data["showFullLayout"] is True
        assert data["headerDef"]["attrs"]["id"] == "f1"

    def test_compound_key(self):
        """Test that compounds are written as compoundDef."""
        data = DefinitionRecord("g", DefinitionKind.GROUP, "group__g", compound_def=GROUP).to_dict()

        assert "compoundDef" in data
        assert "headerDef" not in data

    def test_from_dict(self):
        """Test rebuilding a record from its artifact form."""
        record = DefinitionRecord("g", DefinitionKind.GROUP, "group__g", compound_def=GROUP)

        assert DefinitionRecord.from_dict(record.to_dict()) == record

    def test_from_node_errors(self):
        """Test that incomplete artifact entries are rejected."""
        with pytest.raises(ValueError):
            DefinitionRecord.from_node(Node.from_python([]))
        with pytest.raises(ValueError):
            DefinitionRecord.from_dict({"name": "x", "kind": "slot", "refid": "r", "headerDef": {}})
        with pytest.raises(ValueError):
            DefinitionRecord.from_dict({"name": "x", "kind": "function", "refid": "r"})


class TestArtifact:
    """Test writing and reading the definitions artifact."""

    def test_write_and_load(self, tmp_path):
        """Test that records survive a write and read, in order."""
        # Arrange
        records = [
            DefinitionRecord("g", DefinitionKind.GROUP, "group__g", compound_def=GROUP),
            DefinitionRecord("neco_start", DefinitionKind.FUNCTION, "f1", header_def=MEMBER),
        ]

        # Act
        path = write_definitions(records, tmp_path / "out" / "defs.json")
        loaded = load_definitions(path)

        # Assert
        assert loaded == records
        assert [item["name"] for item in json.loads(path.read_text(encoding="utf-8"))] == [
            "g",
            "neco_start",
        ]

    def test_write_error(self, tmp_path):
        """Test that an unwritable path raises OutputError."""
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(OutputError, match="Cannot write definitions artifact"):
            write_definitions([], blocker / "defs.json")

    def test_load_errors(self, tmp_path):
        """Test that unreadable or malformed artifacts raise OutputError."""
        not_array = tmp_path / "object.json"
        not_array.write_text("{}", encoding="utf-8")
        bad_record = tmp_path / "bad.json"
        bad_record.write_text('[{"name": "x"}]', encoding="utf-8")

        with pytest.raises(OutputError, match="Cannot read"):
            load_definitions(tmp_path / "missing.json")
        with pytest.raises(OutputError, match="not a JSON array"):
            load_definitions(not_array)
        with pytest.raises(OutputError, match="Invalid definition record"):
            load_definitions(bad_record)
