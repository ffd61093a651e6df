"""Tests for path query evaluation."""

import pytest

from doxygen_md.query import DEFAULT_ENGINE, QueryEngine, QueryResult, Transform, get
from doxygen_md.shared import PathSyntaxError
from doxygen_md.tree import Node, convert_xml, make_string


@pytest.fixture
def doc():
    return Node.from_python({
        "items": [
            {"k": "x", "v": 1, "tags": ["a", "b"]},
            {"k": "y", "v": 2, "tags": ["c"]},
            {"k": "x", "v": 3},
        ],
        "name": "root",
        "3": "three",
    })


class TestFieldAccess:
    """Test field, index and count segments."""

    def test_fields_and_indexes(self, doc):
        """Test nested lookups."""
        assert get(doc, "name").as_string() == "root"
        assert get(doc, "items.1.k").as_string() == "y"
        assert get(doc, "items.1.v").as_int() == 2

    def test_numeric_segment_on_object(self, doc):
        """Test that a numeric segment falls back to an object field."""
        assert get(doc, "3").as_string() == "three"

    def test_count(self, doc):
        """Test the element count segment."""
        assert get(doc, "items.#").as_int() == 3
        assert not get(doc, "name.#").exists

    def test_misses_are_soft(self, doc):
        """Test that every kind of miss yields an empty result."""
        for path in ("missing", "items.9", "name.child", "items.#(k=z)", "@nope"):
            result = get(doc, path)
            assert not result.exists
            assert result.raw == ""
            assert result.as_string() == ""
            assert result.as_int() == 0
            assert result.array() == []

    def test_unparseable_path_is_a_miss(self, doc):
        """Test that get() does not raise on syntax errors while compile() does."""
        assert not get(doc, "items..k").exists

        with pytest.raises(PathSyntaxError):
            QueryEngine.compile("items..k")


class TestFilters:
    """Test first-match, all-match and projection segments."""

    def test_first_match(self, doc):
        """Test that #(...) picks the first matching element."""
        assert get(doc, "items.#(k=x).v").as_int() == 1

    def test_all_matches_map_the_rest(self, doc):
        """Test that #(...)# maps the remaining segments over every match."""
        assert get(doc, "items.#(k=x)#.v").raw == "[1,3]"
        assert get(doc, "items.#(k=x)#").array()[1].field("v").value == 3

    def test_all_matches_drop_misses(self, doc):
        """Test that elements lacking the mapped field are dropped."""
        assert get(doc, "items.#(k=x)#.tags").raw == '[["a","b"]]'

    def test_projection(self, doc):
        """Test # followed by more segments."""
        assert get(doc, "items.#.k").raw == '["x","y","x"]'

    def test_filter_on_non_array(self, doc):
        """Test that filters applied to scalars miss."""
        assert not get(doc, "name.#(k=x)").exists
        assert not get(doc, "name.#(k=x)#").exists

    def test_no_matches_is_an_empty_array(self, doc):
        """Test that #(...)# without matches exists and is empty."""
        result = get(doc, "items.#(k=z)#")

        assert result.exists
        assert result.raw == "[]"

    def test_operators(self, doc):
        """Test inequality and wildcard operators."""
        assert get(doc, "items.#(k!=x)#.v").raw == "[2]"
        assert get(doc, "items.#(k%?)#.v").raw == "[1,2,3]"
        assert get(doc, "items.#(k!%x)#.v").raw == "[2]"
        assert get(doc, "items.#(tags)#.v").raw == "[1,2]"

    def test_missing_field_never_matches(self, doc):
        """Test that a missing field fails even negative operators."""
        assert get(doc, "items.#(tags!=zzz)#.v").raw == "[1,2]"
        assert get(doc, "items.#(tags!%zzz)#.v").raw == "[1,2]"

    def test_number_compared_by_canonical_string(self, doc):
        """Test that numbers compare by their JSON text."""
        assert get(doc, "items.#(v=2).k").as_string() == "y"

    def test_wildcard_matches_any_array_element(self, doc):
        """Test that a wildcard may match any scalar element of an array field."""
        assert get(doc, "items.#(tags%c)#.v").raw == "[2]"
        assert get(doc, "items.#(tags=b*)#.v").raw == "[1]"

    def test_condition_with_subpath_stages(self):
        """Test that a condition path may itself contain stages."""
        doc = Node.from_python({"a": [{"b": [{"c": "1"}]}, {"b": [{"c": "2"}]}]})

        assert get(doc, "a.#(b.#.c|0=2)#").raw == '[{"b":[{"c":"2"}]}]'


class TestStages:
    """Test multi-stage paths."""

    def test_stage_restarts_on_previous_result(self, doc):
        """Test that | applies the next stage to the whole previous result."""
        assert get(doc, "items.#(k=x)#|#").as_int() == 2
        assert get(doc, "items.#(k=x)#|1.v").as_int() == 3

    def test_failed_stage_stops_evaluation(self, doc):
        """Test that a miss in an early stage is a miss overall."""
        assert not get(doc, "nothing|@this").exists


class TestStandardTransforms:
    """Test the built-in transforms."""

    def test_flatten(self):
        """Test one-level flattening."""
        doc = Node.from_python([[1, 2], [3], [4, [5]]])

        assert get(doc, "@flatten").raw == "[1,2,3,4,[5]]"
        assert get(Node.from_python("x"), "@flatten").as_string() == "x"

    def test_dedup(self):
        """Test order-preserving deduplication."""
        doc = Node.from_python(["a", "b", "a", "c", "b"])

        assert get(doc, "@dedup").raw == '["a","b","c"]'
        assert not get(Node.from_python("a"), "@dedup").exists

    def test_dedup_uses_canonical_strings(self):
        """Test that a number and its string form collapse into one."""
        doc = Node.from_python([1, "1", 2])

        assert get(doc, "@dedup").raw == '[1,2]'

    def test_this(self, doc):
        """Test the identity transform."""
        assert get(doc, "@this.name").as_string() == "root"

    def test_pretty_only_changes_serialization(self, doc):
        """Test that @pretty indents raw output without changing the node."""
        plain = get(doc, "items.1")
        pretty = get(doc, "items.1|@pretty")

        assert pretty.pretty is True
        assert pretty.node == plain.node
        assert "\n" in pretty.raw
        assert "\n" not in plain.raw

    def test_flatten_then_index(self):
        """Test a transform followed by more segments in one stage."""
        doc = Node.from_python([[1, 2], [3]])

        assert get(doc, "@flatten.2").as_int() == 3

    def test_dig_preorder(self):
        """Test that dig collects matches depth-first in document order."""
        root = convert_xml(
            b"<r><a refid='1'><b refid='2'/></a><c><d refid='3'/></c><e refid='4'/></r>"
        )

        assert get(root, "@dig:attrs.refid").raw == '["1","2","3","4"]'

    def test_dig_includes_the_start_node(self):
        """Test that the starting node is visited too."""
        doc = Node.from_python({"id": "top", "child": {"id": "inner"}})

        assert get(doc, "@dig:id").raw == '["top","inner"]'

    def test_dig_without_matches(self):
        """Test that dig with no matches is an empty array."""
        assert get(Node.from_python({"a": 1}), "@dig:zzz").raw == "[]"

    def test_dig_with_bad_argument(self):
        """Test that dig with a missing or malformed argument misses."""
        doc = Node.from_python({"a": 1})

        assert not get(doc, "@dig").exists
        assert not get(doc, "@dig:a..b").exists

    def test_dig_filter_then_flatten(self):
        """Test the find-every-element idiom."""
        root = convert_xml(
            b"<doc><s><memberdef id='a'/></s><s><x/><memberdef id='b'/></s></doc>"
        )

        result = get(root, "@dig:#(name=memberdef)#|@flatten|#.attrs.id")

        assert result.raw == '["a","b"]'


class TestEngineConfiguration:
    """Test per-engine transform tables."""

    def test_custom_transform(self, doc):
        """Test adding a transform to a derived engine."""
        upper = Transform(
            "upper",
            lambda engine, node, argument: make_string(node.as_string().upper()),
        )
        engine = DEFAULT_ENGINE.with_transforms(upper)

        assert engine.get(doc, "name|@upper").as_string() == "ROOT"
        assert not DEFAULT_ENGINE.get(doc, "name|@upper").exists

    def test_transform_argument(self, doc):
        """Test that the argument reaches the transform."""
        suffix = Transform(
            "suffix",
            lambda engine, node, argument: make_string(node.as_string() + (argument or "")),
        )
        engine = QueryEngine().with_transforms(suffix)

        assert engine.get(doc, "name|@suffix:.h").as_string() == "root.h"

    def test_empty_table(self, doc):
        """Test an engine with no transforms."""
        engine = QueryEngine(transforms={})

        assert not engine.get(doc, "@this").exists
        assert engine.get(doc, "name").as_string() == "root"


class TestQueryResult:
    """Test result views and chaining."""

    def test_iteration(self, doc):
        """Test iterating an array result."""
        results = list(get(doc, "items.#.k"))

        assert all(isinstance(result, QueryResult) for result in results)
        assert [result.as_string() for result in results] == ["x", "y", "x"]

    def test_scalar_array_view(self, doc):
        """Test that a scalar result iterates as one element."""
        assert [result.as_string() for result in get(doc, "name")] == ["root"]

    def test_chained_get(self, doc):
        """Test evaluating a path relative to a result."""
        item = get(doc, "items.#(k=y)")

        assert item.get("v").as_int() == 2
        assert not get(doc, "missing").get("v").exists

    def test_as_bool(self):
        """Test boolean views of results."""
        doc = Node.from_python({"t": "true", "f": False})

        assert get(doc, "t").as_bool() is True
        assert get(doc, "f").as_bool() is False
        assert get(doc, "none").as_bool() is False

    def test_repr(self, doc):
        """Test the result representation names the path."""
        assert "items.0.k" in repr(get(doc, "items.0.k"))
