"""Tests for the parse orchestrator and configured parser."""

import logging
from typing import Any, List, Tuple

import pytest

from scriptable_xml import (
    Element,
    ParserConfig,
    TokenizerBackend,
    XMLSyntaxError,
    XMLTreeParser,
    find_all_in_tree,
    iter_tree,
    parse_xml,
)
from scriptable_xml.api import parser as parser_module
from scriptable_xml.shared import DiagnosticSeverity
from scriptable_xml.tokenization import EventTokenizer
from scriptable_xml.tree.builder import BUILDER_COMPONENT, TOKENIZER_COMPONENT


@pytest.fixture(params=[TokenizerBackend.EXPAT, TokenizerBackend.LXML])
def config(request: pytest.FixtureRequest) -> ParserConfig:
    return ParserConfig(tokenizer=request.param)


def _shape(element: Element) -> tuple:
    return (element.name, [_shape(child) for child in element.children])


class TestParseXML:
    """Test parse_xml against both tokenizer backends."""

    def test_structure_mirrors_input_nesting(self, config: ParserConfig) -> None:
        """Test that tag nesting round-trips."""
        root = parse_xml("<a><b><c/><d/></b><e><f><g/></f></e></a>", config)

        assert _shape(root) == (
            "a",
            [("b", [("c", []), ("d", [])]), ("e", [("f", [("g", [])])])],
        )

    def test_text_split_by_comment_is_merged(self, config: ParserConfig) -> None:
        """Test that <a>foo<!--c-->bar</a> yields a single text child."""
        root = parse_xml("<a>foo<!--c-->bar</a>", config)

        assert root.child_nodes == ["foobar"]

    def test_text_split_by_entities_is_merged(self, config: ParserConfig) -> None:
        """Test that entity references do not split text nodes."""
        root = parse_xml("<a>x &amp; y\nz</a>", config)

        assert root.child_nodes == ["x & y\nz"]

    def test_no_adjacent_text_nodes_anywhere(self, config: ParserConfig) -> None:
        """Test the merging invariant over a mixed document."""
        root = parse_xml(
            "<r>a<!--1-->b<x>c<![CDATA[d]]>e<?pi data?>f</x>g&lt;h<y/></r>", config
        )

        for node in iter_tree(root):
            if isinstance(node, Element):
                for left, right in zip(node.child_nodes, node.child_nodes[1:]):
                    assert not (isinstance(left, str) and isinstance(right, str))
        assert root.child_nodes[0] == "ab"
        assert root.children[0].child_nodes == ["cdef"]

    def test_inner_text(self, config: ParserConfig) -> None:
        """Test inner_text of <a>x<b>y</b>z</a>."""
        assert parse_xml("<a>x<b>y</b>z</a>", config).inner_text == "xyz"

    def test_children_exclude_text(self, config: ParserConfig) -> None:
        """Test children of <a>text<b/>text<c/></a>."""
        root = parse_xml("<a>text<b/>text<c/></a>", config)

        assert [child.name for child in root.children] == ["b", "c"]
        assert len(root.child_nodes) == 4

    def test_reserved_attribute_names_round_trip(self, config: ParserConfig) -> None:
        """Test attributes named like object internals."""
        root = parse_xml(
            '<a __proto__="p" __class__="c" constructor="k" items="i"/>', config
        )

        assert root.attributes == {
            "__proto__": "p",
            "__class__": "c",
            "constructor": "k",
            "items": "i",
        }
        assert isinstance(root, Element)

    def test_unclosed_tag_raises(self, config: ParserConfig) -> None:
        """Test that <a><b></a> raises instead of returning a tree."""
        with pytest.raises(XMLSyntaxError) as exc_info:
            parse_xml("<a><b></a>", config)

        error = exc_info.value
        assert isinstance(error, SyntaxError)
        assert str(error) == error.diagnostic.message
        assert error.diagnostic.severity is DiagnosticSeverity.ERROR
        assert error.line == 1

    @pytest.mark.parametrize(
        "source", ["", "   ", "<a>", "text", "<a/><b/>", "<a>\ud800</a>"]
    )
    def test_malformed_sources_raise(self, config: ParserConfig, source: str) -> None:
        """Test that no partial tree is ever returned."""
        with pytest.raises(XMLSyntaxError):
            parse_xml(source, config)

    def test_whitespace_around_root_is_ignored(self, config: ParserConfig) -> None:
        """Test prolog and trailing whitespace."""
        root = parse_xml('<?xml version="1.0"?>\n<a>x</a>\n', config)

        assert root.name == "a"
        assert root.child_nodes == ["x"]

    def test_sequential_parses_are_independent(self, config: ParserConfig) -> None:
        """Test that two parses share no nodes."""
        first = parse_xml("<a><b/>x</a>", config)
        second = parse_xml("<c><d/>y</c>", config)

        first_ids = {id(node) for node in iter_tree(first) if isinstance(node, Element)}
        second_ids = {id(node) for node in iter_tree(second) if isinstance(node, Element)}

        assert first.name == "a"
        assert second.name == "c"
        assert first_ids.isdisjoint(second_ids)
        assert first.inner_text == "x"

    def test_search_over_parsed_tree(self, config: ParserConfig) -> None:
        """Test find_all_in_tree over a parsed document."""
        root = parse_xml('<l><i n="1"/><i n="2"><i n="3"/></i></l>', config)

        found = find_all_in_tree(root, lambda node: isinstance(node, Element) and node.name == "i")

        assert [element.attributes["n"] for element in found] == ["1", "2", "3"]


class TestParseXMLWithExpat:
    """Test expat-specific orchestrator behavior."""

    def test_diagnostic_is_verbatim(self) -> None:
        """Test that the tokenizer message is carried unchanged."""
        with pytest.raises(XMLSyntaxError, match=r"^mismatched tag"):
            parse_xml("<a><b></a>")

    def test_empty_source_reports_no_element(self) -> None:
        """Test the diagnostic for an empty document."""
        with pytest.raises(XMLSyntaxError, match="no element found"):
            parse_xml("")

    def test_deeply_nested_document(self) -> None:
        """Test a document deeper than the recursion limit."""
        depth = 3000
        root = parse_xml("<n>" * depth + "x" + "</n>" * depth)

        assert root.inner_text == "x"
        assert sum(1 for _ in iter_tree(root)) == depth + 1

    def test_non_string_source_raises_type_error(self) -> None:
        """Test input type checking."""
        with pytest.raises(TypeError, match="must be str"):
            parse_xml(b"<a/>")  # type: ignore[arg-type]

    def test_logs_carry_correlation_id(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test structured log records."""
        caplog.set_level(logging.INFO, logger="scriptable_xml")

        parse_xml("<a/>", correlation_id="corr-1")

        records = [record for record in caplog.records if record.name == "scriptable_xml.api.parser"]
        assert [record.getMessage() for record in records] == ["Starting parse", "Parse completed"]
        assert all(record.correlation_id == "corr-1" for record in records)
        assert all(record.component == "parse_xml" for record in records)

    def test_failure_is_logged_as_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test failure logging."""
        caplog.set_level(logging.WARNING, logger="scriptable_xml")

        with pytest.raises(XMLSyntaxError):
            parse_xml("<a>")

        failed = [record for record in caplog.records if record.getMessage() == "Parse failed"]
        assert failed[0].levelno == logging.WARNING
        assert failed[0].diagnostic["component"] == TOKENIZER_COMPONENT
        assert set(failed[0].diagnostic["position"]) == {"line", "column"}


class TestXMLTreeParser:
    """Test the configured parser class."""

    def test_parse_uses_configuration(self) -> None:
        """Test parsing with a configured backend."""
        parser = XMLTreeParser(ParserConfig(tokenizer=TokenizerBackend.LXML))

        assert parser.parse("<a>x</a>").inner_text == "x"

    def test_statistics_track_success_and_failure(self) -> None:
        """Test usage counters."""
        parser = XMLTreeParser()
        parser.parse("<a/>")
        with pytest.raises(XMLSyntaxError):
            parser.parse("<a>")

        stats = parser.statistics
        assert stats["total_parses"] == 2
        assert stats["successful_parses"] == 1
        assert stats["failed_parses"] == 1
        assert stats["success_rate"] == 0.5

        parser.reset_statistics()
        assert parser.statistics["total_parses"] == 0
        assert parser.statistics["success_rate"] == 0.0

    def test_each_parse_returns_new_tree(self) -> None:
        """Test that a reused parser builds fresh trees."""
        parser = XMLTreeParser()

        assert parser.parse("<a/>") is not parser.parse("<a/>")

    def test_reconfigure(self) -> None:
        """Test switching configuration between parses."""
        parser = XMLTreeParser()
        parser.reconfigure(ParserConfig.lenient())

        assert parser.config.check_end_names is False
        assert parser.parse("<a/>").name == "a"


class _ScriptedTokenizer(EventTokenizer):
    """Tokenizer replaying a fixed event list instead of reading the source."""

    backend = TokenizerBackend.EXPAT

    def __init__(self, events: List[Tuple[Any, ...]], succeed: bool = True) -> None:
        super().__init__("")
        self.events = events
        self.succeed = succeed

    def _run(self) -> bool:
        for kind, *args in self.events:
            if kind == "start":
                self._emit_start(*args)
            elif kind == "end":
                self._emit_end(*args)
            elif kind == "text":
                self._emit_characters(*args)
        return self.succeed


@pytest.fixture
def scripted(monkeypatch: pytest.MonkeyPatch):
    """Make parse_xml use a tokenizer replaying the given events."""
    def install(events: List[Tuple[Any, ...]], succeed: bool = True) -> None:
        monkeypatch.setattr(
            parser_module,
            "create_tokenizer",
            lambda source, backend, correlation_id: _ScriptedTokenizer(events, succeed),
        )
    return install


class TestStructuralErrorsFromTokenizer:
    """Test that a non-conforming event stream surfaces as XMLSyntaxError."""

    @pytest.mark.parametrize(
        "events, message",
        [
            ([("end", "a")], "end of element with no open element"),
            ([("start", "a", {}), ("start", "b", {}), ("end", "a")], "mismatched end of element"),
            ([("start", "a", {}), ("end", "a"), ("start", "b", {})], "multiple root elements"),
            ([("start", "a", {}), ("text", "x")], "unclosed element 'a'"),
            ([], "no element found"),
        ],
    )
    def test_builder_error_raises(self, scripted, events, message: str) -> None:
        """Test builder diagnostics raised by the orchestrator."""
        scripted(events)

        with pytest.raises(XMLSyntaxError) as exc_info:
            parse_xml("<ignored/>")

        assert message in str(exc_info.value)
        assert exc_info.value.diagnostic.component == BUILDER_COMPONENT

    def test_scripted_well_formed_stream_builds_tree(self, scripted) -> None:
        """Test that the replaying tokenizer itself drives a normal parse."""
        scripted([("start", "a", {"k": "v"}), ("text", "x"), ("text", "y"), ("end", "a")])

        root = parse_xml("<ignored/>")

        assert root.name == "a"
        assert root.attributes == {"k": "v"}
        assert root.child_nodes == ["xy"]

    def test_lenient_config_accepts_mismatched_end(self, scripted) -> None:
        """Test that name checking can be turned off."""
        scripted([("start", "a", {}), ("end", "z")])

        assert parse_xml("<ignored/>", ParserConfig.lenient()).name == "a"

    def test_failure_without_diagnostic_raises(self, scripted) -> None:
        """Test a tokenizer that fails without calling the error callback."""
        scripted([("start", "a", {}), ("end", "a")], succeed=False)

        with pytest.raises(XMLSyntaxError, match="without a diagnostic") as exc_info:
            parse_xml("<ignored/>")

        assert exc_info.value.diagnostic.component == TOKENIZER_COMPONENT
