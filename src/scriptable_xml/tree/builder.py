"""Event-driven tree construction.

:class:`XMLTreeBuilder` consumes the element start, element end, character
data and parse error events emitted by a tokenizer and reduces them into a
single :class:`~scriptable_xml.tree.element.Element` tree. It keeps the
stack of currently open elements (the parse path) and a pending error slot.
A builder serves exactly one parse.
"""

from typing import Dict, List, Mapping, Optional

from scriptable_xml.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)

from .element import Element

TOKENIZER_COMPONENT = "tokenizer"
BUILDER_COMPONENT = "xml_tree_builder"


class XMLTreeBuilder:
    """Reducer from parse events to an element tree.

    The event methods never raise. Problems are recorded as
    :class:`DiagnosticEntry` values; once an error is recorded the tree is
    no longer mutated, and :meth:`close` returns None.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration; defaults to ``ParserConfig()``
            correlation_id: Optional correlation ID, overriding the config's
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, BUILDER_COMPONENT)

        self.root: Optional[Element] = None
        self.path: List[Element] = []
        self.error: Optional[DiagnosticEntry] = None
        self.diagnostics: List[DiagnosticEntry] = []

        self.elements_created = 0
        self.text_events = 0
        self.text_merges = 0

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self.path)

    @property
    def failed(self) -> bool:
        """Check whether an error has been recorded."""
        return self.error is not None

    def start_element(self, name: str, attributes: Optional[Mapping[str, str]] = None) -> None:
        """Open a new element as the last child of the innermost open element."""
        if self.failed:
            return

        element = Element(name, attributes)
        if self.path:
            self.path[-1].child_nodes.append(element)
        elif self.root is None:
            self.root = element
        else:
            self._structure_error(
                f"multiple root elements: found {name!r} after {self.root.name!r} was closed",
                {"element": name},
            )
            return

        self.path.append(element)
        self.elements_created += 1

    def end_element(self, name: Optional[str] = None) -> None:
        """Close the innermost open element.

        Args:
            name: Tag name reported by the tokenizer, checked against the
                innermost open element when ``config.check_end_names`` is set
        """
        if self.failed:
            return

        if not self.path:
            self._structure_error(
                "end of element with no open element",
                {"element": name},
            )
            return

        current = self.path[-1]
        if name is not None and self.config.check_end_names and name != current.name:
            self._structure_error(
                f"mismatched end of element: expected {current.name!r}, got {name!r}",
                {"expected": current.name, "element": name},
            )
            return

        self.path.pop()

    def character_data(self, text: str) -> None:
        """Append text to the innermost open element, merging adjacent runs."""
        if self.failed or not text:
            return

        self.text_events += 1
        if not self.path:
            # Whitespace around the root element reaches here from some tokenizers.
            self.logger.debug(
                "Dropping character data outside the root element",
                extra={"length": len(text)},
            )
            return

        child_nodes = self.path[-1].child_nodes
        if child_nodes and isinstance(child_nodes[-1], str):
            child_nodes[-1] += text
            self.text_merges += 1
        else:
            child_nodes.append(text)

    def parse_error(self, message: str, position: Optional[Dict[str, int]] = None) -> None:
        """Record a tokenizer diagnostic.

        The first tokenizer diagnostic becomes :attr:`error`, replacing any
        structural error recorded before it.
        """
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.ERROR,
            message=message,
            component=TOKENIZER_COMPONENT,
            position=position,
            correlation_id=self.correlation_id,
        )
        self.diagnostics.append(entry)
        if self.error is None or self.error.component != TOKENIZER_COMPONENT:
            self.error = entry

        if self.config.log_diagnostics:
            self.logger.warning(
                "Tokenizer reported a parse error",
                extra={"diagnostic": message, "position": position},
            )

    def close(self) -> Optional[Element]:
        """Finish the event stream.

        Returns:
            The root element if the events described exactly one complete
            element, otherwise None with :attr:`error` set
        """
        if self.failed:
            return None

        if self.root is None:
            self._structure_error("no element found")
            return None

        if self.path:
            self._structure_error(
                f"unclosed element {self.path[-1].name!r}",
                {"open_elements": [element.name for element in self.path]},
            )
            return None

        self.logger.debug(
            "Tree building completed",
            extra={
                "element_count": self.elements_created,
                "text_events": self.text_events,
                "text_merges": self.text_merges,
            },
        )
        return self.root

    def _structure_error(self, message: str, details: Optional[Dict[str, object]] = None) -> None:
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.ERROR,
            message=message,
            component=BUILDER_COMPONENT,
            details=details,
            correlation_id=self.correlation_id,
        )
        self.diagnostics.append(entry)
        if self.error is None:
            self.error = entry

        if self.config.log_diagnostics:
            self.logger.warning(
                "Structural error while building tree",
                extra={"diagnostic": message, "depth": self.depth},
            )
