"""Event tokenizers that drive tree construction.

A tokenizer is built over one XML string, has four assignable callbacks and
a :meth:`EventTokenizer.parse` method that runs once and reports success.
Character-level work (entities, encodings, well-formedness) belongs to the
underlying library, either the standard library's expat binding or lxml.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional
from xml.parsers import expat

from lxml import etree

from scriptable_xml.shared import TokenizerBackend, get_logger

StartElementCallback = Callable[[str, Mapping[str, str]], None]
EndElementCallback = Callable[[str], None]
CharactersCallback = Callable[[str], None]
ParseErrorCallback = Callable[[str, Optional[Dict[str, int]]], None]


class EventTokenizer(ABC):
    """Push-style XML tokenizer bound to a single source string.

    Callbacks left as None are skipped. Subclasses implement :meth:`_run`,
    which emits events through the ``_emit_*`` helpers and returns whether
    the document was well formed.
    """

    backend: TokenizerBackend

    def __init__(self, source: str, correlation_id: Optional[str] = None) -> None:
        """Initialize tokenizer.

        Args:
            source: Complete XML document
            correlation_id: Optional correlation ID for log records
        """
        self.source = source
        self.logger = get_logger(__name__, correlation_id, f"{self.backend.value}_tokenizer")

        self.did_start_element: Optional[StartElementCallback] = None
        self.did_end_element: Optional[EndElementCallback] = None
        self.found_characters: Optional[CharactersCallback] = None
        self.parse_error_occurred: Optional[ParseErrorCallback] = None

        self._used = False

    def parse(self) -> bool:
        """Tokenize the source, invoking the callbacks in document order.

        Returns:
            True if the document was well formed, False otherwise

        Raises:
            RuntimeError: If called more than once
        """
        if self._used:
            raise RuntimeError(f"{type(self).__name__} can only parse once")
        self._used = True

        self.logger.debug("Tokenizing source", extra={"source_length": len(self.source)})
        return self._run()

    @abstractmethod
    def _run(self) -> bool:
        """Drive the underlying library over ``self.source``."""

    def _emit_start(self, name: str, attributes: Mapping[str, str]) -> None:
        if self.did_start_element is not None:
            self.did_start_element(name, attributes)

    def _emit_end(self, name: str) -> None:
        if self.did_end_element is not None:
            self.did_end_element(name)

    def _emit_characters(self, text: str) -> None:
        if self.found_characters is not None:
            self.found_characters(text)

    def _emit_error(self, message: str, position: Optional[Dict[str, int]] = None) -> None:
        self.logger.debug("Source is not well formed", extra={"diagnostic": message})
        if self.parse_error_occurred is not None:
            self.parse_error_occurred(message, position)


class ExpatTokenizer(EventTokenizer):
    """Tokenizer backed by :mod:`xml.parsers.expat`.

    Namespace processing is off, so prefixed names arrive as written.
    Expat may split one text run into several character events, e.g. at
    line breaks, entity references and comments.
    """

    backend = TokenizerBackend.EXPAT

    def _run(self) -> bool:
        parser = expat.ParserCreate()
        parser.StartElementHandler = self._emit_start
        parser.EndElementHandler = self._emit_end
        parser.CharacterDataHandler = self._emit_characters

        try:
            parser.Parse(self.source, True)
        except expat.ExpatError as e:
            self._emit_error(
                str(e),
                {"line": e.lineno, "column": e.offset},
            )
            return False
        except UnicodeEncodeError as e:
            self._emit_error(str(e))
            return False
        return True


class _LxmlTarget:
    """Parser target forwarding lxml's callbacks to the tokenizer."""

    def __init__(self, tokenizer: "LxmlTokenizer") -> None:
        self.tokenizer = tokenizer

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        self.tokenizer._emit_start(tag, dict(attrib))

    def end(self, tag: str) -> None:
        self.tokenizer._emit_end(tag)

    def data(self, data: str) -> None:
        self.tokenizer._emit_characters(data)

    def close(self) -> None:
        return None


class LxmlTokenizer(EventTokenizer):
    """Tokenizer backed by the :mod:`lxml.etree` target parser interface.

    Namespaced names are reported in lxml's ``{uri}local`` notation.
    Comments and processing instructions are not reported.
    """

    backend = TokenizerBackend.LXML

    def _run(self) -> bool:
        parser = etree.XMLParser(target=_LxmlTarget(self))
        try:
            parser.feed(self.source)
            parser.close()
        except etree.XMLSyntaxError as e:
            line, column = e.position
            self._emit_error(str(e), {"line": line, "column": column})
            return False
        except UnicodeEncodeError as e:
            self._emit_error(str(e))
            return False
        return True


_TOKENIZERS: Dict[TokenizerBackend, Any] = {
    TokenizerBackend.EXPAT: ExpatTokenizer,
    TokenizerBackend.LXML: LxmlTokenizer,
}


def create_tokenizer(
    source: str,
    backend: TokenizerBackend = TokenizerBackend.EXPAT,
    correlation_id: Optional[str] = None
) -> EventTokenizer:
    """Create a fresh tokenizer of the given backend over ``source``."""
    return _TOKENIZERS[backend](source, correlation_id)
