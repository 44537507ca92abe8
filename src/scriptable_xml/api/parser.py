"""Parse orchestration for the scriptable XML tree parser.

Progressive disclosure:
- :func:`parse_xml` parses one string with an optional configuration.
- :class:`XMLTreeParser` holds a configuration for repeated parses and keeps
  usage statistics.

Every parse gets its own tokenizer and its own :class:`XMLTreeBuilder`, so
calls never share builder state.
"""

import time
from typing import Any, Dict, Optional

from scriptable_xml.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)
from scriptable_xml.tokenization import create_tokenizer
from scriptable_xml.tree import Element, XMLTreeBuilder
from scriptable_xml.tree.builder import TOKENIZER_COMPONENT

MS_PER_SECOND = 1000


class XMLSyntaxError(SyntaxError):
    """Raised when a document cannot be turned into a tree.

    ``str(error)`` is the tokenizer's diagnostic, verbatim. The full
    :class:`DiagnosticEntry`, including line and column when known, is
    available as :attr:`diagnostic`.
    """

    def __init__(self, message: str, diagnostic: Optional[DiagnosticEntry] = None) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic

    @property
    def line(self) -> Optional[int]:
        return self.diagnostic.line if self.diagnostic else None

    @property
    def column(self) -> Optional[int]:
        return self.diagnostic.column if self.diagnostic else None


def parse_xml(
    source: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse an XML string into a tree.

    Args:
        source: XML document as a string
        config: Parser configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for log records

    Returns:
        Root element of the fully built tree

    Raises:
        XMLSyntaxError: If the tokenizer reports malformed input or the
            events do not describe a single complete element
        TypeError: If ``source`` is not a string

    Examples:
        >>> root = parse_xml('<a>x<b>y</b>z</a>')
        >>> root.inner_text
        'xyz'
        >>> [child.name for child in root.children]
        ['b']
    """
    if not isinstance(source, str):
        raise TypeError(f"XML source must be str, not {type(source).__name__}")

    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    logger = get_logger(__name__, correlation_id, "parse_xml")

    start_time = time.time()
    logger.info(
        "Starting parse",
        extra={"source_length": len(source), "tokenizer": config.tokenizer.value},
    )

    builder = XMLTreeBuilder(config=config, correlation_id=correlation_id)
    tokenizer = create_tokenizer(source, config.tokenizer, correlation_id)
    tokenizer.did_start_element = builder.start_element
    tokenizer.did_end_element = builder.end_element
    tokenizer.found_characters = builder.character_data
    tokenizer.parse_error_occurred = builder.parse_error

    if tokenizer.parse():
        root = builder.close()
    else:
        root = None
        if builder.error is None or builder.error.component != TOKENIZER_COMPONENT:
            builder.parse_error("tokenizer reported failure without a diagnostic")

    processing_time = (time.time() - start_time) * MS_PER_SECOND

    if root is None:
        diagnostic = builder.error or DiagnosticEntry(
            severity=DiagnosticSeverity.ERROR,
            message="no element found",
            component="parse_xml",
            correlation_id=correlation_id,
        )
        logger.warning(
            "Parse failed",
            extra={
                "diagnostic": diagnostic.to_dict(),
                "processing_time_ms": processing_time,
            },
        )
        raise XMLSyntaxError(diagnostic.message, diagnostic)

    logger.info(
        "Parse completed",
        extra={
            "element_count": builder.elements_created,
            "text_merges": builder.text_merges,
            "processing_time_ms": processing_time,
        },
    )
    return root


class XMLTreeParser:
    """Configured parser for repeated use.

    The instance only holds configuration and counters; each :meth:`parse`
    call builds a fresh tokenizer and tree builder.

    Examples:
        >>> parser = XMLTreeParser(ParserConfig.lenient())
        >>> parser.parse('<root/>').name
        'root'
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize configured parser.

        Args:
            config: Parser configuration (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID overriding the config's
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_tree_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def parse(
        self,
        source: str,
        config_override: Optional[ParserConfig] = None,
        correlation_id_override: Optional[str] = None
    ) -> Element:
        """Parse ``source`` with this parser's configuration.

        Raises:
            XMLSyntaxError: As :func:`parse_xml`
        """
        start_time = time.time()
        try:
            root = parse_xml(
                source,
                config=config_override or self.config,
                correlation_id=correlation_id_override or self.correlation_id,
            )
        finally:
            self._parse_count += 1
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

        self._successful_parses += 1
        return root

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration used by later parses."""
        self.config = config
        self.logger.info("Parser reconfigured", extra={"tokenizer": config.tokenizer.value})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "failed_parses": self._parse_count - self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
