"""Public parsing API for the scriptable XML tree parser."""

from .parser import XMLSyntaxError, XMLTreeParser, parse_xml

__all__ = [
    "XMLSyntaxError",
    "XMLTreeParser",
    "parse_xml",
]
