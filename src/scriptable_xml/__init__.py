"""Scriptable XML Tree Parser.

Turns an XML string into a tree of :class:`Element` nodes and plain string
text nodes, and searches that tree with arbitrary predicates.

Progressive API Disclosure:
- Level 1: Simple functions - parse_xml(), find_in_tree(), find_all_in_tree()
- Level 2: Configured parser - XMLTreeParser with ParserConfig
"""

__version__ = "1.0.0"
__author__ = "Scriptable XML Tree Parser Team"

from .api import XMLSyntaxError, XMLTreeParser, parse_xml
from .shared import ParserConfig, TokenizerBackend
from .tree import (
    Element,
    Node,
    by_name,
    find_all_in_tree,
    find_in_tree,
    has_attribute,
    iter_elements,
    iter_tree,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse_xml",
    "find_in_tree",
    "find_all_in_tree",
    "iter_tree",
    "iter_elements",
    "by_name",
    "has_attribute",

    # Level 2: Configured parser
    "XMLTreeParser",
    "ParserConfig",
    "TokenizerBackend",

    # Tree model and errors
    "Element",
    "Node",
    "XMLSyntaxError",
]
