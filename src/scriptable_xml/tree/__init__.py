"""Tree model, construction and traversal for the scriptable XML tree parser.

Key Components:
    Element: XML element with a name, attributes and ordered child nodes
    XMLTreeBuilder: Reducer turning tokenizer events into an Element tree
    iter_tree / find_in_tree / find_all_in_tree: pre-order walk and search
"""

from .builder import XMLTreeBuilder
from .element import Element, Node
from .traversal import (
    NodeFilter,
    by_name,
    find_all_in_tree,
    find_in_tree,
    has_attribute,
    iter_elements,
    iter_tree,
)

__all__ = [
    "Element",
    "Node",
    "NodeFilter",
    "XMLTreeBuilder",
    "by_name",
    "find_all_in_tree",
    "find_in_tree",
    "has_attribute",
    "iter_elements",
    "iter_tree",
]
