"""Read-only traversal and search over parsed trees.

All functions accept any node, element or text, as the starting point and
walk it in depth-first pre-order: a node is produced before its
descendants, and each child's subtree is exhausted before the next sibling.
"""

from typing import Callable, Iterator, List, Optional

from .element import Element, Node

NodeFilter = Callable[[Node], bool]


def iter_tree(tree: Node) -> Iterator[Node]:
    """Lazily walk ``tree`` in depth-first pre-order, starting with ``tree``.

    Each call returns an independent generator. The walk keeps its own
    stack, so arbitrarily deep documents do not hit the recursion limit.
    """
    stack: List[Node] = [tree]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Element):
            stack.extend(reversed(node.child_nodes))


def iter_elements(tree: Node) -> Iterator[Element]:
    """Walk ``tree`` like :func:`iter_tree`, skipping text nodes."""
    for node in iter_tree(tree):
        if isinstance(node, Element):
            yield node


def find_in_tree(tree: Node, predicate: NodeFilter) -> Optional[Node]:
    """Find the first node in a tree that satisfies ``predicate``.

    Args:
        tree: Node whose subtree (itself included) is searched
        predicate: Called with each node, element or text, in pre-order

    Returns:
        The first matching node, or None. No node after the match is visited.
    """
    for node in iter_tree(tree):
        if predicate(node):
            return node
    return None


def find_all_in_tree(tree: Node, predicate: NodeFilter) -> List[Node]:
    """Find all nodes in a tree that satisfy ``predicate``, in pre-order."""
    return [node for node in iter_tree(tree) if predicate(node)]


def by_name(name: str) -> NodeFilter:
    """Build a predicate matching elements with tag ``name``."""
    def predicate(node: Node) -> bool:
        return isinstance(node, Element) and node.name == name
    return predicate


def has_attribute(name: str, value: Optional[str] = None) -> NodeFilter:
    """Build a predicate matching elements carrying attribute ``name``.

    When ``value`` is given the attribute must also equal it.
    """
    def predicate(node: Node) -> bool:
        if not isinstance(node, Element) or name not in node.attributes:
            return False
        return value is None or node.attributes[name] == value
    return predicate
