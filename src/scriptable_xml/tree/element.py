"""Node model for parsed XML trees.

A tree is made of :class:`Element` instances whose ``child_nodes`` hold
either further elements or plain ``str`` text nodes, in document order.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


@dataclass(eq=False)
class Element:
    """Represents a single XML element in the document tree.

    Attributes live in a plain ``dict`` keyed by attribute name, so names
    such as ``__class__`` or ``items`` are ordinary keys and never shadow
    anything on the element itself. No validation is done on the tag name
    or on attribute keys and values; that belongs to the tokenizer.

    The constructor accepts any mapping (or ``None``) for ``attributes``
    and stores a fresh ``dict`` copy of it.
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    child_nodes: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Copy the attribute mapping so the caller's input is never shared."""
        self.attributes = dict(self.attributes or {})

    @property
    def inner_text(self) -> str:
        """Concatenation of all descendant text in document order."""
        # Local import: traversal depends on this module.
        from .traversal import iter_tree

        return "".join(node for node in iter_tree(self) if isinstance(node, str))

    @property
    def children(self) -> List["Element"]:
        """Child elements. Text nodes are excluded."""
        return [child for child in self.child_nodes if isinstance(child, Element)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation.

        Text nodes are kept as strings inside ``child_nodes``.
        """
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "child_nodes": [
                child.to_dict() if isinstance(child, Element) else child
                for child in self.child_nodes
            ],
        }

    def __repr__(self) -> str:
        return f"<Element {self.name!r} at {id(self):#x}>"


# A node in the tree: an element or a text run.
Node = Union[Element, str]
