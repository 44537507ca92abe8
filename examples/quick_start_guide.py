#!/usr/bin/env python3
"""
Quick Start Guide for the Scriptable XML Tree Parser.

Parses a small catalog, walks the tree and runs a few searches.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from scriptable_xml import (
    Element,
    ParserConfig,
    TokenizerBackend,
    XMLSyntaxError,
    XMLTreeParser,
    by_name,
    find_all_in_tree,
    find_in_tree,
    has_attribute,
    parse_xml,
)

CATALOG = """<?xml version="1.0"?>
<catalog>
  <book id="b1" genre="fiction"><title>Dune</title><price currency="USD">9.99</price></book>
  <book id="b2" genre="classic"><title>Emma</title><!-- reprint --><price currency="EUR">4.50</price></book>
</catalog>
"""


def quick_start_example() -> None:
    """Parse a document and read it back."""
    print("QUICK START - Scriptable XML Tree Parser")
    print("=" * 45)

    root = parse_xml(CATALOG)
    print(f"Root element: <{root.name}> with {len(root.children)} child elements")

    for book in root.children:
        title = find_in_tree(book, by_name("title"))
        print(f"  {book.attributes['id']}: {title.inner_text}")


def search_example() -> None:
    """Search with predicate factories and plain callables."""
    print("\nSearching")
    print("-" * 30)

    root = parse_xml(CATALOG)

    euro_prices = find_all_in_tree(root, has_attribute("currency", "EUR"))
    print(f"Prices in EUR: {[price.inner_text for price in euro_prices]}")

    texts = find_all_in_tree(root, lambda node: isinstance(node, str) and node.strip() != "")
    print(f"Non-blank text nodes: {texts}")

    cheap = find_in_tree(
        root,
        lambda node: isinstance(node, Element)
        and node.name == "price"
        and float(node.inner_text) < 5,
    )
    print(f"First price under 5: {cheap.inner_text if cheap else None}")


def configured_parser_example() -> None:
    """Reuse a configured parser and handle syntax errors."""
    print("\nConfigured parser")
    print("-" * 30)

    parser = XMLTreeParser(ParserConfig(tokenizer=TokenizerBackend.LXML))
    parser.parse(CATALOG)

    try:
        parser.parse("<catalog><book></catalog>")
    except XMLSyntaxError as e:
        print(f"Syntax error at line {e.line}: {e}")

    print(f"Statistics: {parser.statistics}")


def main() -> None:
    """Run all examples."""
    quick_start_example()
    search_example()
    configured_parser_example()


if __name__ == "__main__":
    main()
