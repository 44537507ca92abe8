"""Tokenizer contract and backends for the scriptable XML tree parser.

Key Components:
    EventTokenizer: Callback-shaped tokenizer contract
    ExpatTokenizer: Backend over the standard library expat binding
    LxmlTokenizer: Backend over the lxml target parser
    create_tokenizer: Factory selecting a backend by TokenizerBackend
"""

from .api import (
    EventTokenizer,
    ExpatTokenizer,
    LxmlTokenizer,
    create_tokenizer,
)

__all__ = [
    "EventTokenizer",
    "ExpatTokenizer",
    "LxmlTokenizer",
    "create_tokenizer",
]
