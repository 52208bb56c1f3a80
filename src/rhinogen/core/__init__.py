"""
Core of rhinogen: loading, validating and modelling Rhino contexts.

Apart from reading rhinogen.toml (``manifest``), nothing here touches the file
system: documents come in as text and grammars go out as immutable models.
"""

from .builder import GrammarBuilder, build_grammar, find_slot_references
from .identifiers import RESERVED_WORDS, escape_identifier
from .loader import load_document

__all__ = [
    "GrammarBuilder",
    "build_grammar",
    "find_slot_references",
    "RESERVED_WORDS",
    "escape_identifier",
    "load_document",
]
