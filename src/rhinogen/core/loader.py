"""
YAML loading for Rhino context exports.

Rhino contexts routinely use words such as ``on``, ``off``, ``yes`` or
``true`` as slot elements and variable names. YAML 1.1 would turn those into
booleans, so the loader drops the implicit bool resolver and keeps every such
scalar as the string that was written. A key repeated within one mapping is an
error instead of silently replacing the earlier entry.
"""

from __future__ import annotations

import logging
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from .errors import EmptyOrInvalidDocument, ErrorContext

logger = logging.getLogger(__name__)

_BOOL_TAG = "tag:yaml.org,2002:bool"
_MERGE_TAG = "tag:yaml.org,2002:merge"


class LiteralBoolSafeLoader(yaml.SafeLoader):
    """SafeLoader that never resolves plain scalars to booleans and rejects duplicate keys."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            if not isinstance(key_node, yaml.ScalarNode) or key_node.tag == _MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


# Own copy of the resolver table; SafeLoader's class-level table stays untouched.
LiteralBoolSafeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_document(text: str, source: str | None = None) -> Any:
    """
    Parse a context document into plain dicts, lists and scalars.

    Args:
        text: Raw YAML text
        source: Document name used in error messages

    Returns:
        The parsed document

    Raises:
        EmptyOrInvalidDocument: If the text is empty or is not valid YAML
    """
    context = ErrorContext(source=source)
    try:
        data = yaml.load(text, Loader=LiteralBoolSafeLoader)
    except yaml.YAMLError as e:
        raise EmptyOrInvalidDocument(f"Illegal yaml syntax: {e}", context) from e

    if data is None:
        raise EmptyOrInvalidDocument("Document is empty", context)

    logger.debug(f"Loaded context document {source or '<string>'}")
    return data
