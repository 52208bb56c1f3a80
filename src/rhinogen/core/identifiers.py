"""
Identifier handling for generated Python modules.

Grammar authors pick slot, element and variable names freely. Before a name is
emitted as a Python identifier it goes through ``escape_identifier``, which
capitalises names that are Python keywords (``class`` -> ``Class``). The
result is then checked with ``identifier_problem``.
"""

from __future__ import annotations

import keyword

# Hard keywords only; soft keywords (match, case, type, _) are legal names.
RESERVED_WORDS: frozenset[str] = frozenset(keyword.kwlist)

# Module-level names defined by every generated module. Intents and slots
# become module-level classes and must not shadow these.
GENERATED_MODULE_NAMES: frozenset[str] = frozenset(
    {
        "annotations",
        "builtins",
        "Any",
        "Enum",
        "Mapping",
        "dataclass",
        "Intent",
        "NotUnderstood",
        "InferenceError",
        "UnknownIntentKind",
        "MissingRequiredSlot",
        "InvalidSlotValue",
        "decode",
        "from_inference",
    }
)

# Names Enum refuses as member names.
INVALID_ENUM_MEMBER_NAMES: frozenset[str] = frozenset({"mro"})


def escape_identifier(name: str) -> str:
    """
    Escape a grammar name that collides with a reserved word.

    Args:
        name: Name as written in the context document

    Returns:
        The name with its first character upper-cased if it is reserved,
        otherwise the name unchanged

    Examples:
        >>> escape_identifier("class")
        'Class'
        >>> escape_identifier("state")
        'state'
    """
    if name in RESERVED_WORDS:
        return name[:1].upper() + name[1:]
    return name


def identifier_problem(name: str) -> str | None:
    """
    Explain why an (already escaped) name is not usable as an identifier.

    Returns:
        A short description of the problem, or None if the name is fine
    """
    if not name:
        return "name is empty"
    if not name.isidentifier():
        return f"'{name}' is not a valid Python identifier"
    if keyword.iskeyword(name):
        # Keywords that are already capitalised (True, False, None) survive escaping
        return f"'{name}' is a Python keyword"
    if name.startswith("_"):
        return f"'{name}' must not start with an underscore"
    return None
