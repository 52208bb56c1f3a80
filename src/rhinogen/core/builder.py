"""
Grammar builder: turns a parsed context document into a validated Grammar.

The document shape is::

    context:
      expressions:
        ChangeLightState:
          - turn $OnOrOff:state the lights
          - turn the lights $OnOrOff:state in the $Location:location
      slots:
        OnOrOff: [on, off]
        Location: [kitchen, bedroom]

Each ``$Slot:variable`` token in a phrase binds ``variable`` to the slot
``Slot``. A variable is required when every phrase of its intent binds it,
optional otherwise.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from . import ir
from .errors import (
    DuplicateDeclaration,
    DuplicateSlotElement,
    DuplicateVariableInExpression,
    EmptyOrInvalidDocument,
    ErrorContext,
    InconsistentSlotTypeForVariable,
    IntentWithoutExpressions,
    InvalidIdentifier,
    MissingContextRoot,
    NoExpressionsDefined,
    UnknownSlotReference,
)
from .identifiers import (
    GENERATED_MODULE_NAMES,
    INVALID_ENUM_MEMBER_NAMES,
    escape_identifier,
    identifier_problem,
)

logger = logging.getLogger(__name__)

# $<slot>:<variable>
SLOT_REFERENCE_PATTERN = re.compile(r"\$([A-Za-z0-9_]+):([A-Za-z0-9_]+)")


class _Binding(NamedTuple):
    raw_name: str
    slot: ir.Slot


def find_slot_references(expression: str) -> list[tuple[str, str]]:
    """
    Find every slot reference in a phrase.

    Returns:
        (slot name, variable name) pairs as written, in order of appearance

    Examples:
        >>> find_slot_references("turn $OnOrOff:state the $Location:room lights")
        [('OnOrOff', 'state'), ('Location', 'room')]
    """
    return SLOT_REFERENCE_PATTERN.findall(expression)


class GrammarBuilder:
    """
    Builds a Grammar from the generic structure returned by the loader.

    A builder holds no state between calls to ``build``; ``source`` is only
    used to label error messages.
    """

    def __init__(self, source: str | None = None):
        self.source = source

    def build(self, data: Any) -> ir.Grammar:
        """
        Validate the document and build the grammar.

        Raises:
            GrammarError: On the first problem found; nothing is returned
                for a partially valid document
        """
        context_node = self._context_node(data)

        slots = self._build_slots(context_node.get("slots"))
        slots_by_name = {slot.name: slot for slot in slots}

        expressions = context_node.get("expressions")
        if not expressions:
            raise NoExpressionsDefined(
                "You must define at least one intent in 'expressions:'", self._context()
            )
        if not isinstance(expressions, Mapping):
            raise EmptyOrInvalidDocument(
                "'expressions:' must map intent names to lists of phrases", self._context()
            )

        intents = [
            self._build_intent(str(name), phrases, slots_by_name)
            for name, phrases in expressions.items()
        ]
        self._check_declarations(intents, slots)

        logger.debug(
            f"Built grammar from {self.source or '<string>'}: "
            f"{len(intents)} intents, {len(slots)} slots"
        )
        return ir.Grammar(intents=intents, slots=slots, source=self.source)

    # ------------------------------------------------------------------
    # Document navigation
    # ------------------------------------------------------------------

    def _context(self, intent: str | None = None, expression: str | None = None) -> ErrorContext:
        return ErrorContext(source=self.source, intent=intent, expression=expression)

    def _context_node(self, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping) or "context" not in data:
            raise MissingContextRoot("yaml MUST have root node: 'context:'", self._context())

        node = data["context"]
        if node is None:
            return {}
        if not isinstance(node, Mapping):
            raise MissingContextRoot("'context:' must be a map", self._context())
        return node

    def _string_list(self, value: Any, what: str, intent: str | None = None) -> list[str]:
        """Read a YAML list of scalars as strings."""
        if value is None:
            return []
        if not isinstance(value, list):
            raise EmptyOrInvalidDocument(f"{what} must be a list", self._context(intent))

        items: list[str] = []
        for item in value:
            if item is None or isinstance(item, (Mapping, list)):
                raise EmptyOrInvalidDocument(
                    f"{what} must only contain plain values, got {item!r}", self._context(intent)
                )
            items.append(str(item))
        return items

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def _build_slots(self, node: Any) -> list[ir.Slot]:
        if node is None:
            return []
        if not isinstance(node, Mapping):
            raise EmptyOrInvalidDocument(
                "'slots:' must map slot names to lists of elements", self._context()
            )

        slots: list[ir.Slot] = []
        seen: set[str] = set()
        for raw_name, raw_elements in node.items():
            name = self._identifier(str(raw_name), "slot")
            if name in seen:
                raise DuplicateDeclaration(f"Slot '{name}' is declared twice", self._context())
            seen.add(name)

            elements: list[str] = []
            raw = self._string_list(raw_elements, f"Slot '{name}'")
            for element in raw:
                escaped = self._identifier(element, f"element of slot '{name}'")
                if escaped in INVALID_ENUM_MEMBER_NAMES:
                    raise InvalidIdentifier(
                        f"Slot '{name}' cannot have an element named '{escaped}'",
                        self._context(),
                    )
                if escaped in elements:
                    raise DuplicateSlotElement(
                        f"Slot '{name}' has element '{escaped}' more than once", self._context()
                    )
                elements.append(escaped)

            slots.append(ir.Slot(name=name, elements=elements, raw_elements=raw))
        return slots

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def _build_intent(
        self, name: str, phrases: Any, slots_by_name: Mapping[str, ir.Slot]
    ) -> ir.Intent:
        problem = identifier_problem(name)
        if problem:
            raise InvalidIdentifier(f"Intent name {problem}", self._context(name))

        expressions = self._string_list(phrases, f"Intent '{name}'", intent=name)
        if not expressions:
            raise IntentWithoutExpressions(
                f"Intent '{name}' must have at least one expression", self._context(name)
            )

        per_expression = [
            self._scan_expression(name, expression, slots_by_name) for expression in expressions
        ]

        required = set(per_expression[0])
        for bindings in per_expression[1:]:
            required &= set(bindings)

        # Ordered union; the first expression binding a variable decides its slot
        all_variables: dict[str, _Binding] = {}
        for expression, bindings in zip(expressions, per_expression):
            for variable, binding in bindings.items():
                known = all_variables.setdefault(variable, binding)
                if known.slot.name != binding.slot.name:
                    raise InconsistentSlotTypeForVariable(
                        f"Variable '{variable}' is a {binding.slot.name} here, "
                        f"but a {known.slot.name} in another expression",
                        self._context(name, expression),
                    )

        variables = [
            ir.SlotVariable(
                name=variable,
                raw_name=binding.raw_name,
                slot=binding.slot,
                required=variable in required,
            )
            for variable, binding in all_variables.items()
        ]
        return ir.Intent(name=name, variables=variables, expressions=expressions)

    def _scan_expression(
        self, intent: str, expression: str, slots_by_name: Mapping[str, ir.Slot]
    ) -> dict[str, _Binding]:
        """Map each variable bound in one phrase to its slot, in order."""
        bindings: dict[str, _Binding] = {}
        for slot_name, variable_name in find_slot_references(expression):
            variable = escape_identifier(variable_name)
            if variable in bindings:
                raise DuplicateVariableInExpression(
                    f"Expression contains duplicate variable {variable_name}",
                    self._context(intent, expression),
                )

            slot = slots_by_name.get(escape_identifier(slot_name))
            if slot is None:
                raise UnknownSlotReference(
                    f"Variable {variable_name} has slot type {slot_name} that does not exist",
                    self._context(intent, expression),
                )

            problem = identifier_problem(variable)
            if problem:
                raise InvalidIdentifier(
                    f"Variable name {problem}", self._context(intent, expression)
                )
            bindings[variable] = _Binding(raw_name=variable_name, slot=slot)
        return bindings

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _identifier(self, raw: str, what: str) -> str:
        name = escape_identifier(raw)
        problem = identifier_problem(name)
        if problem:
            raise InvalidIdentifier(f"Invalid {what}: {problem}", self._context())
        return name

    def _check_declarations(self, intents: list[ir.Intent], slots: list[ir.Slot]) -> None:
        """Intents and slots share the generated module's namespace."""
        slot_names = {slot.name for slot in slots}
        for slot in slots:
            if slot.name in GENERATED_MODULE_NAMES:
                raise DuplicateDeclaration(
                    f"Slot '{slot.name}' clashes with a name of the generated module",
                    self._context(),
                )
        for intent in intents:
            if intent.name in GENERATED_MODULE_NAMES:
                raise DuplicateDeclaration(
                    f"Intent '{intent.name}' clashes with a name of the generated module",
                    self._context(intent.name),
                )
            if intent.name in slot_names:
                raise DuplicateDeclaration(
                    f"Intent '{intent.name}' has the same name as a slot",
                    self._context(intent.name),
                )


def build_grammar(data: Any, source: str | None = None) -> ir.Grammar:
    """
    Build a validated grammar from a parsed context document.

    Args:
        data: Document as returned by ``load_document``
        source: Document name used in error messages

    Returns:
        The grammar
    """
    return GrammarBuilder(source=source).build(data)
