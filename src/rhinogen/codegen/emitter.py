"""
Python emitter for intent modules.

Renders a ModuleDecl into the source of a self-contained Python module:

1. Decoding errors (InferenceError and its subclasses)
2. The ``Intent`` base class, ``NotUnderstood`` and one dataclass per intent
3. One ``Enum`` per slot
4. ``decode()`` and the ``from_inference()`` adapter

The generated module only imports the standard library.
"""

from __future__ import annotations

import json
import logging

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from ..core import ir
from ..core.errors import RhinogenError
from .declarations import ModuleDecl, build_module_decl

logger = logging.getLogger(__name__)


class EmitError(RhinogenError):
    """Raised when the module template cannot be rendered."""

    pass


MODULE_TEMPLATE = '''\
"""
Typed intents for the Rhino context
{%- if module.source %} '{{ module.source | docstring }}'{% endif %}
{%- if module.project %} of project '{{ module.project | docstring }}'{% endif %}.

Turn inference results into intents with decode() or from_inference().
"""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class InferenceError(Exception):
    """
    An inference result that does not fit the intents of this module.

    Make sure the .rhn file is created from the same context as this module.
    """

    def __init__(
        self,
        reason: str,
        intent: str | None = None,
        variable: str | None = None,
        value: str | None = None,
    ) -> None:
        self.reason = reason
        self.intent = intent
        self.variable = variable
        self.value = value
        builtins.super(InferenceError, self).__init__(
            f"Illegal inference, reason: '{reason}'. "
            "Make sure the .rhn file is created from the same context as this module."
        )


class UnknownIntentKind(InferenceError):
    """The inferred intent is not declared in the context."""


class MissingRequiredSlot(InferenceError):
    """A variable that every expression binds is missing from the inference."""


class InvalidSlotValue(InferenceError):
    """A slot value is not an element of its slot."""


class {{ module.sum_type.name }}:
    """Base class of every intent of this context."""

    __slots__ = ()


@dataclass(frozen=True)
class {{ module.sum_type.sentinel.name }}({{ module.sum_type.name }}):
    pass
{% for variant in module.sum_type.variants %}


@dataclass(frozen=True)
class {{ variant.name }}({{ module.sum_type.name }}):
{% if variant.has_payload %}
{% for field in variant.fields %}
    {{ field.name }}: {{ field.annotation }}
{% endfor %}
{% else %}
    pass
{% endif %}
{% endfor %}
{% for enum in module.enums %}


class {{ enum.name }}(Enum):
{% for member in enum.members %}
    {{ member.name }} = {{ member.value | quote }}
{% else %}
    pass
{% endfor %}
{% endfor %}


def {{ module.decoder.name }}(
    understood: bool, intent: str, slots: Mapping[str, str]
) -> {{ module.decoder.sum_type }}:
    """
    Decode an inference result into an intent.

    Args:
        understood: Whether the engine understood the utterance
        intent: Name of the inferred intent
        slots: Slot values by variable name, as written in the context or
            in its escaped spelling

    Raises:
        UnknownIntentKind: If the intent is not declared in the context
        MissingRequiredSlot: If a required variable has no value
        InvalidSlotValue: If a value is not an element of its slot
    """
    return _{{ module.decoder.name }}(understood, intent, slots)


def from_inference(inference: Any) -> {{ module.decoder.sum_type }}:
    """Decode a Picovoice inference (is_understood, intent, slots)."""
    return {{ module.decoder.name }}(
        inference.is_understood, inference.intent, inference.slots or {}
    )


# Intents and slots are module-level names; only underscore names may be local here.
def _{{ module.decoder.name }}(
    _understood: bool, _intent: str, _slots: Mapping[str, str]
) -> {{ module.decoder.sum_type }}:
    if not _understood:
        return {{ module.decoder.sentinel }}()
    match _intent:
{% for case in module.decoder.cases %}
        case {{ case.intent_name | quote }}:
{% if case.args %}
            return {{ case.variant }}(
{% for arg in case.args %}
{% set fn = "_required_slot" if arg.required else "_optional_slot" %}
{% set keys = arg.lookup_keys | map("quote") | join(", ") %}
                {{ arg.field }}={{ fn }}(_slots, _intent, {{ arg.enum_name }}, {{ keys }}),
{% endfor %}
            )
{% else %}
            return {{ case.variant }}()
{% endif %}
{% endfor %}
        case _:
            raise UnknownIntentKind(
                f"Intent {_intent} is not a legal intent kind", intent=_intent
            )


def _optional_slot(
    slots: Mapping[str, str], intent: str, slot_type: Any, variable: str, *aliases: str
) -> Any:
    for key in (variable, *aliases):
        raw = slots.get(key)
        if raw is not None:
            break
    else:
        return None
    try:
        return slot_type(raw)
    except builtins.ValueError:
        raise InvalidSlotValue(
            f"Slot {slot_type.__name__} does not have element {raw} "
            f"given for variable {variable}",
            intent=intent,
            variable=variable,
            value=raw,
        ) from None


def _required_slot(
    slots: Mapping[str, str], intent: str, slot_type: Any, variable: str, *aliases: str
) -> Any:
    value = _optional_slot(slots, intent, slot_type, variable, *aliases)
    if value is None:
        raise MissingRequiredSlot(
            f"Variable {variable} is required by all expressions, but is not present",
            intent=intent,
            variable=variable,
        )
    return value
'''


def _quote(value: str) -> str:
    """Render a string as a double-quoted Python literal."""
    return json.dumps(value, ensure_ascii=False)


def _docstring(value: str) -> str:
    """Make text safe to embed in a triple-quoted docstring."""
    return value.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


class PythonEmitter:
    """
    Renders module declarations as Python source.

    Rendering is deterministic: equal declarations always give identical text.
    """

    def __init__(self) -> None:
        self.jinja_env = Environment(
            loader=BaseLoader(),
            undefined=StrictUndefined,  # Raise error on undefined variables
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.jinja_env.filters["quote"] = _quote
        self.jinja_env.filters["docstring"] = _docstring
        self.template = self.jinja_env.from_string(MODULE_TEMPLATE)

    def render(self, module: ModuleDecl) -> str:
        try:
            return self.template.render(module=module)
        except TemplateError as e:
            raise EmitError(f"Rendering the intents module failed: {e}") from e


def emit_module(grammar: ir.Grammar, project: str | None = None) -> str:
    """
    Generate the Python source of the intents module for a grammar.

    Args:
        grammar: Validated grammar
        project: Project name for the module docstring

    Returns:
        Module source text
    """
    module = build_module_decl(grammar, project=project)
    logger.debug(
        f"Emitting {len(module.sum_type.variants)} intent variants and {len(module.enums)} enums"
    )
    return PythonEmitter().render(module)
