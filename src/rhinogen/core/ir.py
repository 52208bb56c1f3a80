"""
rhinogen grammar model.

The grammar is built once per run by ``rhinogen.core.builder`` and consumed by
the code emitter. All types are immutable (frozen=True); names stored here are
already escaped and validated, except ``Slot.raw_elements`` which keeps the
spelling the speech engine reports at runtime.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Slot(BaseModel):
    """
    A named enumeration of the values a slot variable can take.

    Attributes:
        name: Slot identifier (e.g. OnOrOff)
        elements: Escaped element identifiers, in declaration order
        raw_elements: Elements as written in the context, same order
    """

    name: str
    elements: list[str] = Field(default_factory=list)
    raw_elements: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_parallel_elements(self) -> Slot:
        if len(self.elements) != len(self.raw_elements):
            raise ValueError("elements and raw_elements must have the same length")
        return self

    @property
    def members(self) -> list[tuple[str, str]]:
        """(identifier, raw value) pairs in declaration order."""
        return list(zip(self.elements, self.raw_elements))


class SlotVariable(BaseModel):
    """
    A named parameter of an intent, typed by a slot.

    Attributes:
        name: Escaped variable identifier
        raw_name: Variable name as written in the expressions; inference
            results report slot values under this key
        slot: The slot giving the variable its type
        required: Whether every expression of the intent binds the variable
    """

    name: str
    raw_name: str
    slot: Slot
    required: bool = True

    model_config = ConfigDict(frozen=True)


class Intent(BaseModel):
    """
    A voice command.

    Attributes:
        name: Intent identifier, matched verbatim against inference results
        variables: Parameters in first-seen order across all phrasings
        expressions: The phrasings the intent was declared with
    """

    name: str
    variables: list[SlotVariable] = Field(default_factory=list)
    expressions: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def has_variables(self) -> bool:
        return bool(self.variables)

    @property
    def required_variables(self) -> list[SlotVariable]:
        return [v for v in self.variables if v.required]

    @property
    def optional_variables(self) -> list[SlotVariable]:
        return [v for v in self.variables if not v.required]

    def get_variable(self, name: str) -> SlotVariable | None:
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None


class Grammar(BaseModel):
    """
    A validated Rhino context.

    Attributes:
        intents: Intents in declaration order
        slots: Slots in declaration order
        source: Name of the document the grammar was built from, if known
    """

    intents: list[Intent] = Field(default_factory=list)
    slots: list[Slot] = Field(default_factory=list)
    source: str | None = None

    model_config = ConfigDict(frozen=True)

    def get_intent(self, name: str) -> Intent | None:
        for intent in self.intents:
            if intent.name == name:
                return intent
        return None

    def get_slot(self, name: str) -> Slot | None:
        for slot in self.slots:
            if slot.name == name:
                return slot
        return None
