"""
Declaration tree for the generated intents module.

The emitter first lowers a Grammar into these declarations and only then
renders text. Order and naming decisions are made here, so they can be checked
without looking at formatting.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..core import ir

SUM_TYPE_NAME = "Intent"
SENTINEL_VARIANT = "NotUnderstood"
DECODER_NAME = "decode"


class FieldDecl(BaseModel):
    """One dataclass field of an intent variant."""

    name: str
    type_name: str
    optional: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def annotation(self) -> str:
        return f"{self.type_name} | None" if self.optional else self.type_name


class VariantDecl(BaseModel):
    """One case of the intent sum type."""

    name: str
    fields: list[FieldDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def has_payload(self) -> bool:
        return bool(self.fields)


class SumTypeDecl(BaseModel):
    """The closed ``Intent`` hierarchy: a sentinel plus one variant per intent."""

    name: str = SUM_TYPE_NAME
    sentinel: VariantDecl = Field(default_factory=lambda: VariantDecl(name=SENTINEL_VARIANT))
    variants: list[VariantDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class EnumMemberDecl(BaseModel):
    name: str
    value: str

    model_config = ConfigDict(frozen=True)


class EnumDecl(BaseModel):
    """One slot enumeration."""

    name: str
    members: list[EnumMemberDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class DecoderArgDecl(BaseModel):
    """
    How the decoder fills one field of a variant from the slot values.

    The value is looked up under ``key`` (the variable as written in the
    expressions), then under each of ``aliases`` (its escaped spelling).
    """

    field: str
    key: str
    aliases: list[str] = Field(default_factory=list)
    enum_name: str
    required: bool

    model_config = ConfigDict(frozen=True)

    @property
    def lookup_keys(self) -> list[str]:
        return [self.key, *self.aliases]


class DecoderCaseDecl(BaseModel):
    """One ``case`` of the decoder's match on the intent name."""

    intent_name: str
    variant: str
    args: list[DecoderArgDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class DecoderDecl(BaseModel):
    name: str = DECODER_NAME
    sum_type: str = SUM_TYPE_NAME
    sentinel: str = SENTINEL_VARIANT
    cases: list[DecoderCaseDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ModuleDecl(BaseModel):
    """Everything the generated module declares, in output order."""

    source: str | None = None
    project: str | None = None
    sum_type: SumTypeDecl
    enums: list[EnumDecl] = Field(default_factory=list)
    decoder: DecoderDecl

    model_config = ConfigDict(frozen=True)


def build_module_decl(grammar: ir.Grammar, project: str | None = None) -> ModuleDecl:
    """
    Lower a grammar into module declarations.

    ``project`` is the project name shown in the module docstring, if any.

    Intents and slots keep their declaration order; variables keep the order
    in which they were first seen.
    """
    variants: list[VariantDecl] = []
    cases: list[DecoderCaseDecl] = []

    for intent in grammar.intents:
        variants.append(
            VariantDecl(
                name=intent.name,
                fields=[
                    FieldDecl(name=v.name, type_name=v.slot.name, optional=not v.required)
                    for v in intent.variables
                ],
            )
        )
        cases.append(
            DecoderCaseDecl(
                intent_name=intent.name,
                variant=intent.name,
                args=[
                    DecoderArgDecl(
                        field=v.name,
                        key=v.raw_name,
                        aliases=[v.name] if v.name != v.raw_name else [],
                        enum_name=v.slot.name,
                        required=v.required,
                    )
                    for v in intent.variables
                ],
            )
        )

    enums = [
        EnumDecl(
            name=slot.name,
            members=[EnumMemberDecl(name=name, value=value) for name, value in slot.members],
        )
        for slot in grammar.slots
    ]

    return ModuleDecl(
        source=grammar.source,
        project=project,
        sum_type=SumTypeDecl(variants=variants),
        enums=enums,
        decoder=DecoderDecl(cases=cases),
    )
