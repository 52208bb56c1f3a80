"""
Error types for rhinogen context loading, grammar building, and configuration.

Every build-time failure derives from ``GrammarError`` so that callers can
abort generation with a single ``except`` clause. Decoding errors are not
defined here: they live in the generated module, which has no dependency on
rhinogen at runtime.
"""

from dataclasses import dataclass


class RhinogenError(Exception):
    """Base exception for all rhinogen errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            location = self.context.format()
            if location:
                return f"{location}: {self.message}"
        return self.message


class GrammarError(RhinogenError):
    """Raised when a context document cannot be turned into a valid grammar."""

    pass


class EmptyOrInvalidDocument(GrammarError):
    """
    Raised when the document is empty or not shaped like a Rhino context.

    Examples:
    - Empty file or a file holding only comments
    - YAML syntax errors
    - A slot whose value is not a list of elements
    """

    pass


class MissingContextRoot(GrammarError):
    """Raised when the document has no top-level ``context`` map."""

    pass


class NoExpressionsDefined(GrammarError):
    """Raised when the context declares no intents under ``expressions``."""

    pass


class IntentWithoutExpressions(GrammarError):
    """Raised when an intent lists no phrasings at all."""

    pass


class UnknownSlotReference(GrammarError):
    """Raised when a phrase references a slot that is not declared."""

    pass


class DuplicateVariableInExpression(GrammarError):
    """Raised when one phrase binds the same variable name twice."""

    pass


class InconsistentSlotTypeForVariable(GrammarError):
    """Raised when phrasings of one intent bind a variable to different slots."""

    pass


class DuplicateSlotElement(GrammarError):
    """Raised when two elements of a slot map to the same identifier."""

    pass


class DuplicateDeclaration(GrammarError):
    """
    Raised when two declarations would share one name in the generated module.

    Examples:
    - An intent and a slot with the same name
    - A slot named ``Intent`` or an intent named ``decode``
    """

    pass


class InvalidIdentifier(GrammarError):
    """Raised when a grammar name cannot be used as a Python identifier."""

    pass


class ManifestError(RhinogenError):
    """Raised when rhinogen.toml cannot be read or has an invalid shape."""

    pass


@dataclass(frozen=True)
class ErrorContext:
    """
    Where in the context document an error was found.

    Attributes:
        source: Name of the document (usually its path), if known
        intent: Intent being processed
        expression: Phrase being scanned
    """

    source: str | None = None
    intent: str | None = None
    expression: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable prefix.

        Returns:
            Formatted string like: "context.yml: intent 'Foo', expression 'do $A:b'"
        """
        parts: list[str] = []
        if self.intent:
            parts.append(f"intent '{self.intent}'")
        if self.expression:
            parts.append(f"expression '{self.expression}'")

        location = ", ".join(parts)
        if self.source:
            return f"{self.source}: {location}" if location else self.source
        return location
