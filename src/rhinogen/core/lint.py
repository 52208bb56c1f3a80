from . import ir


def lint_grammar(grammar: ir.Grammar) -> list[str]:
    """
    Check a grammar for problems that do not block generation.

    Checks:
    - Slots that no expression references
    - Slots without elements (the generated enum has no members)
    - Intents listing the same expression more than once

    Args:
        grammar: Validated grammar

    Returns:
        List of warning messages
    """
    warnings: list[str] = []

    used_slots = {
        variable.slot.name for intent in grammar.intents for variable in intent.variables
    }
    for slot in grammar.slots:
        if slot.name not in used_slots:
            warnings.append(f"Slot '{slot.name}' is not referenced by any expression")
        if not slot.elements:
            warnings.append(f"Slot '{slot.name}' has no elements")

    for intent in grammar.intents:
        seen: set[str] = set()
        for expression in intent.expressions:
            if expression in seen:
                warnings.append(f"Intent '{intent.name}' repeats expression '{expression}'")
            seen.add(expression)

    return warnings
