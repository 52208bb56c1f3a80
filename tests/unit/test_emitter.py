"""Tests for the Python emitter."""

import ast
import textwrap

from rhinogen.codegen.emitter import PythonEmitter, emit_module
from rhinogen.compiler import build_grammar_from_text, compile_context


def compile_yaml(yaml_text: str) -> str:
    return compile_context(textwrap.dedent(yaml_text))


def class_block(source: str, name: str) -> str:
    """Return the lines of a top-level class, header included."""
    lines = source.splitlines()
    start = next(
        i
        for i, line in enumerate(lines)
        if line.startswith(f"class {name}(") or line == f"class {name}:"
    )
    block = [lines[start]]
    for line in lines[start + 1 :]:
        if line and not line.startswith(" "):
            break
        block.append(line)
    while block and not block[-1]:
        block.pop()
    return "\n".join(block)


class TestIntentDeclarations:
    def test_intent_without_variables_has_no_fields(self) -> None:
        source = compile_yaml(
            """
            context:
              expressions:
                Foo:
                  - bla
            """
        )

        assert class_block(source, "Foo") == "class Foo(Intent):\n    pass"
        assert "@dataclass(frozen=True)\nclass Foo(Intent):" in source
        assert "@dataclass(frozen=True)\nclass NotUnderstood(Intent):\n    pass" in source

    def test_fields_and_enum(self) -> None:
        source = compile_yaml(
            """
            context:
              expressions:
                Foo:
                  - do $Slot:bla $Slot:bloo
                Bar:
                  - do that $Slot:bla
              slots:
                Slot:
                  - One
                  - Two
            """
        )

        assert class_block(source, "Foo") == "class Foo(Intent):\n    bla: Slot\n    bloo: Slot"
        assert class_block(source, "Bar") == "class Bar(Intent):\n    bla: Slot"
        assert class_block(source, "Slot") == (
            'class Slot(Enum):\n    One = "One"\n    Two = "Two"'
        )

    def test_optional_field(self) -> None:
        source = compile_yaml(
            """
            context:
              expressions:
                Foo:
                  - do $Slot:bla
                  - do all
              slots:
                Slot: [One, Two]
            """
        )

        assert class_block(source, "Foo") == "class Foo(Intent):\n    bla: Slot | None"

    def test_keyword_variable_and_element(self) -> None:
        source = compile_yaml(
            """
            context:
              expressions:
                Foo:
                  - do $Slot:class
              slots:
                Slot:
                  - if
                  - Two
            """
        )

        assert class_block(source, "Foo") == "class Foo(Intent):\n    Class: Slot"
        assert class_block(source, "Slot") == (
            'class Slot(Enum):\n    If = "if"\n    Two = "Two"'
        )
        assert 'Class=_required_slot(_slots, _intent, Slot, "class", "Class")' in source

    def test_empty_slot_renders_pass(self) -> None:
        source = compile_yaml(
            """
            context:
              expressions:
                Foo: [bla]
              slots:
                Nothing:
            """
        )

        assert class_block(source, "Nothing") == "class Nothing(Enum):\n    pass"


class TestModuleLayout:
    def test_output_order(self, smarthome_grammar) -> None:
        source = emit_module(smarthome_grammar)

        positions = [
            source.index("class Intent:"),
            source.index("class NotUnderstood(Intent):"),
            source.index("class ChangeLightState(Intent):"),
            source.index("class ChangeColor(Intent):"),
            source.index("class StopMusic(Intent):"),
            source.index("class OnOrOff(Enum):"),
            source.index("class Location(Enum):"),
            source.index("class Color(Enum):"),
            source.index("def decode("),
            source.index("def from_inference("),
        ]
        assert positions == sorted(positions)

    def test_decoder_cases_follow_declaration_order(self, smarthome_grammar) -> None:
        source = emit_module(smarthome_grammar)

        lines = [line.strip() for line in source.splitlines()]
        cases = [line for line in lines if line.startswith("case ")]
        assert cases == [
            'case "ChangeLightState":',
            'case "ChangeColor":',
            'case "StopMusic":',
            "case _:",
        ]

    def test_generated_source_is_valid_python(self, smarthome_grammar) -> None:
        tree = ast.parse(emit_module(smarthome_grammar))

        names = {
            node.name
            for node in tree.body
            if isinstance(node, (ast.ClassDef, ast.FunctionDef))
        }
        assert {"Intent", "NotUnderstood", "ChangeLightState", "OnOrOff", "decode"} <= names

    def test_top_level_names_match_reserved_module_names(self, smarthome_grammar) -> None:
        from rhinogen.core.identifiers import GENERATED_MODULE_NAMES

        tree = ast.parse(emit_module(smarthome_grammar))
        declared = {
            node.name
            for node in tree.body
            if isinstance(node, (ast.ClassDef, ast.FunctionDef)) and not node.name.startswith("_")
        }
        declared |= {
            alias.asname or alias.name
            for node in tree.body
            if isinstance(node, (ast.Import, ast.ImportFrom))
            for alias in node.names
        }
        grammar_names = {
            "ChangeLightState",
            "ChangeColor",
            "StopMusic",
            "OnOrOff",
            "Location",
            "Color",
        }
        assert declared - grammar_names <= GENERATED_MODULE_NAMES

    def test_output_is_deterministic(self, smarthome_yaml) -> None:
        first = compile_context(smarthome_yaml, source="smarthome.yml")
        second = compile_context(smarthome_yaml, source="smarthome.yml")

        assert first == second

    def test_emitter_instances_render_identically(self, smarthome_grammar) -> None:
        from rhinogen.codegen.declarations import build_module_decl

        module = build_module_decl(smarthome_grammar)

        assert PythonEmitter().render(module) == PythonEmitter().render(module)

    def test_source_in_docstring(self, smarthome_grammar) -> None:
        source = emit_module(smarthome_grammar)

        assert source.startswith('"""\nTyped intents for the Rhino context \'smarthome.yml\'.')

    def test_windows_source_path_is_escaped(self) -> None:
        grammar = build_grammar_from_text(
            "context:\n  expressions:\n    Foo: [bla]\n", source="C:\\Users\\me\\context.yml"
        )

        ast.parse(emit_module(grammar))

    def test_without_source(self) -> None:
        source = compile_yaml(
            """
            context:
              expressions:
                Foo: [bla]
            """
        )

        assert source.startswith('"""\nTyped intents for the Rhino context.\n')

    def test_ends_with_single_newline(self, smarthome_grammar) -> None:
        source = emit_module(smarthome_grammar)

        assert source.endswith("return value\n")
        assert not source.endswith("\n\n")

    def test_project_in_docstring(self, smarthome_yaml) -> None:
        source = compile_context(smarthome_yaml, source="smarthome.yml", project="smarthome")

        assert source.startswith(
            '"""\nTyped intents for the Rhino context '
            "'smarthome.yml' of project 'smarthome'.\n"
        )

    def test_builtins_are_qualified(self, smarthome_grammar) -> None:
        source = emit_module(smarthome_grammar)

        assert "except builtins.ValueError:" in source
        assert "builtins.super(InferenceError, self).__init__(" in source
        assert "super()" not in source


class TestDecoderLocals:
    def test_decoder_body_only_binds_underscore_names(self, smarthome_grammar) -> None:
        tree = ast.parse(emit_module(smarthome_grammar))
        functions = {node.name: node for node in tree.body if isinstance(node, ast.FunctionDef)}
        body = functions["_decode"]

        params = [arg.arg for arg in body.args.args]
        assert params == ["_understood", "_intent", "_slots"]
        stores = {
            node.id
            for node in ast.walk(body)
            if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store)
        }
        assert all(name.startswith("_") for name in stores)

    def test_decode_delegates(self, smarthome_grammar) -> None:
        source = emit_module(smarthome_grammar)

        assert "    return _decode(understood, intent, slots)\n" in source
