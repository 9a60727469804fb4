"""
Teeny Parser Test Suite
=======================

Tests for the recursive descent parser: grammar recognition, the
semantic checks it performs inline, and the C code it drives into the
emitter.

Test Organization
-----------------
- TestStatements: Code generated for each statement form
- TestExpressions: Operator handling and precedence by nesting
- TestCSpelling: Names, numbers and strings rewritten for C
- TestComparisons: IF/WHILE conditions
- TestVariables: Declaration by LET/INPUT, use before declaration
- TestLabels: LABEL/GOTO and the end-of-program check
- TestSyntaxErrors: Grammar violations
"""

import pytest
from teeny.compiler.lexer import Lexer
from teeny.compiler.parser import (
    Parser,
    parse_source,
    c_name,
    c_number,
    c_string,
    C_NAME_PREFIX,
)
from teeny.compiler.emitter import Emitter
from teeny.compiler.tokens import TokenKind
from teeny.errors import (
    TeenySyntaxError,
    UnexpectedTokenError,
    MissingComparisonError,
    InvalidStatementError,
    SemanticError,
    UndeclaredVariableError,
    DuplicateLabelError,
    UndeclaredLabelError,
    IllegalCharacterError,
)


HEADER = "#include <stdio.h>\nint main(void) {\n"
FOOTER = "return 0;\n}\n"


def parse(source: str):
    """Run the parser and return it together with its emitter."""
    emitter = Emitter()
    parser = Parser(Lexer(source, "<test>"), emitter)
    parser.program()
    return parser, emitter


def body(source: str) -> str:
    """Generated statements, without the fixed preamble lines and footer."""
    _, emitter = parse(source)
    assert emitter.body.endswith(FOOTER)
    return emitter.body[:-len(FOOTER)]


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Code generated for each statement form."""

    def test_lookahead_filled_on_construction(self):
        parser = Parser(Lexer("LET a = 1"), Emitter())
        assert parser.check_token(TokenKind.LET)
        assert parser.check_peek(TokenKind.IDENTIFIER)
        parser.advance()
        assert parser.current_token.text == "a"
        assert parser.check_peek(TokenKind.ASSIGN)

    def test_empty_program(self):
        assert parse_source("") == HEADER + FOOTER

    def test_blank_lines_only(self):
        assert parse_source("\n\n  \n# comment\n") == HEADER + FOOTER

    def test_print_string(self):
        assert body('PRINT "hello, world"') == 'printf("hello, world\\n");\n'

    def test_print_expression(self):
        assert body("PRINT 1 + 2") == 'printf("%.2f\\n", (float)(1 + 2));\n'

    def test_print_precision(self):
        emitter = Emitter()
        Parser(Lexer("PRINT 1"), emitter, print_precision=4).program()
        assert 'printf("%.4f\\n", (float)(1));' in emitter.body

    def test_let(self):
        parser, emitter = parse("LET a = 5")
        assert emitter.preamble == HEADER + "float t_a;\n"
        assert emitter.body == "t_a = 5;\n" + FOOTER
        assert parser.symbols == {"a"}

    def test_let_then_print(self):
        """Assign then print a variable."""
        assert parse_source("LET a = 5\nPRINT a\n") == (
            "#include <stdio.h>\n"
            "int main(void) {\n"
            "float t_a;\n"
            "t_a = 5;\n"
            'printf("%.2f\\n", (float)(t_a));\n'
            "return 0;\n"
            "}\n"
        )

    def test_input(self):
        parser, emitter = parse("INPUT x")
        assert "float t_x;\n" in emitter.preamble
        assert emitter.body == (
            'if (0 == scanf("%f", &t_x)) {\n'
            "t_x = 0;\n"
            'scanf("%*s");\n'
            "}\n"
        ) + FOOTER
        assert "x" in parser.symbols

    def test_if(self):
        assert body('IF 1 > 0 THEN\nPRINT "hi"\nENDIF\n') == (
            "if (1 > 0) {\n"
            'printf("hi\\n");\n'
            "}\n"
        )

    def test_while(self):
        source = "LET n = 3\nWHILE n > 0 REPEAT\nLET n = n - 1\nENDWHILE\n"
        assert body(source) == (
            "t_n = 3;\n"
            "while (t_n > 0) {\n"
            "t_n = t_n - 1;\n"
            "}\n"
        )

    def test_empty_blocks(self):
        """IF and WHILE bodies may be empty."""
        assert body("IF 1 == 1 THEN\nENDIF\nWHILE 0 != 0 REPEAT\nENDWHILE") == (
            "if (1 == 1) {\n"
            "}\n"
            "while (0 != 0) {\n"
            "}\n"
        )

    def test_nested_blocks(self):
        source = (
            "LET i = 0\n"
            "WHILE i < 3 REPEAT\n"
            "    IF i == 1 THEN\n"
            '        PRINT "one"\n'
            "    ENDIF\n"
            "    LET i = i + 1\n"
            "ENDWHILE\n"
        )
        assert body(source) == (
            "t_i = 0;\n"
            "while (t_i < 3) {\n"
            "if (t_i == 1) {\n"
            'printf("one\\n");\n'
            "}\n"
            "t_i = t_i + 1;\n"
            "}\n"
        )

    def test_label_and_goto(self):
        assert body("LABEL top\nGOTO top\n") == "t_top:;\ngoto t_top;\n"

    def test_extra_newlines_between_statements(self):
        assert body("\n\nLET a = 1\n\n\n\nPRINT a\n\n") == (
            "t_a = 1;\n"
            'printf("%.2f\\n", (float)(t_a));\n'
        )

    def test_comments_ignored(self):
        assert body("# set a\nLET a = 1 # one\n") == "t_a = 1;\n"


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Expressions are emitted in source order with operators passed through."""

    def test_operators_pass_through(self):
        assert body("LET a = 1 + 2 - 3 * 4 / 5") == "t_a = 1 + 2 - 3 * 4 / 5;\n"

    def test_unary(self):
        assert body("LET a = -1\nLET b = +a * -2") == "t_a = -1;\nt_b = +t_a * -2;\n"

    def test_binary_minus_before_unary_minus(self):
        """Never produces the C decrement operator."""
        assert body("LET a = 1\nLET b = a - -a") == "t_a = 1;\nt_b = t_a - -t_a;\n"

    def test_decimal_numbers(self):
        assert body("PRINT 2.50 * 4") == 'printf("%.2f\\n", (float)(2.50 * 4));\n'

    def test_double_unary_rejected(self):
        """Only one sign is allowed before a primary."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("LET a = --1")
        assert exc_info.value.found == "-"

    def test_missing_operand(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("LET a = 1 +")
        assert exc_info.value.found == "newline"
        assert exc_info.value.expected == "a number or variable"

    def test_string_in_expression_rejected(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse('LET a = "text"')
        assert exc_info.value.found == '"text"'


# =============================================================================
# C Spelling Tests
# =============================================================================

class TestCSpelling:
    """Teeny names, numbers and strings keep their meaning in C."""

    @pytest.mark.parametrize("text,expected", [
        ("0", "0"),
        ("00", "0"),
        ("010", "10"),
        ("08", "8"),
        ("007.5", "7.5"),
        ("0.25", "0.25"),
        ("100", "100"),
        ("1.050", "1.050"),
    ])
    def test_leading_zeros_dropped(self, text, expected):
        """C would read a leading zero as an octal constant."""
        assert c_number(text) == expected

    def test_leading_zeros_in_statement(self):
        assert body("LET x = 010\nPRINT 08") == (
            "t_x = 10;\n"
            'printf("%.2f\\n", (float)(8));\n'
        )

    @pytest.mark.parametrize("name", ["printf", "scanf", "main", "int", "do", "return", "EOF"])
    def test_c_names_prefixed(self, name):
        """Names reserved or declared in C are usable as Teeny names."""
        parser, emitter = parse(f"LET {name} = 1\nPRINT {name}\nLABEL {name}\nGOTO {name}")
        assert f"float {C_NAME_PREFIX}{name};\n" in emitter.preamble
        assert body(f"LET {name} = 1\nPRINT {name}\nLABEL {name}\nGOTO {name}") == (
            f"{c_name(name)} = 1;\n"
            f'printf("%.2f\\n", (float)({c_name(name)}));\n'
            f"{c_name(name)}:;\n"
            f"goto {c_name(name)};\n"
        )
        assert parser.symbols == {name}
        assert list(parser.labels_declared) == [name]

    def test_input_target_prefixed(self):
        _, emitter = parse("INPUT int")
        assert 'scanf("%f", &t_int)' in emitter.body
        assert "t_int = 0;\n" in emitter.body

    def test_single_question_mark_unchanged(self):
        assert body('PRINT "ready?"') == 'printf("ready?\\n");\n'

    @pytest.mark.parametrize("text,expected", [
        ("??/", "?\\?/"),
        ("??=", "?\\?="),
        ("???/", "?\\?\\?/"),
        ("what??!", "what?\\?!"),
        ("? ?", "? ?"),
    ])
    def test_trigraphs_broken_up(self, text, expected):
        """No two '?' stay adjacent, so no trigraph can form."""
        assert c_string(text) == expected
        assert "??" not in c_string(text)

    def test_trigraph_in_print(self):
        assert body('PRINT "huh??/"') == 'printf("huh?\\?/\\n");\n'


# =============================================================================
# Comparison Tests
# =============================================================================

class TestComparisons:
    """IF/WHILE conditions."""

    @pytest.mark.parametrize("op", ["==", "!=", "<", "<=", ">", ">="])
    def test_each_comparison_operator(self, op):
        assert body(f"IF 1 {op} 2 THEN\nENDIF").startswith(f"if (1 {op} 2) {{\n")

    def test_chained_comparison(self):
        assert body("IF 1 < 2 < 3 THEN\nENDIF").startswith("if (1 < 2 < 3) {\n")

    def test_comparison_of_expressions(self):
        source = "LET a = 1\nWHILE a * 2 >= a + 1 REPEAT\nENDWHILE"
        assert "while (t_a * 2 >= t_a + 1) {\n" in body(source)

    def test_missing_comparison(self):
        """A bare expression is not a condition."""
        with pytest.raises(MissingComparisonError) as exc_info:
            parse("IF 1 THEN\nENDIF")
        assert exc_info.value.found == "THEN"
        assert isinstance(exc_info.value, TeenySyntaxError)

    def test_missing_comparison_in_while(self):
        with pytest.raises(MissingComparisonError):
            parse("LET a = 1\nWHILE a REPEAT\nENDWHILE")

    def test_assign_is_not_comparison(self):
        with pytest.raises(MissingComparisonError):
            parse("IF 1 = 1 THEN\nENDIF")


# =============================================================================
# Variable Tests
# =============================================================================

class TestVariables:
    """Declaration by first assignment and use before declaration."""

    def test_declared_once(self):
        _, emitter = parse("LET a = 1\nLET a = 2\nINPUT a")
        assert emitter.preamble.count("float t_a;") == 1

    def test_declarations_precede_statements(self):
        """Declarations found late still land in the preamble."""
        _, emitter = parse("LET a = 1\nPRINT a\nLET b = a\nINPUT c")
        assert emitter.preamble == HEADER + "float t_a;\nfloat t_b;\nfloat t_c;\n"

    def test_undeclared_variable(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            parse("PRINT a\n")
        error = exc_info.value
        assert error.name == "a"
        assert isinstance(error, SemanticError)
        assert (error.location.line, error.location.column) == (1, 7)

    def test_undeclared_in_condition(self):
        with pytest.raises(UndeclaredVariableError):
            parse("IF x > 0 THEN\nENDIF")

    def test_declared_inside_block_is_global(self):
        """There are no scopes: a variable stays declared after its block."""
        source = "IF 1 == 1 THEN\nLET a = 1\nENDIF\nPRINT a"
        assert "printf" in body(source)

    def test_read_before_later_declaration(self):
        """Textual order matters, even inside a loop."""
        with pytest.raises(UndeclaredVariableError):
            parse("WHILE 1 == 1 REPEAT\nPRINT a\nLET a = 1\nENDWHILE")

    def test_let_declares_before_expression(self):
        """The target of LET is declared before its value is parsed."""
        _, emitter = parse("LET a = a + 1")
        assert "float t_a;" in emitter.preamble

    def test_similar_name_hint(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            parse("LET count = 1\nPRINT cont")
        assert exc_info.value.similar_names == ["count"]
        assert "did you mean 'count'?" in str(exc_info.value)

    def test_variables_are_case_sensitive(self):
        with pytest.raises(UndeclaredVariableError):
            parse("LET a = 1\nPRINT A")


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """LABEL/GOTO and the deferred existence check."""

    def test_forward_goto(self):
        """A label may be declared after the GOTO that targets it."""
        assert body("GOTO end\nPRINT 1\nLABEL end") == (
            "goto t_end;\n"
            'printf("%.2f\\n", (float)(1));\n'
            "t_end:;\n"
        )

    def test_unreferenced_label_allowed(self):
        assert body("LABEL unused") == "t_unused:;\n"

    def test_duplicate_label(self):
        with pytest.raises(DuplicateLabelError) as exc_info:
            parse("LABEL L\nGOTO L\nLABEL L\n")
        error = exc_info.value
        assert error.label == "L"
        assert error.location.line == 3
        assert error.original_location.line == 1
        assert "first declared at <test>:1:7" in str(error)

    def test_duplicate_label_far_apart(self):
        source = "LABEL a\nLET x = 1\nWHILE x < 2 REPEAT\nLABEL a\nENDWHILE"
        with pytest.raises(DuplicateLabelError):
            parse(source)

    def test_undeclared_label(self):
        """Reported at the end, after the whole body was read."""
        emitter = Emitter()
        parser = Parser(Lexer("GOTO MISSING\n", "<test>"), emitter)
        with pytest.raises(UndeclaredLabelError) as exc_info:
            parser.program()
        assert exc_info.value.labels == ["MISSING"]
        assert "goto t_MISSING;\n" in emitter.body
        assert "return 0;" not in emitter.body

    def test_undeclared_label_with_same_name_variable(self):
        """Variables and labels are separate namespaces."""
        with pytest.raises(UndeclaredLabelError):
            parse("LET Y = 1\nGOTO Y")

    def test_every_missing_label_reported_once(self):
        source = "GOTO b\nGOTO a\nGOTO b\nLABEL c\nGOTO c\nGOTO d\n"
        with pytest.raises(UndeclaredLabelError) as exc_info:
            parse(source)
        error = exc_info.value
        assert error.labels == ["b", "a", "d"]
        assert [loc.line for loc in error.locations] == [1, 2, 6]
        message = str(error)
        assert message.count("undeclared label 'b'") == 1
        assert "<test>:2:6: error: GOTO to undeclared label 'a'" in message

    def test_earlier_error_wins_over_label_check(self):
        """Fatal errors abort before the end-of-program check."""
        with pytest.raises(UndeclaredVariableError):
            parse("GOTO nowhere\nPRINT x")

    def test_labels_recorded(self):
        parser, _ = parse("LABEL a\nLABEL b\nGOTO a")
        assert list(parser.labels_declared) == ["a", "b"]
        assert list(parser.labels_referenced) == ["a"]


# =============================================================================
# Syntax Error Tests
# =============================================================================

class TestSyntaxErrors:
    """Grammar violations."""

    def test_invalid_statement(self):
        with pytest.raises(InvalidStatementError) as exc_info:
            parse("a = 1")
        assert exc_info.value.found == "a"

    def test_statement_starting_with_number(self):
        with pytest.raises(InvalidStatementError):
            parse("42")

    def test_stray_block_terminator(self):
        with pytest.raises(InvalidStatementError):
            parse("ENDIF")

    def test_missing_newline_between_statements(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("LET a = 1 PRINT a")
        assert exc_info.value.expected == "newline"
        assert exc_info.value.found == "PRINT"

    def test_missing_then(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("IF 1 > 0\nENDIF")
        assert exc_info.value.expected == "THEN"

    def test_missing_repeat(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("WHILE 1 > 0 THEN\nENDWHILE")
        assert exc_info.value.expected == "REPEAT"

    def test_missing_assign(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("LET a 5")
        assert exc_info.value.expected == "'='"

    def test_let_requires_identifier(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("LET 5 = 5")
        assert exc_info.value.expected == "identifier"

    def test_goto_requires_identifier(self):
        with pytest.raises(UnexpectedTokenError):
            parse("GOTO 10")

    def test_keyword_is_not_identifier(self):
        with pytest.raises(UnexpectedTokenError):
            parse("LET PRINT = 1")

    def test_unclosed_if(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("IF 1 > 0 THEN\nPRINT 1\n")
        assert exc_info.value.found == "end of input"
        assert exc_info.value.expected == "ENDIF"

    def test_unclosed_while(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("WHILE 1 > 0 REPEAT\n")
        assert exc_info.value.expected == "ENDWHILE"

    def test_mismatched_terminator(self):
        with pytest.raises(InvalidStatementError):
            parse("IF 1 > 0 THEN\nENDWHILE\n")

    def test_lexical_error_surfaces(self):
        with pytest.raises(IllegalCharacterError):
            parse("LET x = 1.\n")

    def test_error_message_format(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("LET a = 1\nLET b 2")
        assert str(exc_info.value) == (
            "<test>:2:7: error: unexpected token '2'\n"
            "    LET b 2\n"
            "          ^\n"
            "hint: expected '='"
        )
