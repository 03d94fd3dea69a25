"""
Tests for nesting, complexity, Halstead and maintainability metrics.

Run with: python -m pytest codescope/metrics/test_complexity.py -v
"""

import math

import pytest

from codescope.dialects import LanguageDialect, get_rules
from codescope.lexing.source import LexedSource
from codescope.lexing.tokenizer import tokenize
from codescope.metrics.complexity import (
    cognitive_complexity,
    cyclomatic_complexity,
    halstead_metrics,
    maintainability_index,
    nesting_profile,
)

JS = LanguageDialect.JAVASCRIPT
PY = LanguageDialect.PYTHON


def lex(text, dialect=JS):
    return LexedSource.from_text(text, dialect)


class TestNesting:
    """Tests for nesting_profile."""

    def test_brace_depth(self):
        """Test brace counting tracks the deepest level."""
        source = lex("function f() {\n  if (a) {\n    go();\n  }\n}\n")
        profile = nesting_profile(source)
        assert profile.max_depth == 2
        assert profile.line_levels == [0, 1, 2, 2, 1]

    def test_stray_closing_brace_clamps_at_zero(self):
        """Test extra closing braces never drive depth negative."""
        profile = nesting_profile(lex("}\n}\nif (a) {\n}\n"))
        assert profile.line_levels == [0, 0, 0, 1]
        assert profile.max_depth == 1

    def test_braces_in_strings_and_comments_ignored(self):
        """Test braces inside strings and comments do not count."""
        profile = nesting_profile(lex('const s = "{{{"; // {{\n/* { */\n'))
        assert profile.max_depth == 0

    def test_indent_levels(self):
        """Test indentation levels for Python."""
        source = lex("def f(x):\n    if x:\n        return 1\n    return 0\n", PY)
        profile = nesting_profile(source)
        assert profile.line_levels == [0, 1, 2, 1]
        assert profile.max_depth == 2

    def test_colon_opens_level_with_narrow_indent(self):
        """Test a line after ':' is at least one level deeper."""
        profile = nesting_profile(lex("if x:\n  y = 1\n", PY))
        assert profile.line_levels == [0, 1]

    def test_blank_lines_keep_previous_level(self):
        """Test blank lines inherit the previous level."""
        profile = nesting_profile(lex("if x:\n    a = 1\n\n    b = 2\n", PY))
        assert profile.line_levels == [0, 1, 1, 1]


class TestCyclomatic:
    """Tests for cyclomatic_complexity."""

    def test_repeated_if_scenario(self):
        """Test five one-line ifs give 1 + 5."""
        text = "if (a == null) { eval(x); }\n" * 5
        assert cyclomatic_complexity(tokenize(text, JS), get_rules(JS)) == 6

    def test_boolean_operators_count(self):
        """Test && and || are decision points."""
        tokens = tokenize("if (a && b || c) { x = d ? 1 : 2; }", JS)
        assert cyclomatic_complexity(tokens, get_rules(JS)) == 5

    def test_python_keywords(self):
        """Test Python decision keywords."""
        tokens = tokenize("if a and b:\n    pass\nelif c or d:\n    pass\nfor x in y:\n    pass", PY)
        assert cyclomatic_complexity(tokens, get_rules(PY)) == 6

    def test_python_match_case(self):
        """Test each case arm of a match statement is a decision point."""
        text = (
            "match command:\n"
            "    case 'start':\n"
            "        run()\n"
            "    case 'stop':\n"
            "        halt()\n"
            "    case _:\n"
            "        pass\n"
        )
        assert cyclomatic_complexity(tokenize(text, PY), get_rules(PY)) == 4

    def test_keyword_inside_string_ignored(self):
        """Test decision words inside strings are not counted."""
        tokens = tokenize('const s = "if while for";', JS)
        assert cyclomatic_complexity(tokens, get_rules(JS)) == 1

    def test_wrapping_in_if_is_monotonic(self):
        """Test wrapping logic in one more if never lowers the metrics."""
        flat = "function f(a) {\n  if (a) {\n    run(a);\n  }\n}\n"
        wrapped = "function f(a) {\n  if (b) {\n  if (a) {\n    run(a);\n  }\n  }\n}\n"
        flat_source, wrapped_source = lex(flat), lex(wrapped)
        assert nesting_profile(wrapped_source).max_depth >= nesting_profile(flat_source).max_depth
        assert (
            cyclomatic_complexity(wrapped_source.tokens(), get_rules(JS))
            >= cyclomatic_complexity(flat_source.tokens(), get_rules(JS))
        )


class TestCognitive:
    """Tests for cognitive_complexity."""

    def test_nested_decisions_weigh_more(self):
        """Test a decision at depth 2 contributes 2."""
        source = lex("if (a) {\n  if (b) {\n    if (c) {\n      go();\n    }\n  }\n}\n")
        assert cognitive_complexity(source, nesting_profile(source)) == 4

    def test_flat_decisions(self):
        """Test top-level decisions contribute 1 each."""
        source = lex("if (a) { x(); }\nif (b) { y(); }\n")
        assert cognitive_complexity(source, nesting_profile(source)) == 2


class TestHalstead:
    """Tests for halstead_metrics."""

    def test_empty(self):
        """Test no tokens gives zeros without dividing by zero."""
        metrics = halstead_metrics([])
        assert metrics.volume == 0.0
        assert metrics.difficulty == 0.0
        assert metrics.effort == 0.0

    def test_simple_expression(self):
        """Test counts and derived values for 'a = b + a'."""
        metrics = halstead_metrics(tokenize("a = b + a", JS))
        assert (metrics.n1, metrics.n2, metrics.N1, metrics.N2) == (2, 2, 2, 3)
        assert metrics.volume == pytest.approx(5 * math.log2(4))
        assert metrics.difficulty == pytest.approx(1.5)
        assert metrics.effort == pytest.approx(15.0)


class TestMaintainabilityIndex:
    """Tests for maintainability_index."""

    def test_trivial_code_near_max(self):
        """Test an empty unit scores close to 100."""
        assert maintainability_index(0.0, 1, 0) == pytest.approx(99.87, abs=0.01)

    def test_clamped_to_zero(self):
        """Test huge inputs clamp at 0."""
        assert maintainability_index(1e300, 1000, 10 ** 9) == 0.0

    def test_finite_for_zero_volume(self):
        """Test zero volume and zero LOC do not hit log(0)."""
        assert math.isfinite(maintainability_index(0.0, 1, 0))
