"""Tests for the lexer + parser pipeline and its diagnostics."""

from __future__ import annotations

import pytest

from ladyjava.diagnostics import DiagnosticEngine, Severity, Stage
from ladyjava.engine import AnalysisEngine
from ladyjava.errors import GrammarFileError, TerminalMappingError
from ladyjava.grammar import parse_grammar_text

from .conftest import PAREN_GRAMMAR, SAMPLE_PROGRAM, rule_texts


@pytest.fixture(scope="module")
def engine() -> AnalysisEngine:
	return AnalysisEngine()


class TestDefaultEngine:
	def test_sample_is_accepted(self, engine):
		art = engine.analyze(SAMPLE_PROGRAM)
		assert art.accepted
		assert not art.has_errors
		assert art.applied_rules
		assert art.duration_ms >= 0
		assert len(art.tokens) > len(art.filtered_tokens)

	def test_dangling_else_warning(self, engine):
		art = engine.analyze(SAMPLE_PROGRAM)
		assert len(art.conflicts) == 1
		assert [(d.severity, d.stage) for d in art.diagnostics] == [(Severity.WARNING, Stage.GRAMMAR)]
		assert "ElsePart" in art.diagnostics[0].message

	def test_lexical_error(self, engine):
		art = engine.analyze("class A {\n  int x = #;\n}")
		assert not art.accepted
		assert art.applied_rules == []
		error = art.diagnostics[-1]
		assert error.severity is Severity.ERROR
		assert error.stage is Stage.LEXER
		assert error.position == 20
		assert error.message == "Lexical error at position # 20"
		assert error.hint == "Unexpected character '#' at line 2, column 11."
		assert [t.lexeme for t in art.filtered_tokens] == ["class", "A", "{", "int", "x", "="]

	def test_syntax_error(self, engine):
		art = engine.analyze("class A { int x }")
		assert not art.accepted
		assert art.has_errors
		error = art.diagnostics[-1]
		assert error.stage is Stage.PARSER
		assert error.position == 5
		assert error.hint.startswith("Unexpected '}'; expected one of: ")
		assert ";" in error.hint
		assert art.applied_rules

	def test_syntax_error_at_end_of_input(self, engine):
		art = engine.analyze("class A {")
		error = art.diagnostics[-1]
		assert error.position == 3
		assert error.hint.startswith("Unexpected end of input")

	def test_empty_source_is_accepted(self, engine):
		art = engine.analyze("")
		assert art.accepted
		assert rule_texts(art.applied_rules) == ["Program -> EPSILON"]

	def test_trace_only_on_request(self, engine):
		assert engine.analyze("class A { }").steps == []
		steps = engine.analyze("class A { }", trace=True).steps
		assert steps[0].action == "init"
		assert steps[-1].action == "match $"

	def test_calls_are_independent(self, engine):
		engine.analyze("class A { int x }")
		art = engine.analyze("class B { }")
		assert art.accepted
		assert all(d.severity is not Severity.ERROR for d in art.diagnostics)


class TestCustomGrammar:
	def test_paren_grammar(self):
		engine = AnalysisEngine(parse_grammar_text(PAREN_GRAMMAR))
		art = engine.analyze("( a )")
		assert art.accepted
		assert art.diagnostics == []
		assert rule_texts(art.applied_rules) == ["S -> ( S )", "S -> a"]

	def test_mapping_error_propagates(self):
		engine = AnalysisEngine(parse_grammar_text("S -> a\n"))
		with pytest.raises(TerminalMappingError):
			engine.analyze("x")

	def test_from_grammar_file(self, tmp_path):
		path = tmp_path / "paren.txt"
		path.write_text(PAREN_GRAMMAR, encoding="utf-8")
		engine = AnalysisEngine.from_grammar_file(path)
		assert engine.analyze("( ( a ) )").accepted

	def test_missing_grammar_file(self, tmp_path):
		with pytest.raises(GrammarFileError):
			AnalysisEngine.from_grammar_file(tmp_path / "missing.txt")

	def test_step_limit_is_a_syntax_diagnostic(self):
		engine = AnalysisEngine(parse_grammar_text("S -> b | S a\n"), max_steps=20)
		art = engine.analyze("b a")
		assert not art.accepted
		assert "step limit" in art.diagnostics[-1].message

	def test_left_recursion_stopped_by_default(self):
		engine = AnalysisEngine(parse_grammar_text("S -> b | S a\n"))
		art = engine.analyze("b", trace=True)
		assert not art.accepted
		assert art.has_errors
		assert len(art.steps) < 10

	def test_trace_limit(self):
		engine = AnalysisEngine(parse_grammar_text(PAREN_GRAMMAR), trace_limit=2)
		art = engine.analyze("( a )", trace=True)
		assert art.accepted
		assert len(art.steps) == 2
		assert art.steps_truncated


class TestDiagnosticEngine:
	def test_report(self):
		diagnostics = DiagnosticEngine()
		assert not diagnostics.has_errors
		diagnostics.report(Severity.WARNING, Stage.GRAMMAR, "w")
		assert not diagnostics.has_errors
		diagnostics.report(Severity.ERROR, Stage.PARSER, "e", 3, "hint")
		assert diagnostics.has_errors
		assert diagnostics.items[-1].position == 3
		assert diagnostics.items[-1].hint == "hint"
