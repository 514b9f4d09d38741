from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ladyjava.diagnostics import Diagnostic, DiagnosticEngine, Severity, Stage
from ladyjava.errors import LexicalError, ParseError
from ladyjava.grammar import Grammar, Rule, default_grammar, load_grammar
from ladyjava.lexer import Lexer
from ladyjava.ll1 import LL1Analysis, TableConflict, analyze_grammar
from ladyjava.parser import ParseStep, PredictiveParser
from ladyjava.tokens import Token

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Analysis pipeline


@dataclass
class AnalysisArtifacts:
	tokens: List[Token]
	filtered_tokens: List[Token]
	applied_rules: List[Rule]
	steps: List[ParseStep]
	steps_truncated: bool
	conflicts: List[TableConflict]
	diagnostics: List[Diagnostic]
	accepted: bool
	has_errors: bool
	duration_ms: float


class AnalysisEngine:
	"""Runs the lexer and the predictive parser over one source text.

	The grammar tables are built once per engine. Lexical and syntax errors end
	up as diagnostics; a token without grammar terminal is a configuration
	defect and propagates as ``TerminalMappingError``.
	"""

	def __init__(
		self,
		grammar: Optional[Grammar] = None,
		*,
		max_steps: Optional[int] = None,
		trace_limit: Optional[int] = None,
	) -> None:
		self.grammar = grammar if grammar is not None else default_grammar()
		self.analysis: LL1Analysis = analyze_grammar(self.grammar)
		self.max_steps = max_steps
		self.trace_limit = trace_limit
		if self.analysis.conflicts:
			logger.info("Grammar is not LL(1): %d table conflicts, later rules win", len(self.analysis.conflicts))

	@classmethod
	def from_grammar_file(
		cls, path: Union[str, Path], *, max_steps: Optional[int] = None, trace_limit: Optional[int] = None
	) -> "AnalysisEngine":
		return cls(load_grammar(path), max_steps=max_steps, trace_limit=trace_limit)

	def new_parser(self) -> PredictiveParser:
		return PredictiveParser(
			self.grammar, analysis=self.analysis, max_steps=self.max_steps, trace_limit=self.trace_limit
		)

	def analyze(self, source: str, *, trace: bool = False) -> AnalysisArtifacts:
		diagnostics = DiagnosticEngine()
		start = time.perf_counter()
		for conflict in self.analysis.conflicts:
			diagnostics.report(Severity.WARNING, Stage.GRAMMAR, str(conflict))

		lexer = Lexer()
		parser = self.new_parser()
		accepted = False
		try:
			lexer.tokenize(source)
		except LexicalError as exc:
			diagnostics.report(Severity.ERROR, Stage.LEXER, exc.message, exc.position, _lexical_hint(source, exc.position))
		else:
			try:
				parser.parse(lexer.filtered_tokens, trace=trace)
				accepted = True
			except ParseError as exc:
				diagnostics.report(
					Severity.ERROR,
					Stage.PARSER,
					exc.message,
					exc.position,
					_syntax_hint(lexer.filtered_tokens, exc),
				)

		duration_ms = (time.perf_counter() - start) * 1000
		logger.debug("Analyzed %d chars in %.2f ms (accepted=%s)", len(source), duration_ms, accepted)
		return AnalysisArtifacts(
			tokens=lexer.tokens,
			filtered_tokens=lexer.filtered_tokens,
			applied_rules=parser.applied_rules,
			steps=parser.steps,
			steps_truncated=parser.trace_truncated,
			conflicts=list(self.analysis.conflicts),
			diagnostics=diagnostics.items,
			accepted=accepted,
			has_errors=diagnostics.has_errors,
			duration_ms=duration_ms,
		)


def _lexical_hint(source: str, position: int) -> Optional[str]:
	if position >= len(source):
		return None
	line = source.count("\n", 0, position) + 1
	column = position - (source.rfind("\n", 0, position) + 1) + 1
	return f"Unexpected character {source[position]!r} at line {line}, column {column}."


def _syntax_hint(tokens: Sequence[Token], exc: ParseError) -> Optional[str]:
	if exc.position < len(tokens):
		found = f"'{tokens[exc.position].lexeme}'"
	else:
		found = "end of input"
	if not exc.expected:
		return f"Unexpected {found}."
	return f"Unexpected {found}; expected one of: " + ", ".join(exc.expected)
