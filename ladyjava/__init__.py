"""
Lexer and LL(1) predictive parser for a small Java subset.

The two entry points used by front ends are ``tokenize(text)`` and
``parse(grammar, tokens)``; ``AnalysisEngine`` runs both and collects
diagnostics.
"""

from __future__ import annotations

from ladyjava.diagnostics import Diagnostic, DiagnosticEngine, Severity, Stage
from ladyjava.engine import AnalysisArtifacts, AnalysisEngine
from ladyjava.errors import (
	AnalyzerError,
	DerivationLimitError,
	GrammarFileError,
	GrammarFormatError,
	LexicalError,
	ParseError,
	TerminalMappingError,
)
from ladyjava.grammar import (
	END_OF_INPUT,
	EPSILON,
	Grammar,
	Rule,
	Symbol,
	SymbolKind,
	default_grammar,
	load_grammar,
	parse_grammar_lines,
	parse_grammar_text,
)
from ladyjava.lexer import Lexer, tokenize
from ladyjava.ll1 import LL1Analysis, TableConflict, TableKey, analyze_grammar
from ladyjava.parser import ParseStep, PredictiveParser, parse
from ladyjava.tokens import Token, TokenType

__all__ = [
	"AnalysisArtifacts",
	"AnalysisEngine",
	"AnalyzerError",
	"DerivationLimitError",
	"Diagnostic",
	"DiagnosticEngine",
	"END_OF_INPUT",
	"EPSILON",
	"Grammar",
	"GrammarFileError",
	"GrammarFormatError",
	"LL1Analysis",
	"Lexer",
	"LexicalError",
	"ParseError",
	"ParseStep",
	"PredictiveParser",
	"Rule",
	"Severity",
	"Stage",
	"Symbol",
	"SymbolKind",
	"TableConflict",
	"TableKey",
	"TerminalMappingError",
	"Token",
	"TokenType",
	"analyze_grammar",
	"default_grammar",
	"load_grammar",
	"parse",
	"parse_grammar_lines",
	"parse_grammar_text",
	"tokenize",
]
