"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Iterable, List, Set

import pytest

from ladyjava.grammar import Grammar, Symbol, parse_grammar_text
from ladyjava.lexer import Lexer
from ladyjava.tokens import Token, TokenType

SAMPLE_PROGRAM = """\
public class Main {
	private int count = 0;

	/* entry point */
	public static void main ( ) {
		int x = 5;
		// count down
		while ( x > 0 ) x = x - 1;
		if ( x == 0 ) count = count + 1; else count = 2.5;
		return;
	}
}
"""

PAREN_GRAMMAR = "S -> ( S ) | a\n"

EXPR_GRAMMAR = """\
E -> T Ep
Ep -> + T Ep | EPSILON
T -> F Tp
Tp -> * F Tp | EPSILON
F -> ( E ) | id
"""


@pytest.fixture
def lex():
	"""Return a helper that tokenizes source and drops auxiliary tokens."""

	def _lex(source: str) -> List[Token]:
		lexer = Lexer()
		lexer.tokenize(source)
		return lexer.filtered_tokens

	return _lex


@pytest.fixture
def paren_grammar() -> Grammar:
	return parse_grammar_text(PAREN_GRAMMAR)


@pytest.fixture
def expr_grammar() -> Grammar:
	return parse_grammar_text(EXPR_GRAMMAR)


def kinds(tokens: Iterable[Token]) -> List[TokenType]:
	return [t.kind for t in tokens]


def names(symbols: Iterable[Symbol]) -> Set[str]:
	return {s.name for s in symbols}


def rule_texts(rules) -> List[str]:
	return [str(r) for r in rules]
