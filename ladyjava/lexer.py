from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ladyjava.errors import LexicalError
from ladyjava.tokens import Token, TokenType


# Tried in this order at every scan position; the first pattern that matches wins,
# even if a later one would match a longer lexeme.
LEXICAL_RULES: Tuple[Tuple[TokenType, str], ...] = (
	(TokenType.BLOCK_COMMENT, r"(?s)/\*.*?\*/"),
	(TokenType.LINE_COMMENT, r"//[^\n]*(?:\n|\Z)"),
	(TokenType.WHITE_SPACE, r" "),
	(TokenType.TAB, r"\t"),
	(TokenType.NEW_LINE, r"\r?\n"),
	(TokenType.CLOSE_BRACE, r"\)"),
	(TokenType.OPEN_BRACE, r"\("),
	(TokenType.OPENING_CURLY_BRACE, r"\{"),
	(TokenType.CLOSING_CURLY_BRACE, r"\}"),
	(TokenType.DOUBLE_CONSTANT, r"\b\d{1,9}\.\d{1,32}\b"),
	(TokenType.INT_CONSTANT, r"\b\d{1,9}\b"),
	(TokenType.PLUS, r"\+"),
	(TokenType.MINUS, r"-"),
	(TokenType.MULTIPLY, r"\*"),
	(TokenType.DIVIDE, r"/"),
	(TokenType.POINT, r"\."),
	(TokenType.EQUAL_EQUAL, r"=="),
	(TokenType.EQUAL, r"="),
	(TokenType.EXCLAME_EQUAL, r"!="),
	(TokenType.GREATER, r">"),
	(TokenType.LESS, r"<"),
	(TokenType.STATIC, r"\bstatic\b"),
	(TokenType.PUBLIC, r"\bpublic\b"),
	(TokenType.PRIVATE, r"\bprivate\b"),
	(TokenType.INT, r"\bint\b"),
	(TokenType.DOUBLE, r"\bdouble\b"),
	(TokenType.VOID, r"\bvoid\b"),
	(TokenType.FALSE, r"\bfalse\b"),
	(TokenType.TRUE, r"\btrue\b"),
	(TokenType.NULL, r"\bnull\b"),
	(TokenType.RETURN, r"\breturn\b"),
	(TokenType.NEW, r"\bnew\b"),
	(TokenType.CLASS, r"\bclass\b"),
	(TokenType.IF, r"\bif\b"),
	(TokenType.WHILE, r"\bwhile\b"),
	(TokenType.ELSE, r"\belse\b"),
	(TokenType.SEMICOLON, r";"),
	(TokenType.COMMA, r","),
	(TokenType.IDENTIFIER, r"\b[a-zA-Z][0-9a-zA-Z_]{0,31}\b"),
)


def filter_auxiliary(tokens: Sequence[Token]) -> List[Token]:
	"""Drop comments, whitespace, tabs and newlines."""
	return [t for t in tokens if not t.kind.is_auxiliary]


class Lexer:
	"""Priority-ordered regular expression tokenizer.

	The lexer remembers the result of its last ``tokenize`` call. After a
	``LexicalError`` the ``tokens`` property still holds the tokens produced
	before the failing position.
	"""

	def __init__(self, rules: Sequence[Tuple[TokenType, str]] = LEXICAL_RULES) -> None:
		# Word boundaries must see the text before the scan position, so patterns
		# are matched against the whole source with a start offset, never a slice.
		self._rules: List[Tuple[TokenType, re.Pattern[str]]] = [
			(kind, re.compile(pattern, re.ASCII)) for kind, pattern in rules
		]
		self._tokens: List[Token] = []

	@property
	def tokens(self) -> List[Token]:
		return list(self._tokens)

	@property
	def filtered_tokens(self) -> List[Token]:
		return filter_auxiliary(self._tokens)

	def tokenize(self, source: str) -> List[Token]:
		self._tokens = []
		position = 0
		while position < len(source):
			token = self._separate_token(source, position)
			if token is None:
				raise LexicalError(position, self._tokens)
			self._tokens.append(token)
			position = token.end
		return list(self._tokens)

	def _separate_token(self, source: str, position: int) -> Optional[Token]:
		for kind, pattern in self._rules:
			m = pattern.match(source, position)
			# An empty match would never advance the scan.
			if m is not None and m.end() > position:
				return Token(position, m.end(), m.group(0), kind)
		return None


def tokenize(source: str) -> List[Token]:
	return Lexer().tokenize(source)
