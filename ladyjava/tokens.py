from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
	"""Lexical categories of the Java subset.

	The value of each member is its display name.
	"""

	BLOCK_COMMENT = "BlockComment"
	LINE_COMMENT = "LineComment"
	WHITE_SPACE = "WhiteSpace"
	TAB = "Tab"
	NEW_LINE = "NewLine"
	CLOSE_BRACE = "CloseBrace"
	OPEN_BRACE = "OpenBrace"
	OPENING_CURLY_BRACE = "OpeningCurlyBrace"
	CLOSING_CURLY_BRACE = "ClosingCurlyBrace"
	DOUBLE_CONSTANT = "DoubleConstant"
	INT_CONSTANT = "IntConstant"
	PLUS = "Plus"
	MINUS = "Minus"
	MULTIPLY = "Multiply"
	DIVIDE = "Divide"
	POINT = "Point"
	EQUAL_EQUAL = "EqualEqual"
	EQUAL = "Equal"
	EXCLAME_EQUAL = "ExclameEqual"
	GREATER = "Greater"
	LESS = "Less"
	STATIC = "Static"
	PUBLIC = "Public"
	PRIVATE = "Private"
	INT = "Int"
	DOUBLE = "Double"
	VOID = "Void"
	FALSE = "False"
	TRUE = "True"
	NULL = "Null"
	RETURN = "Return"
	NEW = "New"
	CLASS = "Class"
	IF = "If"
	WHILE = "While"
	ELSE = "Else"
	SEMICOLON = "Semicolon"
	COMMA = "Comma"
	IDENTIFIER = "Identifier"

	@property
	def is_auxiliary(self) -> bool:
		return self in AUXILIARY_TYPES

	def __str__(self) -> str:
		return self.value


AUXILIARY_TYPES = frozenset(
	{
		TokenType.BLOCK_COMMENT,
		TokenType.LINE_COMMENT,
		TokenType.WHITE_SPACE,
		TokenType.TAB,
		TokenType.NEW_LINE,
	}
)


@dataclass(frozen=True)
class Token:
	begin: int
	end: int
	lexeme: str
	kind: TokenType

	def __str__(self) -> str:
		if self.kind.is_auxiliary:
			return f"{self.kind}   [{self.begin};{self.end}]"
		return f"{self.kind}  '{self.lexeme}' [{self.begin};{self.end}]"
