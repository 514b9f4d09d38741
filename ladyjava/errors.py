"""Exceptions raised by the lexer, the grammar loader and the predictive parser."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
	from ladyjava.tokens import Token


class AnalyzerError(Exception):
	"""A lexical or syntax error found in the analyzed source.

	``position`` is a character offset for the lexer and the number of
	consumed tokens for the parser.
	"""

	def __init__(self, message: str, position: int) -> None:
		super().__init__(message)
		self.message = message
		self.position = position

	def __str__(self) -> str:
		return self.message


class LexicalError(AnalyzerError):
	def __init__(self, position: int, tokens: Optional[Sequence["Token"]] = None) -> None:
		super().__init__(f"Lexical error at position # {position}", position)
		self.tokens: List["Token"] = list(tokens or [])


class ParseError(AnalyzerError):
	def __init__(
		self,
		consumed: int,
		message: Optional[str] = None,
		*,
		expected: Sequence[str] = (),
		found: Optional[str] = None,
	) -> None:
		super().__init__(message or f"Syntax error after token #{consumed}", consumed)
		self.expected: List[str] = list(expected)
		self.found = found

	@property
	def consumed(self) -> int:
		return self.position


class DerivationLimitError(ParseError):
	def __init__(self, consumed: int, max_steps: int) -> None:
		super().__init__(
			consumed,
			f"Derivation step limit ({max_steps}) exceeded with no token matched after token #{consumed}; is the grammar left-recursive?",
		)
		self.max_steps = max_steps


class GrammarFileError(OSError):
	def __init__(self, path: Path, reason: str = "not found") -> None:
		super().__init__(f"Grammar file {reason}: {path}")
		self.path = path
		self.reason = reason


class GrammarFormatError(ValueError):
	def __init__(self, message: str, line: int) -> None:
		super().__init__(f"line {line}: {message}")
		self.line = line


class TerminalMappingError(LookupError):
	"""A token has no terminal in the grammar (grammar and lexer disagree)."""

	def __init__(self, token: "Token") -> None:
		super().__init__(f"No grammar terminal for {token.kind} token '{token.lexeme}' at [{token.begin};{token.end}]")
		self.token = token
