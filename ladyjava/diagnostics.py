from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


class Severity(Enum):
	INFO = auto()
	WARNING = auto()
	ERROR = auto()


class Stage(Enum):
	LEXER = auto()
	GRAMMAR = auto()
	PARSER = auto()


@dataclass
class Diagnostic:
	severity: Severity
	stage: Stage
	message: str
	# Character offset for the lexer, consumed-token count for the parser.
	position: Optional[int] = None
	hint: Optional[str] = None


class DiagnosticEngine:
	def __init__(self) -> None:
		self._items: List[Diagnostic] = []

	@property
	def items(self) -> List[Diagnostic]:
		return self._items

	@property
	def has_errors(self) -> bool:
		return any(d.severity is Severity.ERROR for d in self._items)

	def report(
		self,
		severity: Severity,
		stage: Stage,
		message: str,
		position: Optional[int] = None,
		hint: Optional[str] = None,
	) -> None:
		self._items.append(Diagnostic(severity, stage, message, position, hint))
