from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from ladyjava.errors import GrammarFileError, GrammarFormatError

EPSILON_NAME = "EPSILON"
END_OF_INPUT_NAME = "$"

DEFAULT_GRAMMAR_PATH = Path(__file__).resolve().parent / "grammars" / "java_subset.txt"


class SymbolKind(Enum):
	TERMINAL = auto()
	NONTERMINAL = auto()


@dataclass(frozen=True, eq=False)
class Symbol:
	"""Grammar symbol. Identity is the integer ``code``, never the name or kind."""

	code: int
	name: str
	kind: SymbolKind

	@property
	def is_terminal(self) -> bool:
		return self.kind is SymbolKind.TERMINAL

	@property
	def is_nonterminal(self) -> bool:
		return self.kind is SymbolKind.NONTERMINAL

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Symbol):
			return NotImplemented
		return self.code == other.code

	def __hash__(self) -> int:
		return hash(self.code)

	def __str__(self) -> str:
		return self.name


EPSILON = Symbol(0, EPSILON_NAME, SymbolKind.TERMINAL)
END_OF_INPUT = Symbol(-1, END_OF_INPUT_NAME, SymbolKind.TERMINAL)


@dataclass(frozen=True)
class Rule:
	number: int
	lhs: Symbol
	rhs: Tuple[Symbol, ...]

	def __post_init__(self) -> None:
		if not self.lhs.is_nonterminal:
			raise ValueError(f"Left side of rule {self.number} must be a nonterminal, got '{self.lhs}'")
		if len(self.rhs) == 0:
			raise ValueError(f"Rule {self.number} has an empty right side; use {EPSILON_NAME}")

	@property
	def is_epsilon(self) -> bool:
		return self.rhs == (EPSILON,)

	def __str__(self) -> str:
		return f"{self.lhs} -> " + " ".join(s.name for s in self.rhs)


@dataclass(frozen=True)
class Grammar:
	start: Symbol
	rules: Tuple[Rule, ...]
	# Every interned name, EPSILON included.
	symbols: Dict[str, Symbol]

	@property
	def alphabet(self) -> FrozenSet[Symbol]:
		return frozenset(self.symbols.values())

	@property
	def terminals(self) -> List[Symbol]:
		"""Terminals other than EPSILON, in code order."""
		return sorted((s for s in self.symbols.values() if s.is_terminal and s != EPSILON), key=lambda s: s.code)

	@property
	def nonterminals(self) -> List[Symbol]:
		return sorted((s for s in self.symbols.values() if s.is_nonterminal), key=lambda s: s.code)

	def rules_for(self, lhs: Symbol) -> List[Rule]:
		return [r for r in self.rules if r.lhs == lhs]

	def symbol(self, name: str) -> Optional[Symbol]:
		return self.symbols.get(name)

	def __str__(self) -> str:
		return "\n".join(str(r) for r in self.rules)


def _classify(name: str) -> SymbolKind:
	# Part of the grammar text format: an uppercase initial marks a nonterminal.
	return SymbolKind.NONTERMINAL if name[0].isupper() else SymbolKind.TERMINAL


def parse_grammar_lines(lines: Iterable[str]) -> Grammar:
	"""
	Build a grammar from definition lines, e.g.:

	  Goal -> A
	  A    -> ( A ) | Two
	  Two  -> a | EPSILON

	Notes:
	- One nonterminal per line; '|' separates alternatives.
	- Names are whitespace-separated: '( A )' is three symbols, '(A)' is one.
	- The head of the first line is the start symbol.
	- Blank lines and lines starting with '#' are ignored.
	- An empty alternative is an epsilon production.
	"""
	symbols: Dict[str, Symbol] = {EPSILON_NAME: EPSILON}
	rules: List[Rule] = []
	next_code = 1

	def intern(name: str, kind: SymbolKind) -> Symbol:
		nonlocal next_code
		sym = symbols.get(name)
		if sym is None:
			sym = Symbol(next_code, name, kind)
			symbols[name] = sym
			next_code += 1
		return sym

	for lineno, raw_line in enumerate(lines, start=1):
		parts = (raw_line or "").split()
		if not parts or parts[0].startswith("#"):
			continue
		if len(parts) < 2 or parts[1] != "->":
			raise GrammarFormatError(f"expected 'Head -> ...', got {raw_line.strip()!r}", lineno)

		lhs = intern(parts[0], SymbolKind.NONTERMINAL)
		if not lhs.is_nonterminal:
			raise GrammarFormatError(f"terminal '{lhs}' cannot be defined by a rule", lineno)

		alternatives: List[List[Symbol]] = [[]]
		for name in parts[2:]:
			if name == "|":
				alternatives.append([])
			else:
				alternatives[-1].append(intern(name, _classify(name)))

		for rhs in alternatives:
			rules.append(Rule(len(rules), lhs, tuple(rhs) if rhs else (EPSILON,)))

	if not rules:
		raise GrammarFormatError("grammar has no rules", 0)

	return Grammar(start=rules[0].lhs, rules=tuple(rules), symbols=symbols)


def parse_grammar_text(text: str) -> Grammar:
	return parse_grammar_lines(text.splitlines())


def load_grammar(path: Union[str, Path]) -> Grammar:
	path = Path(path)
	try:
		text = path.read_text(encoding="utf-8")
	except FileNotFoundError as exc:
		raise GrammarFileError(path) from exc
	except (OSError, UnicodeDecodeError) as exc:
		raise GrammarFileError(path, "unreadable") from exc
	return parse_grammar_text(text)


def default_grammar() -> Grammar:
	"""The bundled grammar for the Java subset recognized by the lexer."""
	return load_grammar(DEFAULT_GRAMMAR_PATH)
