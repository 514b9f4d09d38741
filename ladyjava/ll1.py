from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple

from ladyjava.grammar import END_OF_INPUT, EPSILON, Grammar, Rule, Symbol

SymbolSets = Dict[Symbol, Set[Symbol]]
# One entry per fixpoint pass: nonterminal -> symbols newly added during that pass.
Passes = List[Dict[Symbol, List[Symbol]]]


class TableKey(NamedTuple):
	nonterminal: Symbol
	terminal: Symbol


ParsingTable = Dict[TableKey, Rule]


@dataclass(frozen=True)
class TableConflict:
	key: TableKey
	replaced: Rule
	winner: Rule

	def __str__(self) -> str:
		return f"Conflict at M[{self.key.nonterminal}, {self.key.terminal}]: {self.replaced} replaced by {self.winner}"


def ordered(symbols: Iterable[Symbol]) -> List[Symbol]:
	"""Symbols in grammar order (by code), for stable output."""
	return sorted(symbols, key=lambda s: s.code)


def first_of_sequence(seq: Sequence[Symbol], first: Mapping[Symbol, Set[Symbol]]) -> Set[Symbol]:
	"""
	FIRST(seq) computed left-to-right.
	Returns terminals plus EPSILON (if every symbol of the sequence can derive epsilon).
	"""
	if len(seq) == 0:
		return {EPSILON}

	out: Set[Symbol] = set()
	for sym in seq:
		f = first.get(sym)
		if f is None:
			f = {sym} if sym.is_terminal else set()
		out |= f - {EPSILON}
		if EPSILON not in f:
			return out
	out.add(EPSILON)
	return out


def compute_first_sets_with_trace(grammar: Grammar) -> Tuple[SymbolSets, Passes]:
	"""
	Compute FIRST for every symbol of the alphabet and also return an iteration log.
	Passes over all rules are repeated until one of them adds nothing.
	"""
	first: SymbolSets = {s: ({s} if s.is_terminal else set()) for s in grammar.alphabet}
	first[END_OF_INPUT] = {END_OF_INPUT}
	passes: Passes = []

	changed = True
	while changed:
		changed = False
		pass_changes: Dict[Symbol, List[Symbol]] = {}
		for rule in grammar.rules:
			target = first[rule.lhs]
			added = first_of_sequence(rule.rhs, first) - target
			if added:
				target |= added
				pass_changes.setdefault(rule.lhs, []).extend(ordered(added))
				changed = True
		if pass_changes:
			passes.append(pass_changes)

	return first, passes


def compute_first_sets(grammar: Grammar) -> SymbolSets:
	first, _ = compute_first_sets_with_trace(grammar)
	return first


def compute_follow_sets_with_trace(grammar: Grammar, first: Mapping[Symbol, Set[Symbol]]) -> Tuple[SymbolSets, Passes]:
	"""
	Compute FOLLOW for every nonterminal and also return an iteration log.

	For A -> alpha B beta, FOLLOW(B) gets FIRST(beta) without EPSILON, plus
	FOLLOW(A) when beta is empty or nullable. Mutually dependent FOLLOW sets are
	resolved by repeating passes until nothing grows.
	"""
	follow: SymbolSets = {nt: set() for nt in grammar.nonterminals}
	follow[grammar.start].add(END_OF_INPUT)
	passes: Passes = []

	changed = True
	while changed:
		changed = False
		pass_changes: Dict[Symbol, List[Symbol]] = {}
		for rule in grammar.rules:
			rhs = rule.rhs
			for i, sym in enumerate(rhs):
				if not sym.is_nonterminal:
					continue

				first_beta = first_of_sequence(rhs[i + 1 :], first)
				incoming = first_beta - {EPSILON}
				if EPSILON in first_beta:
					incoming |= follow[rule.lhs]

				added = incoming - follow[sym]
				if added:
					follow[sym] |= added
					pass_changes.setdefault(sym, []).extend(ordered(added))
					changed = True
		if pass_changes:
			passes.append(pass_changes)

	return follow, passes


def compute_follow_sets(grammar: Grammar, first: Mapping[Symbol, Set[Symbol]]) -> SymbolSets:
	follow, _ = compute_follow_sets_with_trace(grammar, first)
	return follow


def build_ll1_table(
	grammar: Grammar, first: Mapping[Symbol, Set[Symbol]], follow: Mapping[Symbol, Set[Symbol]]
) -> Tuple[ParsingTable, List[TableConflict]]:
	"""
	Returns (table, conflicts).

	Rules are entered in grammar order. When two rules claim the same cell the
	later one wins; every such overwrite is reported in ``conflicts``.
	"""
	table: ParsingTable = {}
	conflicts: List[TableConflict] = []

	def put(key: TableKey, rule: Rule) -> None:
		existing = table.get(key)
		if existing is not None and existing != rule:
			conflicts.append(TableConflict(key, existing, rule))
		table[key] = rule

	for rule in grammar.rules:
		first_rhs = first_of_sequence(rule.rhs, first)

		for t in ordered(first_rhs - {EPSILON}):
			put(TableKey(rule.lhs, t), rule)

		if EPSILON in first_rhs:
			for t in ordered(follow.get(rule.lhs, set())):
				put(TableKey(rule.lhs, t), rule)

	return table, conflicts


@dataclass
class LL1Analysis:
	grammar: Grammar
	first: SymbolSets
	follow: SymbolSets
	table: ParsingTable
	conflicts: List[TableConflict] = field(default_factory=list)
	first_passes: Optional[Passes] = None
	follow_passes: Optional[Passes] = None

	@property
	def is_ll1(self) -> bool:
		return not self.conflicts

	def lookahead_terminals(self) -> List[Symbol]:
		return self.grammar.terminals + [END_OF_INPUT]


def analyze_grammar(grammar: Grammar, *, include_working: bool = False) -> LL1Analysis:
	first, first_passes = compute_first_sets_with_trace(grammar)
	follow, follow_passes = compute_follow_sets_with_trace(grammar, first)
	table, conflicts = build_ll1_table(grammar, first, follow)
	return LL1Analysis(
		grammar=grammar,
		first=first,
		follow=follow,
		table=table,
		conflicts=conflicts,
		first_passes=first_passes if include_working else None,
		follow_passes=follow_passes if include_working else None,
	)
