from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ladyjava.errors import DerivationLimitError, ParseError, TerminalMappingError
from ladyjava.grammar import END_OF_INPUT, EPSILON, Grammar, Rule, Symbol
from ladyjava.ll1 import LL1Analysis, TableKey, analyze_grammar
from ladyjava.tokens import Token, TokenType

# Token kinds whose lexeme varies; they map to a generic grammar terminal.
GENERIC_TERMINALS: Dict[TokenType, str] = {
	TokenType.IDENTIFIER: "id",
	TokenType.INT_CONSTANT: "intConst",
	TokenType.DOUBLE_CONSTANT: "doubleConst",
}

@dataclass(frozen=True)
class ParseStep:
	stack: List[str]
	remaining_input: List[str]
	action: str


class PredictiveParser:
	"""Table-driven LL(1) parser.

	FIRST/FOLLOW sets and the parsing table are computed once, when the parser
	is created, and are never modified afterwards. Each ``parse`` call starts
	from a fresh stack; ``applied_rules`` and ``steps`` describe the last call,
	including a failed one.

	``max_steps`` bounds the expansions made between two matched tokens, which
	only a left-recursive grammar can exhaust. When it is None the bound is
	``len(grammar.rules) * (h + 1)``, with ``h`` the stack height at the last
	match. ``trace_limit`` caps the number of recorded steps; later steps are
	dropped and ``trace_truncated`` is set.
	"""

	def __init__(
		self,
		grammar: Grammar,
		*,
		analysis: Optional[LL1Analysis] = None,
		max_steps: Optional[int] = None,
		trace_limit: Optional[int] = None,
	) -> None:
		self.grammar = grammar
		self.analysis = analysis if analysis is not None else analyze_grammar(grammar)
		self.max_steps = max_steps
		self.trace_limit = trace_limit
		self._applied: List[Rule] = []
		self._steps: List[ParseStep] = []
		self._trace_truncated = False

	@property
	def applied_rules(self) -> List[Rule]:
		return list(self._applied)

	@property
	def steps(self) -> List[ParseStep]:
		return list(self._steps)

	@property
	def trace_truncated(self) -> bool:
		return self._trace_truncated

	def expansion_limit(self, stack_height: int) -> int:
		if self.max_steps is not None:
			return self.max_steps
		return len(self.grammar.rules) * (stack_height + 1)

	def terminal_for(self, token: Token) -> Symbol:
		# A terminal spelled like the lexeme wins; identifiers and literals
		# otherwise fall back to their generic terminal.
		for name in (token.lexeme, GENERIC_TERMINALS.get(token.kind)):
			sym = self.grammar.symbol(name) if name else None
			if sym is not None and sym.is_terminal and sym != EPSILON:
				return sym
		raise TerminalMappingError(token)

	def expected_terminals(self, nonterminal: Symbol) -> List[str]:
		keys = [k for k in self.analysis.table if k.nonterminal == nonterminal]
		return [k.terminal.name for k in sorted(keys, key=lambda k: k.terminal.code)]

	def parse(self, tokens: Sequence[Token], *, trace: bool = False) -> List[Rule]:
		"""
		Parse a token sequence that no longer contains auxiliary tokens and
		return the rules of the leftmost derivation, in expansion order.

		Raises ParseError with the number of tokens matched so far, or
		TerminalMappingError when a token has no terminal in the grammar.
		"""
		self._applied = []
		self._steps = []
		self._trace_truncated = False

		inp = [self.terminal_for(t) for t in tokens] + [END_OF_INPUT]
		stack: List[Symbol] = [END_OF_INPUT, self.grammar.start]
		consumed = 0
		# Expansions since the last matched token.
		expansions = 0
		limit = self.expansion_limit(len(stack))

		def snapshot(action: str) -> None:
			if not trace:
				return
			if self.trace_limit is not None and len(self._steps) >= self.trace_limit:
				self._trace_truncated = True
				return
			self._steps.append(
				ParseStep(
					stack=[s.name for s in stack],
					remaining_input=[s.name for s in inp[consumed:]],
					action=action,
				)
			)

		snapshot("init")

		while stack and consumed < len(inp):
			top = stack[-1]
			cur = inp[consumed]

			if top.is_terminal:
				if top != cur:
					raise ParseError(
						consumed,
						f"Syntax error after token #{consumed}: expected '{top}' but found '{cur}'",
						expected=[top.name],
						found=cur.name,
					)
				stack.pop()
				consumed += 1
				expansions = 0
				limit = self.expansion_limit(len(stack))
				snapshot(f"match {cur}")
				continue

			expansions += 1
			if expansions > limit:
				raise DerivationLimitError(consumed, limit)

			rule = self.analysis.table.get(TableKey(top, cur))
			if rule is None:
				raise ParseError(
					consumed,
					f"Syntax error after token #{consumed}: no rule for M[{top}, {cur}]",
					expected=self.expected_terminals(top),
					found=cur.name,
				)
			stack.pop()
			for sym in reversed(rule.rhs):
				if sym != EPSILON:
					stack.append(sym)
			self._applied.append(rule)
			snapshot(str(rule))

		if stack or consumed < len(inp):
			raise ParseError(consumed)
		return list(self._applied)


def parse(grammar: Grammar, tokens: Sequence[Token]) -> List[Rule]:
	return PredictiveParser(grammar).parse(tokens)
