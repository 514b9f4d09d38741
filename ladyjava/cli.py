"""Command line front end: tokenize, parse, and inspect LL(1) tables.

Usage:
  python -m ladyjava tokenize Main.java
  python -m ladyjava parse Main.java --grammar grammar.txt --trace
  python -m ladyjava tables --working
  python -m ladyjava export --out tables/ --xlsx
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ladyjava.engine import AnalysisEngine
from ladyjava.errors import GrammarFileError, GrammarFormatError, LexicalError, TerminalMappingError
from ladyjava.export import export_csv, try_export_xlsx
from ladyjava.grammar import DEFAULT_GRAMMAR_PATH, Grammar, load_grammar
from ladyjava.lexer import Lexer
from ladyjava.ll1 import LL1Analysis, Passes, TableKey, analyze_grammar, ordered
from ladyjava.tokens import Token

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="ladyjava", description="Lexer and LL(1) predictive parser for a Java subset.")
	parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
	sub = parser.add_subparsers(dest="command", required=True)

	p_tok = sub.add_parser("tokenize", help="print the token list of a source file")
	p_tok.add_argument("source", type=Path)
	p_tok.add_argument("--all", action="store_true", help="include comments and whitespace")

	p_parse = sub.add_parser("parse", help="tokenize and parse a source file")
	p_parse.add_argument("source", type=Path)
	p_parse.add_argument("--grammar", type=Path, default=DEFAULT_GRAMMAR_PATH)
	p_parse.add_argument("--trace", action="store_true", help="print the parser stack at each step")
	p_parse.add_argument(
		"--max-steps", type=int, default=None, help="expansions allowed between two matched tokens (default: derived from the grammar)"
	)

	p_tables = sub.add_parser("tables", help="print FIRST, FOLLOW and the parsing table")
	p_tables.add_argument("--grammar", type=Path, default=DEFAULT_GRAMMAR_PATH)
	p_tables.add_argument("--working", action="store_true", help="show the fixpoint passes")

	p_export = sub.add_parser("export", help="write the LL(1) tables as CSV (and xlsx)")
	p_export.add_argument("--grammar", type=Path, default=DEFAULT_GRAMMAR_PATH)
	p_export.add_argument("--out", type=Path, default=Path("."))
	p_export.add_argument("--xlsx", action="store_true", help="also write LL1_Parse_Table.xlsx (needs openpyxl)")
	return parser


def format_tokens(tokens: Sequence[Token]) -> List[str]:
	"""Number the significant tokens; auxiliary ones are listed unnumbered."""
	lines: List[str] = []
	i = 0
	for token in tokens:
		if token.kind.is_auxiliary:
			lines.append(f"    {token}")
		else:
			i += 1
			lines.append(f"{i:<3} {token}")
	return lines


def format_passes(title: str, passes: Passes) -> List[str]:
	lines = [f"=== {title} ==="]
	for n, changes in enumerate(passes, start=1):
		lines.append(f"pass {n}:")
		for nt in ordered(changes):
			lines.append(f"  {nt}: + " + " ".join(s.name for s in changes[nt]))
	return lines


def format_analysis(analysis: LL1Analysis) -> List[str]:
	grammar = analysis.grammar
	lines = ["=== GRAMMAR ==="]
	lines.extend(f"{r.number}: {r}" for r in grammar.rules)

	lines.append("")
	lines.append("=== FIRST ===")
	for nt in grammar.nonterminals:
		lines.append(f"{nt}: " + " ".join(s.name for s in ordered(analysis.first[nt])))

	lines.append("")
	lines.append("=== FOLLOW ===")
	for nt in grammar.nonterminals:
		lines.append(f"{nt}: " + " ".join(s.name for s in ordered(analysis.follow[nt])))

	lines.append("")
	lines.append("=== LL(1) TABLE (non-empty cells) ===")
	for nt in grammar.nonterminals:
		for t in analysis.lookahead_terminals():
			rule = analysis.table.get(TableKey(nt, t))
			if rule is not None:
				lines.append(f"M[{nt}, {t}] = {rule}")

	lines.append("")
	lines.append("=== Conflicts ===")
	lines.extend(str(c) for c in analysis.conflicts)
	if not analysis.conflicts:
		lines.append("none")
	return lines


def cmd_tokenize(args: argparse.Namespace) -> int:
	source = args.source.read_text(encoding="utf-8")
	lexer = Lexer()
	error: Optional[LexicalError] = None
	try:
		lexer.tokenize(source)
	except LexicalError as exc:
		error = exc
	# Tokens produced before a lexical error are still listed.
	_print_lines(format_tokens(lexer.tokens if args.all else lexer.filtered_tokens))
	if error is not None:
		print(f"[ERROR] {error.message}")
		return EXIT_REJECTED
	return EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
	source = args.source.read_text(encoding="utf-8")
	engine = AnalysisEngine.from_grammar_file(args.grammar, max_steps=args.max_steps)
	art = engine.analyze(source, trace=args.trace)

	print("Tokens:")
	_print_lines(format_tokens(art.tokens))
	print("")
	print("Applied rules:")
	for rule in art.applied_rules:
		print(f"{rule.number}: {rule}")
	if args.trace:
		print("")
		for step in art.steps:
			print("STACK:", " ".join(step.stack), "| IN:", " ".join(step.remaining_input), "| ACT:", step.action)

	for diagnostic in art.diagnostics:
		where = "-" if diagnostic.position is None else diagnostic.position
		print(f"[{diagnostic.severity.name}] {diagnostic.stage.name.lower()} @ {where}: {diagnostic.message}")
		if diagnostic.hint:
			print(f"    hint: {diagnostic.hint}")
	print(f"Tokens: {len(art.filtered_tokens)} | Rules: {len(art.applied_rules)} | Time: {art.duration_ms:.2f} ms")

	return EXIT_REJECTED if art.has_errors else EXIT_OK


def cmd_tables(args: argparse.Namespace) -> int:
	grammar: Grammar = load_grammar(args.grammar)
	analysis = analyze_grammar(grammar, include_working=args.working)
	_print_lines(format_analysis(analysis))
	if args.working:
		print("")
		_print_lines(format_passes("FIRST passes", analysis.first_passes or []))
		print("")
		_print_lines(format_passes("FOLLOW passes", analysis.follow_passes or []))
	return EXIT_OK


def cmd_export(args: argparse.Namespace) -> int:
	analysis = analyze_grammar(load_grammar(args.grammar))
	written = export_csv(analysis, args.out)
	print("Wrote:", ", ".join(p.name for p in written))
	if args.xlsx:
		ok = try_export_xlsx(analysis, args.out)
		print("Wrote LL1_Parse_Table.xlsx:", ok)
	print("LL(1) conflicts:", len(analysis.conflicts))
	return EXIT_OK


COMMANDS = {
	"tokenize": cmd_tokenize,
	"parse": cmd_parse,
	"tables": cmd_tables,
	"export": cmd_export,
}


def _print_lines(lines: Sequence[str]) -> None:
	for line in lines:
		print(line)


def main(argv: Optional[Sequence[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
	try:
		return COMMANDS[args.command](args)
	except (GrammarFileError, GrammarFormatError) as exc:
		print(f"error: {exc}", file=sys.stderr)
		return EXIT_USAGE
	except TerminalMappingError as exc:
		print(f"internal error: {exc}", file=sys.stderr)
		return EXIT_INTERNAL
	except (OSError, UnicodeDecodeError) as exc:
		print(f"error: {exc}", file=sys.stderr)
		return EXIT_USAGE


if __name__ == "__main__":
	sys.exit(main())
