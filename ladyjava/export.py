"""
Export LL(1) artifacts (grammar, FIRST, FOLLOW, parse table) into Excel-friendly files.

Outputs (always):
  - LL1_Grammar.csv
  - LL1_FIRST.csv
  - LL1_FOLLOW.csv
  - LL1_ParseTable.csv

Optional (only if openpyxl is installed, see the ``xlsx`` extra):
  - LL1_Parse_Table.xlsx  (multiple sheets)
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List, Set

from ladyjava.grammar import Grammar, Symbol
from ladyjava.ll1 import LL1Analysis, TableKey, ordered


def grammar_rows(grammar: Grammar) -> List[List[Any]]:
	return [[r.number, r.lhs.name, " ".join(s.name for s in r.rhs)] for r in grammar.rules]


def set_rows(grammar: Grammar, sets: Dict[Symbol, Set[Symbol]]) -> List[List[str]]:
	return [[nt.name, " ".join(s.name for s in ordered(sets.get(nt, set())))] for nt in grammar.nonterminals]


def table_rows(analysis: LL1Analysis) -> List[List[str]]:
	terms = analysis.lookahead_terminals()
	rows: List[List[str]] = [["NonTerminal"] + [t.name for t in terms]]
	for nt in analysis.grammar.nonterminals:
		row = [nt.name]
		for t in terms:
			rule = analysis.table.get(TableKey(nt, t))
			row.append(str(rule) if rule is not None else "")
		rows.append(row)
	return rows


def _write_csv(path: Path, rows: List[List[Any]]) -> Path:
	with path.open("w", newline="", encoding="utf-8") as f:
		w = csv.writer(f)
		w.writerows(rows)
	return path


def export_csv(analysis: LL1Analysis, out_dir: Path) -> List[Path]:
	grammar = analysis.grammar
	out_dir.mkdir(parents=True, exist_ok=True)
	return [
		_write_csv(out_dir / "LL1_Grammar.csv", [["Rule", "NonTerminal", "Right side"]] + grammar_rows(grammar)),
		_write_csv(out_dir / "LL1_FIRST.csv", [["FIRST", "Symbols"]] + set_rows(grammar, analysis.first)),
		_write_csv(out_dir / "LL1_FOLLOW.csv", [["FOLLOW", "Symbols"]] + set_rows(grammar, analysis.follow)),
		_write_csv(out_dir / "LL1_ParseTable.csv", table_rows(analysis)),
	]


def try_export_xlsx(analysis: LL1Analysis, out_dir: Path) -> bool:
	try:
		import openpyxl  # type: ignore
		from openpyxl.utils import get_column_letter  # type: ignore
	except ImportError:
		return False

	grammar = analysis.grammar
	wb = openpyxl.Workbook()
	wb.remove(wb.active)

	sheets = [
		("Grammar", [["Rule", "NonTerminal", "Right side"]] + grammar_rows(grammar)),
		("FIRST", [["NonTerminal", "Symbols"]] + set_rows(grammar, analysis.first)),
		("FOLLOW", [["NonTerminal", "Symbols"]] + set_rows(grammar, analysis.follow)),
		("ParseTable", table_rows(analysis)),
	]
	for title, rows in sheets:
		ws = wb.create_sheet(title)
		for row in rows:
			ws.append(row)

	# Basic column sizing
	for sheet in wb.worksheets:
		for col in range(1, sheet.max_column + 1):
			letter = get_column_letter(col)
			sheet.column_dimensions[letter].width = 22 if col == 1 else 18

	out_dir.mkdir(parents=True, exist_ok=True)
	wb.save(out_dir / "LL1_Parse_Table.xlsx")
	return True
