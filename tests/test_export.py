"""Tests for the CSV / xlsx table export."""

from __future__ import annotations

import csv

import pytest

from ladyjava.export import export_csv, grammar_rows, set_rows, table_rows, try_export_xlsx
from ladyjava.ll1 import analyze_grammar


def read_csv(path):
	with path.open(newline="", encoding="utf-8") as f:
		return list(csv.reader(f))


class TestRows:
	def test_grammar_rows(self, paren_grammar):
		assert grammar_rows(paren_grammar) == [[0, "S", "( S )"], [1, "S", "a"]]

	def test_set_rows(self, expr_grammar):
		analysis = analyze_grammar(expr_grammar)
		rows = dict(set_rows(expr_grammar, analysis.follow))
		assert rows["E"] == "$ )"
		assert rows["Tp"] == "$ + )"

	def test_table_rows(self, paren_grammar):
		rows = table_rows(analyze_grammar(paren_grammar))
		assert rows[0] == ["NonTerminal", "(", ")", "a", "$"]
		assert rows[1] == ["S", "S -> ( S )", "", "S -> a", ""]


class TestFiles:
	def test_export_csv(self, expr_grammar, tmp_path):
		out_dir = tmp_path / "nested" / "out"
		written = export_csv(analyze_grammar(expr_grammar), out_dir)
		assert [p.name for p in written] == [
			"LL1_Grammar.csv",
			"LL1_FIRST.csv",
			"LL1_FOLLOW.csv",
			"LL1_ParseTable.csv",
		]
		grammar = read_csv(out_dir / "LL1_Grammar.csv")
		assert grammar[0] == ["Rule", "NonTerminal", "Right side"]
		assert grammar[1] == ["0", "E", "T Ep"]
		table = read_csv(out_dir / "LL1_ParseTable.csv")
		assert len(table) == 1 + len(expr_grammar.nonterminals)

	def test_export_xlsx(self, paren_grammar, tmp_path):
		openpyxl = pytest.importorskip("openpyxl")
		assert try_export_xlsx(analyze_grammar(paren_grammar), tmp_path)
		wb = openpyxl.load_workbook(tmp_path / "LL1_Parse_Table.xlsx")
		assert wb.sheetnames == ["Grammar", "FIRST", "FOLLOW", "ParseTable"]
		assert wb["ParseTable"]["B2"].value == "S -> ( S )"
