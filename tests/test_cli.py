"""Tests for the command line front end."""

from __future__ import annotations

import pytest

from ladyjava.cli import EXIT_INTERNAL, EXIT_OK, EXIT_REJECTED, EXIT_USAGE, format_tokens, main
from ladyjava.lexer import tokenize

from .conftest import PAREN_GRAMMAR, SAMPLE_PROGRAM


@pytest.fixture
def source_file(tmp_path):
	def _write(text: str, name: str = "Main.java"):
		path = tmp_path / name
		path.write_text(text, encoding="utf-8")
		return path

	return _write


class TestTokenize:
	def test_lists_significant_tokens(self, source_file, capsys):
		assert main(["tokenize", str(source_file("int x = 5;"))]) == EXIT_OK
		out = capsys.readouterr().out.splitlines()
		assert out[0] == "1   Int  'int' [0;3]"
		assert len(out) == 5

	def test_all_includes_whitespace(self, source_file, capsys):
		assert main(["tokenize", "--all", str(source_file("int x"))]) == EXIT_OK
		out = capsys.readouterr().out.splitlines()
		assert out == ["1   Int  'int' [0;3]", "    WhiteSpace   [3;4]", "2   Identifier  'x' [4;5]"]

	def test_lexical_error(self, source_file, capsys):
		assert main(["tokenize", str(source_file("int #"))]) == EXIT_REJECTED
		out = capsys.readouterr().out
		assert "Int  'int'" in out
		assert "[ERROR] Lexical error at position # 4" in out

	def test_format_tokens_numbering(self):
		lines = format_tokens(tokenize("a b"))
		assert lines[0].startswith("1   ")
		assert lines[1].startswith("    ")
		assert lines[2].startswith("2   ")


class TestParse:
	def test_accepts_sample(self, source_file, capsys):
		assert main(["parse", str(source_file(SAMPLE_PROGRAM))]) == EXIT_OK
		out = capsys.readouterr().out
		assert "Applied rules:" in out
		assert "Program -> ClassDecl Program" in out
		assert "[WARNING] grammar" in out

	def test_rejects_syntax_error(self, source_file, capsys):
		assert main(["parse", str(source_file("class A { int x }"))]) == EXIT_REJECTED
		out = capsys.readouterr().out
		assert "[ERROR] parser @ 5: Syntax error after token #5" in out
		assert "hint: Unexpected '}'" in out

	def test_custom_grammar_and_trace(self, source_file, capsys):
		grammar = source_file(PAREN_GRAMMAR, "paren.txt")
		args = ["parse", str(source_file("( a )")), "--grammar", str(grammar), "--trace"]
		assert main(args) == EXIT_OK
		out = capsys.readouterr().out
		assert "0: S -> ( S )" in out
		assert "1: S -> a" in out
		assert "STACK: $ S | IN: ( a ) $ | ACT: init" in out

	def test_missing_grammar(self, source_file, tmp_path, capsys):
		args = ["parse", str(source_file("a")), "--grammar", str(tmp_path / "none.txt")]
		assert main(args) == EXIT_USAGE
		assert "Grammar file not found" in capsys.readouterr().err

	def test_bad_grammar(self, source_file, capsys):
		grammar = source_file("S a\n", "bad.txt")
		assert main(["parse", str(source_file("a")), "--grammar", str(grammar)]) == EXIT_USAGE
		assert "line 1" in capsys.readouterr().err

	def test_missing_source(self, tmp_path, capsys):
		assert main(["parse", str(tmp_path / "nope.java")]) == EXIT_USAGE
		assert capsys.readouterr().err.startswith("error:")

	def test_grammar_lexer_mismatch(self, source_file, capsys):
		grammar = source_file("S -> a\n", "a.txt")
		assert main(["parse", str(source_file("x")), "--grammar", str(grammar)]) == EXIT_INTERNAL
		assert "internal error" in capsys.readouterr().err


class TestTables:
	def test_sections(self, source_file, capsys):
		grammar = source_file("E -> E + id | id\n", "lr.txt")
		assert main(["tables", "--grammar", str(grammar)]) == EXIT_OK
		out = capsys.readouterr().out.splitlines()
		for header in ("=== GRAMMAR ===", "=== FIRST ===", "=== FOLLOW ===", "=== Conflicts ==="):
			assert header in out
		assert "E: id" in out
		assert "E: $ +" in out
		assert "M[E, id] = E -> id" in out
		assert "Conflict at M[E, id]: E -> E + id replaced by E -> id" in out

	def test_working(self, source_file, capsys):
		grammar = source_file(PAREN_GRAMMAR, "paren.txt")
		assert main(["tables", "--grammar", str(grammar), "--working"]) == EXIT_OK
		out = capsys.readouterr().out.splitlines()
		assert "=== FIRST passes ===" in out
		assert "pass 1:" in out
		assert out[out.index("=== Conflicts ===") + 1] == "none"


class TestExport:
	def test_writes_csv(self, tmp_path, capsys):
		out_dir = tmp_path / "tables"
		assert main(["export", "--out", str(out_dir)]) == EXIT_OK
		assert (out_dir / "LL1_ParseTable.csv").exists()
		out = capsys.readouterr().out
		assert "LL1_Grammar.csv" in out
		assert "LL(1) conflicts: 1" in out


def test_command_is_required(capsys):
	with pytest.raises(SystemExit) as info:
		main([])
	assert info.value.code == 2
