from __future__ import annotations

import logging
from dataclasses import is_dataclass
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ladyjava.engine import AnalysisEngine
from ladyjava.errors import GrammarFormatError, LexicalError, TerminalMappingError
from ladyjava.grammar import Grammar, Rule, parse_grammar_lines
from ladyjava.lexer import Lexer
from ladyjava.ll1 import Passes, TableKey, analyze_grammar, ordered
from ladyjava.tokens import Token

logger = logging.getLogger(__name__)

app = FastAPI(title="Lady Java Front End", version="1.0.0")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

# Recorded parser steps per traced request; each step copies the stack and the remaining input.
MAX_TRACE_STEPS = 2000

# Tables for the bundled grammar are built once; each request gets its own parser.
DEFAULT_ENGINE = AnalysisEngine(trace_limit=MAX_TRACE_STEPS)


class TokenizeRequest(BaseModel):
	source: str


class ParseRequest(BaseModel):
	source: str
	# Optional: grammar definition lines ("Head -> a B | EPSILON") instead of the bundled grammar
	grammar_lines: list[str] | None = None
	trace: bool = False


class LL1Request(BaseModel):
	grammar_lines: list[str] | None = None
	# Optional: include FIRST/FOLLOW fixpoint passes ("show working")
	include_working: bool = False


def _to_json(obj: Any, *, depth: int = 0, max_depth: int = 12) -> Any:
	"""Best-effort conversion of analysis artifacts to JSON-safe structures."""
	if depth > max_depth:
		return {"_truncated": True}
	if obj is None:
		return None
	if isinstance(obj, (str, int, float, bool)):
		return obj
	if isinstance(obj, (list, tuple)):
		return [_to_json(x, depth=depth + 1, max_depth=max_depth) for x in obj]
	if isinstance(obj, dict):
		return {str(k): _to_json(v, depth=depth + 1, max_depth=max_depth) for k, v in obj.items()}
	if is_dataclass(obj):
		data: Dict[str, Any] = {}
		for k, v in obj.__dict__.items():
			data[k] = _to_json(v, depth=depth + 1, max_depth=max_depth)
		return data
	# Enums (Severity/Stage/TokenType)
	if hasattr(obj, "name") and hasattr(obj, "value"):
		return getattr(obj, "name")
	# Fallback
	return str(obj)


def _token_json(t: Token) -> Dict[str, Any]:
	return {
		"kind": t.kind.value,
		"lexeme": t.lexeme,
		"begin": t.begin,
		"end": t.end,
		"auxiliary": t.kind.is_auxiliary,
	}


def _rule_json(r: Rule) -> Dict[str, Any]:
	return {"number": r.number, "lhs": r.lhs.name, "rhs": [s.name for s in r.rhs], "text": str(r)}


def _passes_json(passes: Optional[Passes]) -> Optional[List[Dict[str, List[str]]]]:
	if passes is None:
		return None
	return [{nt.name: [s.name for s in changes[nt]] for nt in ordered(changes)} for changes in passes]


def _grammar_from_lines(lines: List[str]) -> Grammar:
	try:
		return parse_grammar_lines(lines)
	except GrammarFormatError as exc:
		raise HTTPException(status_code=400, detail=f"Invalid grammar: {exc}") from exc


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
	return HTMLResponse(
		"<h2>Lady Java Front End API</h2>"
		"<p>POST <code>/api/tokenize</code> with JSON: <code>{\"source\": \"...\"}</code></p>"
		"<p>POST <code>/api/parse</code> with JSON: <code>{\"source\": \"...\", \"grammar_lines\": [...]}</code></p>"
		"<p>POST <code>/api/ll1</code> with JSON: <code>{\"grammar_lines\": [...], \"include_working\": true}</code></p>"
	)


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


@app.post("/api/tokenize")
def tokenize_source(req: TokenizeRequest) -> Dict[str, Any]:
	lexer = Lexer()
	error = None
	try:
		lexer.tokenize(req.source)
	except LexicalError as exc:
		error = {"message": exc.message, "position": exc.position}
	return {
		"token_count": len(lexer.tokens),
		"tokens": [_token_json(t) for t in lexer.tokens],
		"filtered": [_token_json(t) for t in lexer.filtered_tokens],
		"error": error,
	}


@app.post("/api/parse")
def parse_source(req: ParseRequest) -> Dict[str, Any]:
	if req.grammar_lines:
		engine = AnalysisEngine(_grammar_from_lines(req.grammar_lines), trace_limit=MAX_TRACE_STEPS)
	else:
		engine = DEFAULT_ENGINE

	try:
		art = engine.analyze(req.source, trace=req.trace)
	except TerminalMappingError as exc:
		logger.warning("Lexer and grammar disagree: %s", exc)
		raise HTTPException(status_code=422, detail=f"Grammar/lexer mismatch: {exc}") from exc

	return {
		"accepted": art.accepted,
		"duration_ms": art.duration_ms,
		"token_count": len(art.filtered_tokens),
		"tokens": [_token_json(t) for t in art.filtered_tokens],
		"applied_rules": [_rule_json(r) for r in art.applied_rules],
		"diagnostics": [
			{
				"severity": d.severity.name,
				"stage": d.stage.name,
				"message": d.message,
				"position": d.position,
				"hint": d.hint,
			}
			for d in art.diagnostics
		],
		"steps": _to_json(art.steps) if req.trace else None,
		"steps_truncated": art.steps_truncated,
	}


@app.post("/api/ll1")
def ll1_tables(req: LL1Request) -> Dict[str, Any]:
	"""
	FIRST/FOLLOW sets and the LL(1) table for the supplied grammar
	(or the bundled Java-subset grammar).
	"""
	grammar = _grammar_from_lines(req.grammar_lines) if req.grammar_lines else DEFAULT_ENGINE.grammar
	analysis = analyze_grammar(grammar, include_working=req.include_working)

	terminals = analysis.lookahead_terminals()
	table_out: Dict[str, Dict[str, str]] = {}
	for nt in grammar.nonterminals:
		row: Dict[str, str] = {}
		for t in terminals:
			rule = analysis.table.get(TableKey(nt, t))
			row[t.name] = str(rule) if rule is not None else ""
		table_out[nt.name] = row

	return {
		"grammar": {
			"start": grammar.start.name,
			"nonterminals": [nt.name for nt in grammar.nonterminals],
			"terminals": [t.name for t in terminals],
			"rules": [_rule_json(r) for r in grammar.rules],
		},
		"first": {nt.name: [s.name for s in ordered(analysis.first[nt])] for nt in grammar.nonterminals},
		"follow": {nt.name: [s.name for s in ordered(analysis.follow[nt])] for nt in grammar.nonterminals},
		"working": {
			"first_passes": _passes_json(analysis.first_passes),
			"follow_passes": _passes_json(analysis.follow_passes),
		}
		if req.include_working
		else None,
		"table": table_out,
		"conflicts": [str(c) for c in analysis.conflicts],
		"is_ll1": analysis.is_ll1,
	}
