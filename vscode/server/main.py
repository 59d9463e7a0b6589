"""
Vim script Language Server entry point.

This server provides basic language features for Vim script files using
`pygls`. It reuses the Vim script lexer and parser to build a simple
symbol index supporting definition lookup, hover information, and document
symbols for function declarations and script-level ``let`` variables.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_CHANGE,
    DefinitionParams,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    Location,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
)

from vimscript.nodes import FunctionDeclaration, LetCommand, ScopedVariableRef
from vimscript.parser import parse

logger = logging.getLogger(__name__)


@dataclass
class VimSymbol:
    """Represents a top-level symbol in a Vim script file."""

    name: str
    kind: SymbolKind
    uri: str
    line: int
    detail: str


def _function_detail(node: FunctionDeclaration) -> str:
    bang = "!" if node.replace_existing else ""
    flags = " ".join(sorted(flag.value for flag in node.flags))
    detail = f"function{bang} {node.qualified_name}({', '.join(node.args)})"
    return f"{detail} {flags}" if flags else detail


def parse_symbols(uri: str, text: str) -> List[VimSymbol]:
    """
    Parse ``text`` and extract its top-level symbols.

    Parsing runs in recovery mode so that one broken unit does not hide the
    symbols of the rest of the file.
    """
    script = parse(text, uri, recover=True)
    for error in script.errors:
        logger.debug("Parse error in %s: %s", uri, error)
    symbols: List[VimSymbol] = []
    for node in script.units:
        if isinstance(node, FunctionDeclaration):
            symbols.append(
                VimSymbol(
                    node.qualified_name, SymbolKind.Function, uri, node.line - 1,
                    _function_detail(node),
                )
            )
        elif isinstance(node, LetCommand) and isinstance(node.target, ScopedVariableRef):
            target = node.target
            name = target.name if target.scope is None else f"{target.scope.value}:{target.name}"
            symbols.append(
                VimSymbol(name, SymbolKind.Variable, uri, node.line - 1, f"let {name}")
            )
    return symbols


class VimLanguageServer(LanguageServer):
    """Language server for Vim script files."""

    def __init__(self) -> None:
        super().__init__("vimscript-ls", "v0.1")
        self.symbols_by_uri: Dict[str, List[VimSymbol]] = {}
        self.global_symbols: Dict[str, List[VimSymbol]] = {}
        self.indexed_workspace = False

    def _index_workspace(self) -> None:
        """Parse all `.vim` files under the current workspace."""
        root = self.workspace.root_path
        if not root:
            self.indexed_workspace = True
            return
        for path in Path(root).rglob("*.vim"):
            uri = path.as_uri()
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning("Failed to read %s: %s", path, e)
                continue
            self.update_index(uri, text)
        self.indexed_workspace = True

    def update_index(self, uri: str, text: str) -> None:
        """Parse ``text`` and update symbol index for ``uri``."""
        self.symbols_by_uri[uri] = parse_symbols(uri, text)
        self._rebuild_global_index()

    def _rebuild_global_index(self) -> None:
        self.global_symbols.clear()
        for syms in self.symbols_by_uri.values():
            for sym in syms:
                self.global_symbols.setdefault(sym.name, []).append(sym)

    def find(self, word: str) -> Optional[VimSymbol]:
        """Return the first indexed symbol called ``word``."""
        if not self.indexed_workspace:
            self._index_workspace()
        matches = self.global_symbols.get(word)
        return matches[0] if matches else None


lang_server = VimLanguageServer()


def _word_at(ls: VimLanguageServer, uri: str, position: Position) -> str:
    doc = ls.workspace.get_text_document(uri)
    # Scope prefixes and dotted names are part of the symbol.
    return doc.word_at_position(
        position, re_start_word=r"[\w:#.]*$", re_end_word=r"^[\w:#.]*"
    )


@lang_server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: VimLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Index a document when it is opened."""
    ls.update_index(params.text_document.uri, params.text_document.text)


@lang_server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: VimLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """Re-index a document when it changes."""
    if params.content_changes:
        ls.update_index(params.text_document.uri, params.content_changes[0].text)


@lang_server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: VimLanguageServer, params: DefinitionParams):
    """Return the definition location for the symbol under the cursor."""
    word = _word_at(ls, params.text_document.uri, params.position)
    if not word:
        return None
    sym = ls.find(word)
    if sym is None:
        return None
    rng = Range(Position(sym.line, 0), Position(sym.line, len(sym.name)))
    return Location(uri=sym.uri, range=rng)


@lang_server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: VimLanguageServer, params: HoverParams) -> Optional[Hover]:
    """Return hover information for the symbol under the cursor."""
    word = _word_at(ls, params.text_document.uri, params.position)
    if not word:
        return None
    sym = ls.find(word)
    if sym is None:
        return None
    contents = MarkupContent(kind=MarkupKind.PlainText, value=sym.detail)
    return Hover(contents=contents)


@lang_server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbols(ls: VimLanguageServer, params: DocumentSymbolParams):
    """Return top-level symbols for the given document."""
    symbols = ls.symbols_by_uri.get(params.text_document.uri, [])
    result: List[DocumentSymbol] = []
    for sym in symbols:
        rng = Range(Position(sym.line, 0), Position(sym.line, len(sym.name)))
        result.append(
            DocumentSymbol(
                name=sym.name,
                kind=sym.kind,
                range=rng,
                selection_range=rng,
                detail=sym.detail,
            )
        )
    return result


def main() -> None:
    """Start the language server."""
    lang_server.start_io()


if __name__ == "__main__":
    main()
