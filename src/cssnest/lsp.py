"""Minimal LSP server for CSS — diagnostics only."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from cssnest import __version__
from cssnest.config import ParseOptions, load_config, options_from_config
from cssnest.errors import LexError, ParseError
from cssnest.parser import parse

logger = logging.getLogger(__name__)

server = LanguageServer(
    "cssnest-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _options_for(uri: str) -> ParseOptions:
    """Parse options for a document, honouring cssnest.toml beside local files."""
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    config: dict[str, Any] = {}
    if uri.startswith("file:"):
        path = to_fs_path(uri)
        if path:
            config = load_config(None, Path(path).parent)
    return options_from_config(config, filename)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    options = _options_for(uri)
    diagnostics: list[Diagnostic] = []

    try:
        parse(doc.source, options)
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="cssnest",
            )
        )
    except ParseError as exc:
        start_line = exc.span.start.line - 1
        start_col = exc.span.start.column - 1
        end_line = exc.span.end.line - 1
        end_col = exc.span.end.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=start_line, character=start_col),
                    end=Position(line=end_line, character=end_col),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="cssnest",
            )
        )

    logger.debug("validated %s: %d diagnostics", uri, len(diagnostics))
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
