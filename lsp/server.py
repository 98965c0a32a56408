"""LSP server for ConVector scripts."""
from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional

from pygls.lsp.server import LanguageServer
from lsprotocol import types

from evaluation import EvalContext, Session
from evaluation.diagnostics import Diagnostic as ConVectorDiagnostic
from runtime.env import Env
from lsp.diagnostics import to_lsp_diagnostic
from lsp.hover import get_hover

logger = logging.getLogger(__name__)


@dataclass
class EvaluationCache:
    """Cache for last evaluation results per document."""

    env: Env
    diagnostics: list[ConVectorDiagnostic]
    source_hash: str
    settings_hash: str  # Hash of settings used during evaluation


# Global cache: URI -> EvaluationCache
evaluation_cache: Dict[str, EvaluationCache] = {}

# Debouncing: URI -> asyncio.Task
debounce_tasks: Dict[str, asyncio.Task] = {}

# Server settings (updated via workspace/didChangeConfiguration or initializationOptions)
server_settings: Dict[str, object] = {
    "zero_tolerance": 0.0,
    "evaluate_on_change": False,
}

# Create server instance
server = LanguageServer(
    "convector", "v0.0", text_document_sync_kind=types.TextDocumentSyncKind.Full
)


def _compute_hash(source: str) -> str:
    """Compute hash of source text for cache validation."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _compute_settings_hash() -> str:
    """Compute hash of current server settings for cache validation."""
    settings_str = f"{server_settings['zero_tolerance']}"
    return hashlib.sha256(settings_str.encode("utf-8")).hexdigest()


def _apply_settings(options: dict) -> None:
    """Copy recognised client options into server_settings."""
    if "zeroTolerance" in options:
        try:
            tolerance = float(options["zeroTolerance"])
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid zeroTolerance: %r", options["zeroTolerance"])
        else:
            if tolerance >= 0.0:
                server_settings["zero_tolerance"] = tolerance
            else:
                logger.warning("Ignoring negative zeroTolerance: %r", tolerance)
    if "evaluateOnChange" in options:
        server_settings["evaluate_on_change"] = bool(options["evaluateOnChange"])


def evaluate_document(source: str) -> EvaluationCache:
    """Run a document through a fresh session with the current settings."""
    ctx = EvalContext(zero_tolerance=float(server_settings["zero_tolerance"]), echo=False)
    session = Session(ctx)
    result = session.run_source(source)
    return EvaluationCache(
        env=session.env,
        diagnostics=result.diagnostics,
        source_hash=_compute_hash(source),
        settings_hash=_compute_settings_hash(),
    )


def _publish(ls: LanguageServer, uri: str, diagnostics: list[types.Diagnostic]) -> None:
    ls.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _validate(ls: LanguageServer, uri: str, source: str, force: bool = False) -> None:
    """Evaluate ConVector source and publish diagnostics.

    Args:
        ls: Language server instance
        uri: Document URI
        source: Document source text
        force: If True, bypass cache and force re-evaluation
    """
    start_time = time.time()
    logger.info("Evaluating %s", uri)

    source_lines = source.splitlines()

    # Check cache: skip re-evaluation if source and settings unchanged
    if not force and uri in evaluation_cache:
        cached = evaluation_cache[uri]
        if cached.source_hash == _compute_hash(source) and cached.settings_hash == _compute_settings_hash():
            _publish(ls, uri, [to_lsp_diagnostic(d, source_lines) for d in cached.diagnostics])
            logger.info("Cache hit for %s (source unchanged)", uri)
            return

    try:
        cached = evaluate_document(source)
    except Exception as e:
        # Internal error: evaluator bug
        error_diagnostic = types.Diagnostic(
            range=types.Range(
                start=types.Position(line=0, character=0),
                end=types.Position(line=0, character=0),
            ),
            severity=types.DiagnosticSeverity.Error,
            source="convector",
            message=f"Internal error: {str(e)}",
        )
        _publish(ls, uri, [error_diagnostic])
        logger.error("Evaluation failed for %s: %s", uri, e, exc_info=True)
        return

    _publish(ls, uri, [to_lsp_diagnostic(d, source_lines) for d in cached.diagnostics])
    evaluation_cache[uri] = cached

    elapsed = time.time() - start_time
    logger.info("Evaluation complete: %s (%.3fs, %d diagnostics)", uri, elapsed, len(cached.diagnostics))


@server.feature(types.INITIALIZE)
def initialize(ls: LanguageServer, params: types.InitializeParams):
    """Handle initialize request: apply initialization options."""
    logger.info("Server initialized")

    if params.initialization_options and isinstance(params.initialization_options, dict):
        _apply_settings(params.initialization_options)


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: LanguageServer, params: types.DidOpenTextDocumentParams):
    """Handle document open: evaluate immediately."""
    _validate(ls, params.text_document.uri, params.text_document.text)


@server.feature(types.TEXT_DOCUMENT_DID_SAVE)
async def did_save(ls: LanguageServer, params: types.DidSaveTextDocumentParams):
    """Handle document save: evaluate immediately (no debounce)."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    _validate(ls, params.text_document.uri, doc.source)


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
async def did_close(ls: LanguageServer, params: types.DidCloseTextDocumentParams):
    """Handle document close: drop cached results and pending evaluation."""
    uri = params.text_document.uri
    evaluation_cache.pop(uri, None)
    task = debounce_tasks.pop(uri, None)
    if task is not None:
        task.cancel()
    _publish(ls, uri, [])


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
async def did_change(ls: LanguageServer, params: types.DidChangeTextDocumentParams):
    """Handle document change: debounce evaluation by 500ms (if enabled)."""
    if not server_settings["evaluate_on_change"]:
        return

    uri = params.text_document.uri

    # Cancel existing debounce task if any
    if uri in debounce_tasks:
        debounce_tasks[uri].cancel()

    async def debounced_validate():
        """Wait 500ms then validate."""
        await asyncio.sleep(0.5)
        doc = ls.workspace.get_text_document(uri)
        _validate(ls, uri, doc.source)
        debounce_tasks.pop(uri, None)

    debounce_tasks[uri] = asyncio.create_task(debounced_validate())


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(ls: LanguageServer, params: types.HoverParams) -> Optional[types.Hover]:
    """Handle hover request: show the final value of the variable at cursor."""
    uri = params.text_document.uri

    if uri not in evaluation_cache:
        return None

    doc = ls.workspace.get_text_document(uri)
    return get_hover(
        evaluation_cache[uri].env,
        doc.source,
        params.position.line,
        params.position.character,
    )


@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LanguageServer, params: types.DidChangeConfigurationParams
):
    """Handle configuration changes from the client."""
    settings = getattr(params, "settings", None)
    if settings and isinstance(settings, dict):
        convector = settings.get("convector", {})
        if isinstance(convector, dict):
            _apply_settings(convector)

    # Re-evaluate all open documents with new settings
    for uri in list(evaluation_cache.keys()):
        doc = ls.workspace.get_text_document(uri)
        _validate(ls, uri, doc.source)
