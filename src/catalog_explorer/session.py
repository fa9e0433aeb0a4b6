"""
Explorer Session

The conversation with the explorer is an immutable ``SessionState``
(transcript plus the currently selected dataset). Each user action is a
pure function from one state to the next; the catalog is passed in, never
captured.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Literal

from catalog_explorer.models import Asset
from catalog_explorer.search import QueryEngine, SearchResult
from catalog_explorer.store import CatalogStore

logger = logging.getLogger(__name__)

Role = Literal["user", "assistant"]

GREETING = (
    "Hi! Ask me about datasets, columns, owners, PII, or lineage. "
    "Example: ‘show datasets with PII in sales’"
)
NO_MATCHES = "No datasets matched."


@dataclass(frozen=True)
class Message:
    """One transcript entry."""
    role: Role
    content: str


@dataclass(frozen=True)
class SessionState:
    """Transcript and selection for one explorer session."""
    transcript: tuple[Message, ...] = ()
    selection: str | None = None

    @classmethod
    def initial(cls) -> "SessionState":
        return cls(transcript=(Message("assistant", GREETING),))

    @property
    def last_message(self) -> Message | None:
        return self.transcript[-1] if self.transcript else None


def format_search_reply(result: SearchResult) -> str:
    """Turn a search result into the assistant's transcript text."""
    text = f"🔎 Search reason: {result.reason}\n\n"
    if result.results:
        text += "\n".join(f"• {a.name} — owner: {a.owner}" for a in result.results)
    else:
        text += NO_MATCHES
    return text


def ask(state: SessionState, query: str | None, engine: QueryEngine) -> SessionState:
    """
    Submit a question.

    Blank questions are ignored. Otherwise the trimmed question and the
    assistant's reply are appended to the transcript.
    """
    question = str(query or "").strip()
    if not question:
        return state

    result = engine.search(question)
    logger.info(
        "Question answered",
        extra={"reason": result.reason, "result_count": len(result.results)}
    )
    return replace(
        state,
        transcript=state.transcript + (
            Message("user", question),
            Message("assistant", format_search_reply(result)),
        ),
    )


def select(state: SessionState, asset_id: str, catalog: CatalogStore) -> SessionState:
    """
    Select a dataset for the detail view.

    Raises:
        AssetNotFoundError: If no dataset has that id. The state is unchanged.
    """
    catalog.get_asset(asset_id)
    return replace(state, selection=asset_id)


def clear_selection(state: SessionState) -> SessionState:
    return replace(state, selection=None)


def selected_asset(state: SessionState, catalog: CatalogStore) -> Asset | None:
    """Return the selected dataset, or None when nothing is selected."""
    if state.selection is None:
        return None
    return catalog.get_asset(state.selection)
