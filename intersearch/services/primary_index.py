"""
Primary index: local keyword search over a small document list.

Responsibility: Answer from local data first. Documents are loaded from a JSON
file (list of {title, snippet, link}); with no file configured the index is
empty and every lookup is a valid "no local match".
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Sequence

from intersearch.core.errors import UpstreamProtocolError
from intersearch.schemas.search import PrimaryOutcome, SearchItem, SourceTag
from intersearch.services.base import SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 5


def load_documents(path: str | Path) -> list[SearchItem]:
    """Read index documents from a JSON file. Raises UpstreamProtocolError if unreadable or malformed."""
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise UpstreamProtocolError(f"Primary index {p} could not be read: {e}", source="primary") from e
    if not isinstance(raw, list):
        raise UpstreamProtocolError(f"Primary index {p} must hold a JSON list", source="primary")
    docs: list[SearchItem] = []
    for i, d in enumerate(raw):
        if not isinstance(d, dict):
            raise UpstreamProtocolError(f"Primary index entry {i} is not an object", source="primary")
        docs.append(
            SearchItem(
                title=str(d.get("title") or "").strip(),
                snippet=str(d.get("snippet") or "").strip(),
                link=str(d.get("link") or "").strip(),
                source_tag=SourceTag.PRIMARY,
            )
        )
    logger.info("[primary_index:load_documents] path=%s documents=%d", p, len(docs))
    return docs


def _words(text: str) -> set[str]:
    """Lowercased word tokens of at least two characters."""
    return {w for w in re.findall(r"\w+", text.lower()) if len(w) >= 2}


def _keyword_score(words: set[str], doc: SearchItem) -> int:
    return len(words & _words(f"{doc.title} {doc.snippet}"))


class KeywordIndexAdapter(SourceAdapter):
    """In-memory keyword index. Ranks documents by how many distinct query words they contain."""

    name = "primary"

    def __init__(
        self,
        documents: Sequence[SearchItem | dict[str, Any]] | None = None,
        path: str | Path | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._documents: list[SearchItem] = [self._coerce(d) for d in (documents or [])]
        self._path = Path(path) if path else None
        self._loaded = self._path is None
        self.max_results = max_results

    @staticmethod
    def _coerce(doc: SearchItem | dict[str, Any]) -> SearchItem:
        if isinstance(doc, SearchItem):
            return doc.model_copy(update={"source_tag": SourceTag.PRIMARY})
        return SearchItem(
            title=doc.get("title", ""),
            snippet=doc.get("snippet", ""),
            link=doc.get("link", ""),
            source_tag=SourceTag.PRIMARY,
        )

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._documents.extend(load_documents(self._path))
        self._loaded = True

    def search(self, query: str) -> list[SearchItem]:
        """Return matching documents, best first (stable on ties), at most max_results."""
        self._ensure_loaded()
        words = _words(query)
        if not words or not self._documents:
            return []
        scored = [(doc, _keyword_score(words, doc)) for doc in self._documents]
        scored = [(doc, score) for doc, score in scored if score > 0]
        scored.sort(key=lambda x: -x[1])
        return [doc for doc, _ in scored[: self.max_results]]

    async def resolve(self, query: str, prior_context: Sequence[SearchItem] = ()) -> PrimaryOutcome:
        logger.info("[primary_index:resolve] IN  query=%r documents=%d", query, len(self._documents))
        items = self.search(query)
        logger.info("[primary_index:resolve] OUT items=%d", len(items))
        return PrimaryOutcome(items=tuple(items))
