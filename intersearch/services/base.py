"""
Source adapter contract shared by the primary index, web search and generative answer providers.

The resolver depends only on this interface; transports (HTTP clients, SDKs)
stay inside the concrete adapters and can be injected for tests.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from intersearch.schemas.search import Outcome, SearchItem


class SourceAdapter(ABC):
    """Given a query and optional prior context, produce an outcome or raise a SourceError."""

    name: str = ""

    @abstractmethod
    async def resolve(self, query: str, prior_context: Sequence[SearchItem] = ()) -> Outcome:
        """
        Resolve the query against this source.

        Search sources return their outcome type with a possibly empty item tuple
        (empty is a valid "no match", not an error). Raises NotConfiguredError,
        UpstreamUnavailableError or UpstreamProtocolError on failure.
        """
