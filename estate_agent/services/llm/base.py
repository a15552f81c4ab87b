"""
Responder interface for the tiered reply chain
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class ResponderError(RuntimeError):
    """A responder could not produce text; the next tier should be tried"""


class Responder(ABC):
    """One tier of the reply chain"""

    name: str = "responder"

    @abstractmethod
    async def respond(
        self,
        context: str,
        query: str,
        results: List[Dict[str, Any]],
        filters: Dict[str, Any],
    ) -> str:
        """
        Produce reply text.

        Args:
            context: prompt block built from the query, filter and result preview
            query: original user text
            results: full result list returned by the store
            filters: filter the results were fetched with

        Returns:
            non-empty reply text

        Raises:
            ResponderError: when this tier cannot answer
        """
        pass
