"""
Real estate agent service
- natural language query -> filter -> store lookup -> conversational reply
- price-sorted recommendations
- simulated owner contact
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from estate_agent.services.contact import OwnerContactSimulator
from estate_agent.services.data.conversation import ConversationStore
from estate_agent.services.data.property_store import (
    PropertyNotFoundError,
    PropertyStore,
    listing_filters,
)
from estate_agent.services.llm.composer import ResponseComposer
from estate_agent.services.query_parser import QueryParser

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_session_id() -> str:
    return f"session_{int(time.time() * 1000)}"


class AgentService:
    """Agent endpoint logic, independent of Flask"""

    def __init__(
        self,
        parser: Optional[QueryParser] = None,
        store: Optional[PropertyStore] = None,
        composer: Optional[ResponseComposer] = None,
        conversations: Optional[ConversationStore] = None,
        contact_simulator: Optional[OwnerContactSimulator] = None,
        result_limit: int = 10,
        recommendation_limit: int = 5,
    ):
        self.parser = parser or QueryParser()
        self.store = store or PropertyStore()
        self.composer = composer or ResponseComposer()
        self.conversations = conversations
        self.contact_simulator = contact_simulator or OwnerContactSimulator()
        self.result_limit = result_limit
        self.recommendation_limit = recommendation_limit

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "AgentService":
        return cls(
            composer=ResponseComposer.from_config(config),
            conversations=ConversationStore(),
            contact_simulator=OwnerContactSimulator.from_config(config),
            result_limit=int(config.get("AGENT_RESULT_LIMIT", 10)),
            recommendation_limit=int(config.get("RECOMMENDATION_LIMIT", 5)),
        )

    async def handle_query(self, query: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Answer a natural language property search.

        Args:
            query: user text (already validated as non-empty)
            session_id: conversation key; generated when missing

        Returns:
            {
                "success": True,
                "query": "...",
                "response": "...",
                "properties": [...],
                "filtersApplied": {...},
                "totalFound": 3,
                "sessionId": "session_...",
                "timestamp": "..."
            }
        """
        filters = self.parser.parse(query)
        logger.info("Parsed filters: %s", filters)

        # Store errors propagate; the route turns them into a generic failure
        properties = self.store.find(filters, limit=self.result_limit)

        reply = await self.composer.compose(query, properties, filters)
        session_id = session_id or new_session_id()
        self._record(session_id, query, reply)

        return {
            "success": True,
            "query": query,
            "response": reply,
            "properties": properties,
            "filtersApplied": filters,
            "totalFound": len(properties),
            "sessionId": session_id,
            "timestamp": _now_iso(),
        }

    def _record(self, session_id: str, query: str, reply: str) -> None:
        if self.conversations is None:
            return
        try:
            self.conversations.append(session_id, "user", query)
            self.conversations.append(session_id, "agent", reply)
        except Exception as e:
            logger.warning("Conversation log skipped for %s: %s", session_id, e)

    def recommend(
        self,
        budget: Any = None,
        property_type: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Cheapest matching listings first, capped at recommendation_limit"""
        filters = listing_filters(property_type=property_type, location=location, max_price=budget)
        recommendations = self.store.find(
            filters,
            limit=self.recommendation_limit,
            order_by="price_asc",
        )
        return {
            "success": True,
            "recommendations": recommendations,
            "count": len(recommendations),
            "filtersApplied": filters,
            "message": "Here are my top recommendations based on your preferences",
        }

    async def contact_owner(self, property_id: Any) -> Dict[str, Any]:
        """
        Simulate contacting the owner of an existing property.

        Raises:
            PropertyNotFoundError: unknown property id
        """
        prop = self.store.find_by_id(property_id)
        if prop is None:
            raise PropertyNotFoundError(property_id)

        contact_result = await self.contact_simulator.contact_owner(prop["id"])
        return {
            "success": True,
            "property": {
                "id": prop["id"],
                "title": prop["title"],
                "location": prop["location"],
            },
            "contactResult": contact_result,
            "timestamp": _now_iso(),
        }
