"""
Conversational reply composer
- ollama -> Anthropic -> deterministic template
- tiers run one after another, never in parallel
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence
from estate_agent.services.llm.base import Responder, ResponderError
from estate_agent.services.llm.client import AnthropicResponder, OllamaResponder
from estate_agent.services.llm.prompts import (
    MULTIPLE_RESULTS_TEMPLATE,
    NO_RESULTS_TEMPLATE,
    PROPERTY_PREVIEW_TEMPLATE,
    RESPONSE_CONTEXT_TEMPLATE,
    SINGLE_RESULT_TEMPLATE,
)

logger = logging.getLogger(__name__)

PREVIEW_SIZE = 3


def format_price(price: Any) -> str:
    """Group digits in thousands: 4500000 -> '4,500,000'"""
    try:
        return f"{int(price):,}"
    except (TypeError, ValueError):
        return str(price)


def build_context(query: str, results: Sequence[Dict[str, Any]], filters: Dict[str, Any]) -> str:
    """Prompt block: query, result count, serialized filter and a 3-item preview"""
    preview = ", ".join(
        PROPERTY_PREVIEW_TEMPLATE.format(
            title=p.get("title"),
            type=p.get("type"),
            location=p.get("location"),
            price=p.get("price"),
        )
        for p in results[:PREVIEW_SIZE]
    )
    return RESPONSE_CONTEXT_TEMPLATE.format(
        query=query,
        count=len(results),
        filters=json.dumps(filters, ensure_ascii=False, default=str),
        preview=preview,
    )


class TemplateResponder(Responder):
    """Last tier: fixed templates, no I/O, always answers"""

    name = "template"

    async def respond(
        self,
        context: str,
        query: str,
        results: List[Dict[str, Any]],
        filters: Dict[str, Any],
    ) -> str:
        return self.render(query, results)

    @staticmethod
    def render(query: str, results: Sequence[Dict[str, Any]]) -> str:
        if not results:
            return NO_RESULTS_TEMPLATE.format(query=query)

        if len(results) == 1:
            prop = results[0]
            return SINGLE_RESULT_TEMPLATE.format(
                title=prop.get("title"),
                location=prop.get("location"),
                type=prop.get("type"),
                price=format_price(prop.get("price")),
            )

        # Range over every result, not only the previewed ones
        prices = [p["price"] for p in results if p.get("price") is not None]
        if not prices:
            prices = [0]
        return MULTIPLE_RESULTS_TEMPLATE.format(
            count=len(results),
            min_price=format_price(min(prices)),
            max_price=format_price(max(prices)),
        )


class ResponseComposer:
    """Runs the responder chain and returns the first answer"""

    def __init__(
        self,
        responders: Optional[Sequence[Responder]] = None,
        timeout: Optional[float] = 30.0,
    ):
        self.responders: List[Responder] = list(responders or [])
        self.timeout = timeout
        self.fallback = TemplateResponder()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ResponseComposer":
        """Assemble the external tiers enabled in the app config"""
        responders: List[Responder] = []
        if config.get("OLLAMA_ENABLED"):
            responders.append(OllamaResponder(
                model=config.get("OLLAMA_MODEL", "llama2"),
                binary=config.get("OLLAMA_BIN", "ollama"),
            ))
        if config.get("ANTHROPIC_API_KEY"):
            responders.append(AnthropicResponder(
                api_key=config["ANTHROPIC_API_KEY"],
                model=config.get("ANTHROPIC_MODEL", "claude-sonnet-4-5"),
                max_tokens=int(config.get("ANTHROPIC_MAX_TOKENS", 500)),
                temperature=float(config.get("ANTHROPIC_TEMPERATURE", 0.7)),
            ))
        logger.info("Reply tiers: %s", [r.name for r in responders] + [TemplateResponder.name])
        return cls(responders, timeout=config.get("PROVIDER_TIMEOUT_SECONDS", 30.0))

    async def compose(
        self,
        query: str,
        results: Sequence[Dict[str, Any]],
        filters: Dict[str, Any],
    ) -> str:
        """
        Produce the conversational reply for a search.

        Args:
            query: original user text
            results: every property returned by the store
            filters: filter the results were fetched with

        Returns:
            reply text (never empty)
        """
        results = list(results)
        context = build_context(query, results, filters)

        for responder in self.responders:
            try:
                text = await asyncio.wait_for(
                    responder.respond(context, query, results, filters),
                    timeout=self.timeout,
                )
            except ResponderError as e:
                logger.warning("Reply tier %s failed: %s", responder.name, e)
                continue
            except asyncio.TimeoutError:
                logger.warning("Reply tier %s timed out after %ss", responder.name, self.timeout)
                continue
            except Exception:
                logger.warning("Reply tier %s raised unexpectedly", responder.name, exc_info=True)
                continue

            if not isinstance(text, str) or not text.strip():
                logger.warning("Reply tier %s returned empty text", responder.name)
                continue

            logger.info("Reply produced by %s", responder.name)
            return text

        return self.fallback.render(query, results)
