"""External text generation providers (ollama CLI, Anthropic API)"""
import asyncio
import logging
from typing import Any, Dict, List, Optional
from anthropic import APIError, AsyncAnthropic
from estate_agent.services.llm.base import Responder, ResponderError
from estate_agent.services.llm.prompts import AGENT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class OllamaResponder(Responder):
    """Primary tier: pipes the context into `ollama run <model>`"""

    name = "ollama"

    def __init__(self, model: str = "llama2", binary: str = "ollama"):
        self.model = model
        self.binary = binary

    async def respond(
        self,
        context: str,
        query: str,
        results: List[Dict[str, Any]],
        filters: Dict[str, Any],
    ) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                self.binary, "run", self.model,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ResponderError(f"ollama unavailable: {e}") from e

        try:
            stdout, stderr = await process.communicate(input=context.encode("utf-8"))
        except asyncio.CancelledError:
            # Timed out by the caller: do not leave the model running
            if process.returncode is None:
                process.kill()
            raise

        if process.returncode != 0:
            raise ResponderError(
                f"ollama exited with {process.returncode}: {stderr.decode('utf-8', 'replace').strip()}"
            )

        text = stdout.decode("utf-8", "replace").strip()
        if not text:
            raise ResponderError("ollama returned no text")
        return text


class AnthropicResponder(Responder):
    """Secondary tier: Anthropic Messages API with the agent persona"""

    name = "anthropic"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "claude-sonnet-4-5",
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def respond(
        self,
        context: str,
        query: str,
        results: List[Dict[str, Any]],
        filters: Dict[str, Any],
    ) -> str:
        if not self.api_key:
            raise ResponderError("ANTHROPIC_API_KEY is not configured")

        try:
            # Client is bound to the running event loop, so one per call
            async with AsyncAnthropic(api_key=self.api_key) as client:
                response = await client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=AGENT_SYSTEM_PROMPT,
                    messages=[
                        {"role": "user", "content": context}
                    ],
                )
        except APIError as e:
            raise ResponderError(f"Anthropic request failed: {e}") from e

        text = "\n".join(
            getattr(c, "text", "")
            for c in response.content
            if getattr(c, "type", None) == "text"
        ).strip()
        if not text:
            raise ResponderError("Anthropic returned no text")
        return text
