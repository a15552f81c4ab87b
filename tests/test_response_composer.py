"""
Response composer tests
"""
import asyncio
import json
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from anthropic import APIConnectionError
from estate_agent.services.llm.base import Responder, ResponderError
from estate_agent.services.llm.client import AnthropicResponder, OllamaResponder
from estate_agent.services.llm.composer import (
    ResponseComposer,
    TemplateResponder,
    build_context,
    format_price,
)
from estate_agent.services.llm.prompts import AGENT_SYSTEM_PROMPT


def _prop(title, price, location="Panaji", type_="flat"):
    return {"title": title, "price": price, "location": location, "type": type_}


class StubResponder(Responder):
    """Returns a fixed text or raises"""

    def __init__(self, name, text=None, error=None, delay=0.0):
        self.name = name
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def respond(self, context, query, results, filters):
        self.calls.append(context)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.text


class TestTemplateResponder(unittest.TestCase):
    """Deterministic fallback tier"""

    def test_no_results_echoes_query(self):
        text = TemplateResponder.render("castle in Vasco under 1 crore", [])
        self.assertIn("castle in Vasco under 1 crore", text)
        self.assertIn("budget, location, or property type", text)

    def test_single_result(self):
        text = TemplateResponder.render("flat", [_prop("Luxury 2BHK Flat", 4_500_000, "Calangute")])
        self.assertIn("4,500,000", text)
        self.assertIn("Luxury 2BHK Flat", text)
        self.assertIn("Calangute", text)
        self.assertIn("flat", text)

    def test_multiple_results_range_over_all(self):
        results = [
            _prop("B", 7_500_000),
            _prop("C", 12_000_000),
            _prop("D", 5_000_000),
            _prop("A", 3_500_000),
        ]
        text = TemplateResponder.render("anything", results)
        self.assertIn("4 properties", text)
        self.assertIn("₹3,500,000 to ₹12,000,000", text)

    def test_range_independent_of_order(self):
        prices = [3_500_000, 7_500_000, 12_000_000]
        for ordering in ([0, 1, 2], [2, 1, 0], [1, 2, 0]):
            results = [_prop(str(i), prices[i]) for i in ordering]
            with self.subTest(ordering=ordering):
                self.assertIn("₹3,500,000 to ₹12,000,000", TemplateResponder.render("q", results))

    def test_format_price(self):
        self.assertEqual(format_price(25000), "25,000")
        self.assertEqual(format_price("n/a"), "n/a")


class TestBuildContext(unittest.TestCase):

    def test_preview_limited_to_three(self):
        results = [_prop(f"Home {i}", 1_000_000 * (i + 1)) for i in range(5)]
        filters = {"isAvailable": True, "type": "flat"}
        context = build_context("flats", results, filters)
        self.assertIn('User Query: "flats"', context)
        self.assertIn("Properties Found: 5", context)
        self.assertIn(json.dumps(filters), context)
        self.assertIn("Home 2", context)
        self.assertNotIn("Home 3", context)


class TestResponseComposer(unittest.IsolatedAsyncioTestCase):
    """Tier ordering and fallback"""

    async def test_first_tier_answers(self):
        first = StubResponder("first", text="from first")
        second = StubResponder("second", text="from second")
        composer = ResponseComposer([first, second])
        self.assertEqual(await composer.compose("q", [], {}), "from first")
        self.assertEqual(second.calls, [])

    async def test_falls_through_to_second(self):
        first = StubResponder("first", error=ResponderError("down"))
        second = StubResponder("second", text="from second")
        composer = ResponseComposer([first, second])
        self.assertEqual(await composer.compose("q", [], {}), "from second")
        self.assertEqual(first.calls, second.calls)

    async def test_all_fail_uses_template(self):
        composer = ResponseComposer([
            StubResponder("first", error=ResponderError("down")),
            StubResponder("second", error=RuntimeError("boom")),
        ])
        text = await composer.compose("villa in Anjuna", [], {"isAvailable": True})
        self.assertIn("villa in Anjuna", text)

    async def test_empty_text_is_a_failure(self):
        composer = ResponseComposer([StubResponder("blank", text="   ")])
        text = await composer.compose("q", [_prop("Only", 4_500_000)], {})
        self.assertIn("Only", text)

    async def test_timeout_moves_on(self):
        slow = StubResponder("slow", text="late", delay=1.0)
        fast = StubResponder("fast", text="on time")
        composer = ResponseComposer([slow, fast], timeout=0.01)
        self.assertEqual(await composer.compose("q", [], {}), "on time")

    async def test_no_external_tiers(self):
        text = await ResponseComposer().compose("q", [], {})
        self.assertTrue(text)

    async def test_from_config(self):
        composer = ResponseComposer.from_config({
            "OLLAMA_ENABLED": True,
            "OLLAMA_MODEL": "llama3",
            "ANTHROPIC_API_KEY": "key",
            "PROVIDER_TIMEOUT_SECONDS": 5,
        })
        self.assertIsInstance(composer.responders[0], OllamaResponder)
        self.assertEqual(composer.responders[0].model, "llama3")
        self.assertIsInstance(composer.responders[1], AnthropicResponder)
        self.assertEqual(composer.timeout, 5)

    async def test_from_config_disabled(self):
        composer = ResponseComposer.from_config({"OLLAMA_ENABLED": False, "ANTHROPIC_API_KEY": None})
        self.assertEqual(composer.responders, [])


class TestProviders(unittest.IsolatedAsyncioTestCase):
    """ollama and Anthropic tiers with the subprocess and API client patched"""

    async def test_ollama_missing_binary(self):
        responder = OllamaResponder(binary="definitely-not-an-installed-ollama-binary")
        with self.assertRaises(ResponderError):
            await responder.respond("ctx", "q", [], {})

    async def test_anthropic_without_key(self):
        with self.assertRaises(ResponderError):
            await AnthropicResponder(api_key=None).respond("ctx", "q", [], {})

    @staticmethod
    def _fake_process(stdout=b"", stderr=b"", returncode=0):
        process = MagicMock()
        process.returncode = returncode
        process.communicate = AsyncMock(return_value=(stdout, stderr))
        return process

    @patch('estate_agent.services.llm.client.asyncio.create_subprocess_exec', new_callable=AsyncMock)
    async def test_ollama_trims_output(self, mock_exec):
        process = self._fake_process(stdout=b"  I found 2 flats in Panaji.\n\n")
        mock_exec.return_value = process

        text = await OllamaResponder(model="llama3").respond("ctx", "q", [], {})

        self.assertEqual(text, "I found 2 flats in Panaji.")
        self.assertEqual(mock_exec.call_args[0], ("ollama", "run", "llama3"))
        process.communicate.assert_awaited_once_with(input=b"ctx")

    @patch('estate_agent.services.llm.client.asyncio.create_subprocess_exec', new_callable=AsyncMock)
    async def test_ollama_non_zero_exit(self, mock_exec):
        mock_exec.return_value = self._fake_process(stdout=b"partial", stderr=b"model not found", returncode=1)
        with self.assertRaises(ResponderError) as ctx:
            await OllamaResponder().respond("ctx", "q", [], {})
        self.assertIn("model not found", str(ctx.exception))

    @patch('estate_agent.services.llm.client.asyncio.create_subprocess_exec', new_callable=AsyncMock)
    async def test_ollama_empty_output(self, mock_exec):
        mock_exec.return_value = self._fake_process(stdout=b"   \n")
        with self.assertRaises(ResponderError):
            await OllamaResponder().respond("ctx", "q", [], {})

    @patch('estate_agent.services.llm.client.AsyncAnthropic')
    async def test_anthropic_request(self, mock_client_cls):
        client = mock_client_cls.return_value.__aenter__.return_value
        client.messages.create = AsyncMock(return_value=SimpleNamespace(content=[
            SimpleNamespace(type="text", text="Two flats match your budget."),
            SimpleNamespace(type="tool_use", id="toolu_1", name="lookup", input={}),
            SimpleNamespace(type="text", text="Shall I contact an owner?"),
        ]))

        text = await AnthropicResponder(api_key="sk-test").respond("ctx", "q", [], {})

        self.assertEqual(text, "Two flats match your budget.\nShall I contact an owner?")
        mock_client_cls.assert_called_once_with(api_key="sk-test")
        kwargs = client.messages.create.call_args.kwargs
        self.assertEqual(kwargs["system"], AGENT_SYSTEM_PROMPT)
        self.assertEqual(kwargs["max_tokens"], 500)
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertEqual(kwargs["model"], "claude-sonnet-4-5")
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": "ctx"}])

    @patch('estate_agent.services.llm.client.AsyncAnthropic')
    async def test_anthropic_api_error(self, mock_client_cls):
        client = mock_client_cls.return_value.__aenter__.return_value
        client.messages.create = AsyncMock(side_effect=APIConnectionError(request=MagicMock()))
        with self.assertRaises(ResponderError):
            await AnthropicResponder(api_key="sk-test").respond("ctx", "q", [], {})

    @patch('estate_agent.services.llm.client.AsyncAnthropic')
    async def test_anthropic_without_text_blocks(self, mock_client_cls):
        client = mock_client_cls.return_value.__aenter__.return_value
        client.messages.create = AsyncMock(return_value=SimpleNamespace(content=[
            SimpleNamespace(type="tool_use", id="toolu_1", name="lookup", input={}),
        ]))
        with self.assertRaises(ResponderError):
            await AnthropicResponder(api_key="sk-test").respond("ctx", "q", [], {})

    @patch('estate_agent.services.llm.client.AsyncAnthropic')
    async def test_anthropic_failure_falls_back_to_template(self, mock_client_cls):
        client = mock_client_cls.return_value.__aenter__.return_value
        client.messages.create = AsyncMock(side_effect=APIConnectionError(request=MagicMock()))
        composer = ResponseComposer([AnthropicResponder(api_key="sk-test")], timeout=1.0)

        reply = await composer.compose("flat in Panaji", [_prop("Flat A", 4500000)], {"location": "panaji"})

        self.assertEqual(reply, TemplateResponder.render("flat in Panaji", [_prop("Flat A", 4500000)]))


if __name__ == '__main__':
    unittest.main()
