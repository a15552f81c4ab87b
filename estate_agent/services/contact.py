"""
Owner contact simulation
No owner is actually reached: the call waits a random delay and reports one
of the canned outcomes.
"""
import asyncio
import random
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence
from estate_agent.services.llm.prompts import OWNER_CONTACT_MESSAGES

DelaySource = Callable[[], float]
ChoiceSource = Callable[[Sequence[str]], str]
FollowUpSource = Callable[[], bool]
Sleeper = Callable[[float], Awaitable[Any]]


class OwnerContactSimulator:
    """
    Simulated owner outreach.

    Args:
        delay_min / delay_max: bounds of the uniform delay in seconds
        follow_up_probability: chance that followUpRequired is True
        messages: canned outcome texts
        delay_source: returns the delay to wait (defaults to uniform(delay_min, delay_max))
        choice_source: picks one message (defaults to random.choice)
        follow_up_source: decides followUpRequired (defaults to a Bernoulli draw)
        sleep: awaitable sleep, asyncio.sleep unless a test swaps it
        rng: random.Random backing the default sources
    """

    def __init__(
        self,
        delay_min: float = 1.0,
        delay_max: float = 3.0,
        follow_up_probability: float = 0.7,
        messages: Sequence[str] = OWNER_CONTACT_MESSAGES,
        delay_source: Optional[DelaySource] = None,
        choice_source: Optional[ChoiceSource] = None,
        follow_up_source: Optional[FollowUpSource] = None,
        sleep: Sleeper = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        if delay_min < 0 or delay_max < delay_min:
            raise ValueError("delay bounds must satisfy 0 <= delay_min <= delay_max")
        if not 0.0 <= follow_up_probability <= 1.0:
            raise ValueError("follow_up_probability must be within [0, 1]")
        if not messages:
            raise ValueError("at least one contact message is required")

        self.delay_min = delay_min
        self.delay_max = delay_max
        self.follow_up_probability = follow_up_probability
        self.messages = tuple(messages)
        self._rng = rng or random.Random()
        self._delay_source = delay_source or (lambda: self._rng.uniform(self.delay_min, self.delay_max))
        self._choice_source = choice_source or self._rng.choice
        self._follow_up_source = follow_up_source or (lambda: self._rng.random() < self.follow_up_probability)
        self._sleep = sleep

    @classmethod
    def from_config(cls, config) -> "OwnerContactSimulator":
        return cls(
            delay_min=float(config.get("CONTACT_DELAY_MIN", 1.0)),
            delay_max=float(config.get("CONTACT_DELAY_MAX", 3.0)),
            follow_up_probability=float(config.get("FOLLOW_UP_PROBABILITY", 0.7)),
        )

    async def contact_owner(self, property_id: Any) -> Dict[str, Any]:
        """
        Simulate reaching the owner of a property.

        Returns:
            {
                "success": True,
                "propertyId": "...",
                "message": "<one of the canned messages>",
                "delaySeconds": 1.73,
                "contactTime": "2026-01-01T10:00:00+00:00",
                "followUpRequired": True
            }
        """
        delay = min(max(self._delay_source(), self.delay_min), self.delay_max)
        await self._sleep(delay)

        return {
            "success": True,
            "propertyId": property_id,
            "message": self._choice_source(self.messages),
            "delaySeconds": round(delay, 3),
            "contactTime": datetime.now(timezone.utc).isoformat(),
            "followUpRequired": bool(self._follow_up_source()),
        }
