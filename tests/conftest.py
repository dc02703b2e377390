from __future__ import annotations

import asyncio
from typing import Any

import pytest

from quoteflow.catalog import Category
from quoteflow.remote.types import SubmitError
from quoteflow.wizard import QuoteWizard
from quoteflow.wizard.steps import builtin_quote_steps


class RecordingOperation:
    """Submit operation that records payloads and can be told to fail."""

    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []
        self.failures: list[str] = []
        self.gate: asyncio.Event | None = None

    async def __call__(self, payload: dict[str, Any]) -> None:
        self.payloads.append(dict(payload))
        if self.gate is not None:
            await self.gate.wait()
        if self.failures:
            raise SubmitError(reason=self.failures.pop(0))


@pytest.fixture
def steps():
    return builtin_quote_steps()


@pytest.fixture
def category() -> Category:
    return Category(
        id="forekazik",
        name="Forekazık",
        description="Derin temel sistemleri.",
        icon_key="IconForekazik",
        image_url=None,
    )


@pytest.fixture
def operation() -> RecordingOperation:
    return RecordingOperation()


@pytest.fixture
def make_wizard(steps, category, operation):
    def factory(**kwargs: Any) -> QuoteWizard:
        kwargs.setdefault("steps", steps)
        kwargs.setdefault("close_delay_s", 0.01)
        return QuoteWizard(category=category, submit=operation, **kwargs)

    return factory


def fill_technical_step(wizard: QuoteWizard) -> None:
    wizard.change("quantity", {"value": "120", "unit": "Metre"})
    wizard.change("depth", "15")
    wizard.change("diameter", {"value": 80, "unit": "cm"})


def fill_all_steps(wizard: QuoteWizard) -> None:
    fill_technical_step(wizard)
    assert wizard.next()
    wizard.change("scope", "all_inclusive")
    assert wizard.next()
    wizard.change("title", "Avcılar Konut Projesi")
    wizard.change("details", "Zemin etüdü mevcut.")
    assert wizard.next()
    wizard.change("location", "İstanbul, Kadıköy")
