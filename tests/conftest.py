"""
Shared fixtures for the indicator TAI tests.
"""
import itertools
from datetime import date
from types import SimpleNamespace

import pytest

from metadata_assembler import assemble
from models import IndicatorInput


STEEL_INPUT = IndicatorInput(
    name="粗钢吨钢碳排放量",
    source_name="生态环境部",
    miss_rate_percent="0",
    data_volume="10000",
)


@pytest.fixture
def id_factory():
    """Deterministic identifier source: IND_0001, IND_0002, ..."""
    counter = itertools.count(1)
    return lambda: f"IND_{next(counter):04d}"


@pytest.fixture
def steel_metadata():
    """Assembled metadata for the steel emission indicator, semantic fields unset."""
    return assemble(STEEL_INPUT, id_factory=lambda: "IND_TEST", today=lambda: date(2024, 1, 2))


@pytest.fixture
def build_metadata(steel_metadata):
    """Build a metadata snapshot from the steel record with edited fields."""
    def _build(**changes):
        return steel_metadata.with_changes(**changes)
    return _build


class FakeChatModel:
    """Stands in for the chat model: replays queued replies or exceptions."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(content=reply)


@pytest.fixture
def fake_chat_model():
    return FakeChatModel


@pytest.fixture
def steel_input():
    return STEEL_INPUT
