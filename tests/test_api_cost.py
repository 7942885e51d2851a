"""
Tests for the generation cost estimate.
"""

from types import SimpleNamespace

import pytest

from lib import config
from lib.api_cost import compute_generation_cost, cost_from_usage


class TestGenerationCost:
    def test_default_prices(self):
        cost = compute_generation_cost(1_000_000, 1_000_000)
        assert cost.estimated_usd == pytest.approx(18.0)

    def test_typical_call(self):
        cost = compute_generation_cost(1000, 500)
        assert cost.input_tokens == 1000
        assert cost.output_tokens == 500
        assert cost.estimated_usd == pytest.approx(0.0105)

    def test_prices_come_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "PRICE_INPUT_PER_M", 1.0)
        monkeypatch.setattr(config, "PRICE_OUTPUT_PER_M", 2.0)
        assert compute_generation_cost(1_000_000, 1_000_000).estimated_usd == pytest.approx(3.0)

    def test_to_dict(self):
        assert compute_generation_cost(10, 0).to_dict() == {
            "input_tokens": 10,
            "output_tokens": 0,
            "estimated_usd": pytest.approx(0.00003),
        }


class TestCostFromUsage:
    def test_usage_object(self):
        cost = cost_from_usage(SimpleNamespace(input_tokens=200, output_tokens=100))
        assert (cost.input_tokens, cost.output_tokens) == (200, 100)

    def test_missing_usage_is_zero(self):
        cost = cost_from_usage(None)
        assert cost.estimated_usd == 0
        assert cost.input_tokens == 0

    def test_none_counts_are_zero(self):
        cost = cost_from_usage(SimpleNamespace(input_tokens=None, output_tokens=5))
        assert cost.input_tokens == 0
        assert cost.output_tokens == 5
