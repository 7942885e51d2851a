"""
Generation cost estimate for Anthropic calls.

Prices are USD per million tokens, configured in lib/config.
"""

from dataclasses import asdict, dataclass

from lib import config


@dataclass
class GenerationCost:
    input_tokens: int
    output_tokens: int
    estimated_usd: float

    def to_dict(self) -> dict:
        return asdict(self)


def compute_generation_cost(input_tokens: int, output_tokens: int) -> GenerationCost:
    """Estimated USD cost of one call."""
    usd = (
        input_tokens * config.PRICE_INPUT_PER_M + output_tokens * config.PRICE_OUTPUT_PER_M
    ) / 1_000_000
    return GenerationCost(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        estimated_usd=usd,
    )


def cost_from_usage(usage) -> GenerationCost:
    """Build a cost from an Anthropic ``message.usage`` object; missing usage counts as zero."""
    if usage is None:
        return compute_generation_cost(0, 0)
    return compute_generation_cost(
        getattr(usage, "input_tokens", 0) or 0,
        getattr(usage, "output_tokens", 0) or 0,
    )
