"""Running token totals for a conversation session and what they cost."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class ModelPrice:
	"""USD per 1,000 tokens."""

	prompt_per_1k: float
	completion_per_1k: float


MODEL_PRICING: Dict[str, ModelPrice] = {
	"gpt-4o-mini": ModelPrice(0.00015, 0.0006),
	"gpt-4o": ModelPrice(0.0025, 0.01),
	"gpt-4.1": ModelPrice(0.002, 0.008),
	"gpt-3.5-turbo": ModelPrice(0.0005, 0.0015),
}


def price_for(model: str, pricing: Optional[Mapping[str, ModelPrice]] = None) -> ModelPrice:
	"""Look up a model's price, accepting dated snapshots such as `gpt-4o-2024-08-06`.

	The longest matching key wins, so `gpt-4o-mini-2024-07-18` is priced as
	`gpt-4o-mini` and not as `gpt-4o`.

	Raises:
		ValueError: If no priced model matches.
	"""
	table = MODEL_PRICING if pricing is None else pricing
	name = (model or "").strip().lower()
	matches = [key for key in table if name == key or name.startswith(key + "-")]
	if not matches:
		raise ValueError(f"No price for model '{model}'. Priced: {', '.join(sorted(table))}")
	return table[max(matches, key=len)]


@dataclass
class SessionUsage:
	"""Cumulative token usage across successful calls."""

	prompt_tokens: int = 0
	completion_tokens: int = 0
	calls: int = 0

	def add(self, usage: Dict[str, Optional[int]]) -> None:
		"""Fold one call's usage in; missing counts are treated as zero."""
		self.prompt_tokens += int(usage.get("prompt_tokens") or 0)
		self.completion_tokens += int(usage.get("completion_tokens") or 0)
		self.calls += 1

	@property
	def total_tokens(self) -> int:
		return self.prompt_tokens + self.completion_tokens

	def as_dict(self) -> Dict[str, int]:
		return {
			"prompt_tokens": self.prompt_tokens,
			"completion_tokens": self.completion_tokens,
			"total_tokens": self.total_tokens,
			"calls": self.calls,
		}

	def cost(self, model: str, pricing: Optional[Mapping[str, ModelPrice]] = None) -> Dict[str, float]:
		"""Price the totals so far at `model`'s rates.

		Completion-mode sessions resend the whole accumulated prompt on every
		call, so `prompt_cost_per_call` climbs as the conversation grows.

		Raises:
			ValueError: If `model` has no price.
		"""
		price = price_for(model, pricing)
		prompt_cost = self.prompt_tokens / 1000.0 * price.prompt_per_1k
		completion_cost = self.completion_tokens / 1000.0 * price.completion_per_1k
		return {
			"prompt_cost": round(prompt_cost, 8),
			"completion_cost": round(completion_cost, 8),
			"total_cost": round(prompt_cost + completion_cost, 8),
			"prompt_cost_per_call": round(prompt_cost / self.calls, 8) if self.calls else 0.0,
		}
