from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .duration import parse_duration_hint
from .strategies.base import DurationStrategy
from .strategies.client_hint_strategy import ClientHintStrategy
from .strategies.elapsed_strategy import ElapsedStrategy


@dataclass
class DurationStrategyFactory:
    """Factory Pattern: prefer a well-formed client hint, otherwise measure."""

    trust_client_hint: bool = True

    def for_checkout(self, *, hours_worked_hint: Any = None) -> DurationStrategy:
        if self.trust_client_hint:
            hint = parse_duration_hint(hours_worked_hint)
            if hint is not None:
                return ClientHintStrategy(hint=hint)
        return ElapsedStrategy()
