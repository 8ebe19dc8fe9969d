from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BonusResult:
    tokens_awarded: int
    total_tokens: int
    reason: Optional[str] = None


@dataclass(frozen=True)
class PurchaseResult:
    item: str
    cost: int
    remaining_tokens: int
    purchased_at: datetime
