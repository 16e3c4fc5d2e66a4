from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DebtorBill:
    """A bill that still has money owing on it."""

    bill: dict[str, Any]
    total_paid: float
    balance: float

    @property
    def bill_id(self) -> str:
        return self.bill["id"]


@dataclass(frozen=True)
class CreditorPayment:
    """A payment against a bill whose payments exceed its total."""

    payment: dict[str, Any]
    bill: dict[str, Any]
    overpayment: float
