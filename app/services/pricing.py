"""Cart pricing: line totals, subtotal, delivery fee and payable total."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from models.cart import CartLine

FREE_DELIVERY_THRESHOLD = Decimal("500")
DELIVERY_FEE = Decimal("40")
# One paisa, the smallest billable amount.
MIN_STEP = Decimal("0.01")


@dataclass(frozen=True)
class PricingPolicy:
    free_delivery_threshold: Decimal = FREE_DELIVERY_THRESHOLD
    delivery_fee: Decimal = DELIVERY_FEE

    @classmethod
    def from_config(cls, config) -> "PricingPolicy":
        return cls(
            free_delivery_threshold=Decimal(str(config.get("FREE_DELIVERY_THRESHOLD", FREE_DELIVERY_THRESHOLD))),
            delivery_fee=Decimal(str(config.get("DELIVERY_FEE", DELIVERY_FEE))),
        )


DEFAULT_POLICY = PricingPolicy()


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    delivery_fee: Decimal
    payable_total: Decimal

    def to_dict(self):
        return {
            "subtotal": float(self.subtotal),
            "delivery_fee": float(self.delivery_fee),
            "payable_total": float(self.payable_total),
        }


def subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.line_total for line in lines), Decimal(0))


def delivery_fee(amount: Decimal, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    # Strictly above the threshold ships free; exactly at it does not.
    if amount > policy.free_delivery_threshold:
        return Decimal(0)
    return policy.delivery_fee


def compute_totals(lines: Iterable[CartLine], policy: PricingPolicy = DEFAULT_POLICY) -> Totals:
    sub = subtotal(lines)
    fee = delivery_fee(sub, policy)
    return Totals(subtotal=sub, delivery_fee=fee, payable_total=sub + fee)


def amount_to_free_delivery(amount: Decimal, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    """Smallest extra spend that makes delivery free (0 once it already is)."""
    if amount > policy.free_delivery_threshold:
        return Decimal(0)
    return policy.free_delivery_threshold - amount + MIN_STEP
