"""Reservation financials calculator.

Pure Python, Decimal arithmetic. Implements:
- Down payment base: plan amount, else the first "down payment" schedule row
- Down payment decomposition: preliminary / additional paid / remaining
- Remaining unit balance after the down payment

A Reservation Record that is approved and carries `details.dp` locks the
decomposition: its total, preliminary amount and paid amount override
whatever the caller sent. The remaining unit balance only depends on the
DP total, never on how the DP is split.
"""

from __future__ import annotations

from decimal import Decimal

from uptown_docs.calculators.money import ZERO, non_negative, to_amount, to_optional_amount
from uptown_docs.schemas.documents import DownPayment, DownPaymentLock, ScheduleRow

DOWN_PAYMENT_TOKEN = "down payment"


def down_payment_base(plan_amount: object, schedule: list[ScheduleRow]) -> Decimal:
    """Down payment from the generated plan, else from the schedule, else 0."""
    amount = to_amount(plan_amount)
    if amount > ZERO:
        return amount
    for row in schedule:
        if DOWN_PAYMENT_TOKEN in (row.label or "").lower():
            return row.amount
    return ZERO


def decompose_down_payment(
    base: Decimal,
    preliminary: Decimal,
    lock: DownPaymentLock | None = None,
) -> DownPayment:
    """Split the down payment into preliminary, paid and remaining parts.

    Args:
        base: Down payment derived from the deal snapshot.
        preliminary: Preliminary payment sent by the caller (or stored on the record).
        lock: `details.dp` of an approved reservation, if any.

    Returns:
        DownPayment whose `remaining` is max(0, total − preliminary − paid).
    """
    total = base
    paid = ZERO
    preliminary_date = None
    paid_date = None
    locked = lock is not None

    if lock is not None:
        lock_total = to_optional_amount(lock.total)
        if lock_total is not None and lock_total >= ZERO:
            total = lock_total

        lock_prelim = to_optional_amount(lock.preliminary_amount)
        if lock_prelim is not None and lock_prelim >= ZERO:
            preliminary = lock_prelim

        lock_paid = to_optional_amount(lock.paid_amount)
        if lock_paid is not None and lock_paid >= ZERO:
            paid = lock_paid

        preliminary_date = lock.preliminary_date
        paid_date = lock.paid_date

    remaining = non_negative(total - preliminary - paid)
    return DownPayment(
        total=total,
        preliminary=preliminary,
        preliminary_date=preliminary_date,
        paid=paid,
        paid_date=paid_date,
        remaining=remaining,
        locked=locked,
    )


def remaining_balance(total_incl: Decimal, dp_total: Decimal) -> Decimal:
    """Unit balance left after the down payment: max(0, totalIncl − DP total)."""
    return non_negative(total_incl - dp_total)
