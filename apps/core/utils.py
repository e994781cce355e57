"""
Balance reconciliation rule for the Shop Ledger.

Pure functions that compute a customer's new due amount from the
current due and a single transaction event. Nothing here touches the
database; the ledger service persists the results.
All money values are handled as Decimal.
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Tuple

from apps.core.exceptions import InvalidTransitionError, ValidationError
from apps.transactions.models import TransactionKind, TransactionStatus

ZERO = Decimal('0')

# Largest value a DecimalField(max_digits=12, decimal_places=2) money column holds.
MAX_MONEY = Decimal('9999999999.99')

# Kinds that raise the due when recorded; every other kind lowers it.
INCREASING_KINDS = frozenset({TransactionKind.CREDIT.value})
DECREASING_KINDS = frozenset({TransactionKind.PAYMENT.value, TransactionKind.ADJUSTMENT.value})

SETTLED_STATUSES = frozenset({TransactionStatus.PAID.value, TransactionStatus.COMPLETED.value})

# Legal moves out of PENDING. Every other status is terminal.
ALLOWED_TRANSITIONS = {
    TransactionStatus.PENDING.value: frozenset({
        TransactionStatus.PAID.value,
        TransactionStatus.COMPLETED.value,
        TransactionStatus.CANCELLED.value,
    }),
}


def _to_decimal(value, label: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(detail=f"{label} must be a number.")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(detail=f"{label} must be a number.")
    if not number.is_finite():
        raise ValidationError(detail=f"{label} must be a finite number.")
    return number


def to_amount(value) -> Decimal:
    """
    Coerce a transaction amount to Decimal.

    Raises:
        ValidationError: If the amount is unparsable, NaN, infinite,
            zero or negative.
    """
    amount = _to_decimal(value, 'Amount')
    if amount <= ZERO:
        raise ValidationError(detail="Amount must be greater than 0.")
    if amount > MAX_MONEY:
        raise ValidationError(detail=f"Amount cannot exceed {MAX_MONEY}.")
    return amount


def to_due(value) -> Decimal:
    """Coerce a customer's due amount to Decimal, rejecting negatives."""
    due = _to_decimal(value, 'Current due')
    if due < ZERO:
        raise ValidationError(detail="Current due cannot be negative.")
    if due > MAX_MONEY:
        raise ValidationError(detail=f"Due amount cannot exceed {MAX_MONEY}.")
    return due


def normalize_kind(kind) -> str:
    value = str(kind).strip().upper()
    if value not in TransactionKind.values:
        raise ValidationError(detail=f"Unknown transaction kind: {kind}.")
    return value


def normalize_status(status) -> str:
    value = str(status).strip().upper()
    if value not in TransactionStatus.values:
        raise ValidationError(detail=f"Unknown transaction status: {status}.")
    return value


def _increase(current_due: Decimal, amount: Decimal) -> Decimal:
    new_due = current_due + amount
    if new_due > MAX_MONEY:
        raise ValidationError(
            detail=f"Due amount would exceed the maximum of {MAX_MONEY}."
        )
    return new_due


def _decrease(current_due: Decimal, amount: Decimal) -> Decimal:
    # Overpayment is absorbed, never carried as negative due.
    return max(ZERO, current_due - amount)


def apply_transaction(current_due, kind, amount) -> Decimal:
    """
    Compute a customer's due after recording a new transaction.

    CREDIT adds the amount, up to MAX_MONEY. PAYMENT and ADJUSTMENT
    subtract it, floored at zero.

    Args:
        current_due: The customer's stored due (>= 0).
        kind: Transaction kind (case-insensitive).
        amount: Transaction amount (> 0).

    Returns:
        The new due as Decimal.

    Raises:
        ValidationError: If any input is invalid, or the new due would
            not fit the total_due column.
    """
    amount = to_amount(amount)
    current_due = to_due(current_due)
    kind = normalize_kind(kind)

    if kind in INCREASING_KINDS:
        return _increase(current_due, amount)
    return _decrease(current_due, amount)


def transition_balance(current_due, kind, amount, current_status, new_status) -> Decimal:
    """
    Compute a customer's due after a transaction changes status.

    Only PENDING -> PAID / COMPLETED / CANCELLED are legal. A credit
    leaving PENDING stops counting towards the due, so its amount is
    subtracted (floored at zero). Payments and adjustments were applied
    in full when recorded, so their transitions leave the due unchanged.

    Raises:
        ValidationError: If the amount, due, kind or new status is invalid.
        InvalidTransitionError: If the transition is a no-op or starts
            from a terminal status.
    """
    amount = to_amount(amount)
    current_due = to_due(current_due)
    kind = normalize_kind(kind)
    current_status = normalize_status(current_status)
    new_status = normalize_status(new_status)

    if new_status == current_status:
        raise InvalidTransitionError(
            detail=f"Transaction is already {current_status}."
        )
    if new_status not in ALLOWED_TRANSITIONS.get(current_status, frozenset()):
        raise InvalidTransitionError(
            detail=f"Cannot change status from {current_status} to {new_status}."
        )

    if kind in INCREASING_KINDS:
        return _decrease(current_due, amount)
    return current_due


def reverse_transaction(current_due, kind, amount, status) -> Decimal:
    """
    Compute a customer's due after a transaction is deleted.

    A pending credit is taken back out of the due. A credit that was
    settled or cancelled no longer contributes, so nothing changes.
    A payment or adjustment is added back in full.
    """
    amount = to_amount(amount)
    current_due = to_due(current_due)
    kind = normalize_kind(kind)
    status = normalize_status(status)

    if kind in INCREASING_KINDS:
        if status == TransactionStatus.PENDING:
            return _decrease(current_due, amount)
        return current_due
    return _increase(current_due, amount)


def replay_balance(entries: Iterable[Tuple[str, Decimal, str]]) -> Decimal:
    """
    Derive a due amount from transaction history.

    Folds (kind, amount, status) triples, oldest first, through the
    same rule used for incremental updates. A credit that has left
    PENDING is settled immediately after it is recorded.
    """
    due = ZERO
    for kind, amount, status in entries:
        due = apply_transaction(due, kind, amount)
        status = normalize_status(status)
        if normalize_kind(kind) in INCREASING_KINDS and status != TransactionStatus.PENDING:
            due = transition_balance(
                due, kind, amount, TransactionStatus.PENDING, status,
            )
    return due
