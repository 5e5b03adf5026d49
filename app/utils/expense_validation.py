"""Expense validation and equal-split utilities."""
from typing import Iterable, List, Optional

from app.core.errors import InvalidInputError
from app.models.expense import ExpenseShare


def validate_amount(amount_cents: int, label: str = "Amount") -> None:
    """Amounts are positive integer cents."""
    # bool is an int subclass
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise InvalidInputError(f"{label} must be an integer number of cents: {amount_cents!r}")
    if amount_cents <= 0:
        raise InvalidInputError(f"{label} must be positive: {amount_cents}")


def validate_member_selection(member_ids: Optional[List[str]]) -> None:
    """
    Validate the members an expense is split between.

    Rules:
    - at least one member
    - no blank ids
    - no duplicates (the split order decides who absorbs the remainder)
    """
    if not member_ids:
        raise InvalidInputError("At least one member must be selected")

    if any(not member_id for member_id in member_ids):
        raise InvalidInputError("Member ids must be non-empty")

    if len(set(member_ids)) != len(member_ids):
        raise InvalidInputError("Selected members contain duplicates")


def validate_shares(total_cents: int, shares: Iterable[ExpenseShare]) -> None:
    """Shares must add up to the expense total exactly."""
    shares = list(shares)
    for share in shares:
        if share.amount_cents < 0:
            raise InvalidInputError(
                f"Share for member '{share.member_id}' is negative: {share.amount_cents}"
            )

    share_sum = sum(share.amount_cents for share in shares)
    if share_sum != total_cents:
        raise InvalidInputError(
            f"Share sum ({share_sum}) does not equal total ({total_cents})"
        )


def equal_split(total_cents: int, member_ids: List[str]) -> List[ExpenseShare]:
    """
    Split total_cents equally between member_ids.

    Every member gets total // n; the remainder is handed out one cent at a
    time to the first members in the given order, so 100 over three members
    becomes 34/33/33.
    """
    validate_amount(total_cents, "Total amount")
    validate_member_selection(member_ids)

    count = len(member_ids)
    per_member, remainder = divmod(total_cents, count)
    percentage = round(100 / count, 2)

    shares = [
        ExpenseShare(
            member_id=member_id,
            amount_cents=per_member + (1 if i < remainder else 0),
            percentage=percentage,
        )
        for i, member_id in enumerate(member_ids)
    ]

    validate_shares(total_cents, shares)
    return shares
