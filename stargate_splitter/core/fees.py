"""Native value computation for splitter bridge calls."""

from __future__ import annotations

from typing import List, Optional, Sequence

from stargate_splitter.core.utils import get_logger, sum_ints

LOGGER = get_logger("stargate_splitter.fees")


def leg_fees(
    *,
    lz_fees: Sequence[int],
    is_native_from: bool,
    native_amount: Optional[int],
) -> List[int]:
    """Return the native fee owed for each leg.

    Every leg pays its LayerZero messaging fee. When the source asset is
    native, ``native_amount`` (the first swap's input amount) is added to the
    first leg only; later legs never carry it, even when they are copies of
    the first.
    """
    fees = [int(fee) for fee in lz_fees]
    if is_native_from and fees:
        if native_amount is None:
            raise ValueError("native source requires the amount sent in with the first leg")
        fees[0] += int(native_amount)
    return fees


def total_fee(fees: Sequence[int]) -> int:
    """Sum per-leg fees into the value attached to the bridge call."""
    total = sum_ints(fees)
    LOGGER.info("Total native fee %s across %s legs", total, len(fees))
    return total


__all__ = ["leg_fees", "total_fee"]
