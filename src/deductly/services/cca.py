"""Capital cost allowance for depreciable assets.

CCA is recomputed from scratch whenever an input changes; nothing here keeps a
running balance. The half-year rule is an explicit per-asset election and is
never inferred from purchase dates.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from deductly.models.tax import CCAClass, CCAResult
from deductly.services.currency import ZERO
from deductly.services.validation import InvalidCCACostError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deductly.models.ledger import Asset

logger = logging.getLogger(__name__)

HALF = Decimal("0.5")


def prescribed_rate(asset_class: str) -> Decimal:
    """Prescribed declining-balance rate for a CCA class."""
    return CCAClass(asset_class).prescribed_rate


def calculate_cca(
    cost_before_tax: Decimal,
    opening_ucc: Decimal,
    rate: Decimal,
    *,
    half_year_rule: bool,
) -> CCAResult:
    """Compute one year of CCA.

    Args:
        cost_before_tax: Capital cost of the asset
        opening_ucc: Undepreciated capital cost at the start of the year
        rate: Declining-balance rate as a fraction, e.g. 0.30
        half_year_rule: Whether only half the cost is eligible this year

    Returns:
        CCAResult with the eligible base, the deduction and the closing UCC

    Raises:
        InvalidCCACostError: If the cost is zero or negative
    """
    if cost_before_tax <= ZERO:
        raise InvalidCCACostError(
            "cost_before_tax", "CCA cost must be greater than zero"
        )

    base = cost_before_tax * HALF if half_year_rule else cost_before_tax
    deduction = max(ZERO, base * rate)
    closing_ucc = max(ZERO, opening_ucc - deduction)
    return CCAResult(base=base, cca_deduction=deduction, closing_ucc=closing_ucc)


def calculate_asset_cca(asset: Asset) -> CCAResult:
    """Apply :func:`calculate_cca` to an asset, defaulting to its class rate."""
    rate = asset.cca_rate if asset.cca_rate is not None else prescribed_rate(
        asset.asset_class
    )
    return calculate_cca(
        asset.cost_before_tax,
        asset.ucc_opening,
        rate,
        half_year_rule=asset.half_year_rule,
    )


def total_cca_deduction(assets: Iterable[Asset]) -> Decimal:
    """Sum the current-year CCA across assets.

    An asset whose cost was never entered keeps whatever ``cca_current`` the
    record store holds, so a half-entered vehicle does not break the report.
    """
    total = ZERO
    for asset in assets:
        try:
            total += calculate_asset_cca(asset).cca_deduction
        except InvalidCCACostError:
            logger.warning(
                "Asset %s has no usable cost; using stored CCA %s",
                asset.id or asset.asset_name,
                asset.cca_current,
            )
            total += max(ZERO, asset.cca_current)
    return total
