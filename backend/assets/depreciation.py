"""Accumulated depreciation and current value of fixed assets"""
from decimal import Decimal

from backend.core.utils import quantize, today

ZERO = Decimal('0.00')
DAYS_PER_YEAR = 365.25


def years_owned(purchase_date, as_of):
    days = (as_of - purchase_date).days
    return max(0.0, days / DAYS_PER_YEAR)


def accumulated_depreciation(asset, as_of=None):
    """
    Depreciation charged from purchase up to `as_of`.

    SLM spreads (purchase - salvage) over the useful life, or applies the
    yearly rate to the purchase value when no life is set. WDV applies the
    rate to the declining balance. Never exceeds purchase - salvage.
    """
    as_of = as_of or today()
    years = years_owned(asset.purchase_date, as_of)
    purchase = Decimal(asset.purchase_value)
    salvage = Decimal(asset.salvage_value or ZERO)
    rate = Decimal(asset.depreciation_rate or ZERO)
    depreciable = max(ZERO, purchase - salvage)

    if asset.depreciation_method == 'WDV':
        remaining_factor = (1 - float(rate) / 100) ** years
        accumulated = purchase * Decimal(str(1 - remaining_factor))
    elif asset.useful_life_years:
        accumulated = depreciable / asset.useful_life_years * Decimal(str(years))
    else:
        accumulated = purchase * rate / 100 * Decimal(str(years))

    return quantize(min(max(ZERO, accumulated), depreciable))


def asset_valuation(asset, as_of=None):
    as_of = as_of or today()
    accumulated = accumulated_depreciation(asset, as_of)
    return {
        'accumulated_depreciation': accumulated,
        'current_value': quantize(Decimal(asset.purchase_value) - accumulated),
        'years_owned': round(years_owned(asset.purchase_date, as_of), 2),
    }
