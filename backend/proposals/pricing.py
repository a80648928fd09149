"""
Proposal pricing.

subtotal = sum of service prices; the discount is a percentage of the
subtotal or a fixed amount; tax applies after the discount. Every figure is
rounded half-up to two places, and milestone amounts are shares of the total.
"""
from decimal import Decimal, InvalidOperation

from backend.core.utils import quantize

ZERO = Decimal('0.00')
HUNDRED = Decimal('100')


def to_decimal(value, default=ZERO):
    if value in (None, ''):
        return default
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    # NaN and Infinity are not prices
    return number if number.is_finite() else default


def calculate_pricing(services, discount=ZERO, discount_type='FIXED', tax_rate=Decimal('18.00'),
                      payment_schedule=None):
    subtotal = quantize(sum((to_decimal(s.get('price')) for s in services or []), ZERO))
    discount = to_decimal(discount)
    tax_rate = to_decimal(tax_rate)

    if discount_type == 'PERCENTAGE':
        discount_amount = quantize(subtotal * discount / HUNDRED)
    else:
        discount_amount = quantize(discount)

    after_discount = quantize(subtotal - discount_amount)
    tax_amount = quantize(after_discount * tax_rate / HUNDRED)
    total = quantize(after_discount + tax_amount)

    schedule = []
    for milestone in payment_schedule or []:
        entry = dict(milestone)
        entry['amount'] = float(quantize(total * to_decimal(entry.get('percentage')) / HUNDRED))
        schedule.append(entry)

    return {
        'subtotal': subtotal,
        'discount_amount': discount_amount,
        'after_discount': after_discount,
        'tax_amount': tax_amount,
        'total_amount': total,
        'payment_schedule': schedule,
    }
