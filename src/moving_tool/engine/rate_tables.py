"""
Rate tables for the moving price calculation.

All dollar amounts are per job unless noted. Changing any value here changes
quoted prices, so bump PRICING_VERSION alongside it.
"""
import math

PRICING_VERSION = "mvp-2024.1"

# Hourly rate for the whole crew, keyed by crew size
LABOR_RATES = {
    2: 150.0,
    3: 225.0,
    4: 300.0,
}

TRUCK_FEE = 100.0
MILEAGE_RATE = 0.99

# (upper bound in miles, fee); anything above the last bound pays FUEL_FEE_OVER_100
FUEL_BANDS = (
    (15, 0.0),
    (30, 25.0),
    (50, 45.0),
    (75, 65.0),
    (100, 85.0),
)
FUEL_FEE_OVER_100 = 150.0

STAIRS_PER_FLIGHT = 0.05
STAIRS_CAP = 0.30
HEAVY_ITEM_EACH = 0.03
HEAVY_ITEM_CAP = 0.20
WALK_DISTANCE_ADDERS = {
    'Short': 0.0,
    'Medium': 0.08,
    'Long': 0.15,
}
PACKING_ADDERS = {
    'None': 0.0,
    'Partial': 0.15,
    'Full': 0.30,
}
SAME_DAY_ADDER = 0.20
WEEKEND_ADDER = 0.10
MONTH_END_ADDER = 0.10
EXTRA_DAY_ADDER = 0.10

RECOMMENDED_MARKUP = 1.12
WIN_THE_JOB_DISCOUNT = 0.95
DEPOSIT_RATE = 0.25

AGREEMENT_NOTICE = "A signed Moving Services Agreement is required before the move."


def labor_rate(crew_size: int) -> float:
    """Hourly crew rate. Raises KeyError for unsupported crew sizes."""
    return LABOR_RATES[crew_size]


def fuel_fee(mileage: float) -> float:
    """Stepped fuel fee for a trip of the given mileage."""
    for upper, fee in FUEL_BANDS:
        if mileage <= upper:
            return fee
    return FUEL_FEE_OVER_100


def round_dollars(amount: float) -> int:
    """Round half up to whole dollars (1090.5 -> 1091, never to even)."""
    return int(math.floor(amount + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
