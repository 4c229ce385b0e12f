"""
Surcharge Matcher - Finds the complexity surcharges that apply to a move.

Used by the pricing engine to build the complexity multiplier on top of
the base subtotal. Every surcharge carries the reason shown to the customer.
"""
from dataclasses import dataclass

from . import rate_tables as rates
from .models import MoveLogistics


@dataclass
class Surcharge:
    """A surcharge that applies to a move, with its multiplier contribution."""
    code: str
    adder: float
    reason: str
    capped: bool = False


def _pct(adder: float) -> str:
    return f"+{round(adder * 100, 2):g}%"


class SurchargeMatcher:
    """
    Matches surcharge conditions against move logistics.

    Components are additive, so order only affects the order of the
    reasons list. Zero-valued components (Short walk, no packing) are
    not reported.
    """

    def find_surcharges(self, logistics: MoveLogistics) -> list[Surcharge]:
        matched = []

        # Stairs
        flights = logistics.stairs_pickup + logistics.stairs_dropoff
        if flights > 0:
            raw = round(flights * rates.STAIRS_PER_FLIGHT, 4)
            adder = min(raw, rates.STAIRS_CAP)
            capped = raw > rates.STAIRS_CAP
            reason = f"Stairs: {flights} flight{'s' if flights != 1 else ''} ({_pct(adder)}"
            reason += ", capped)" if capped else ")"
            matched.append(Surcharge('STAIRS', adder, reason, capped))

        # Walk distance
        walk = rates.WALK_DISTANCE_ADDERS[logistics.walk_distance]
        if walk > 0:
            matched.append(Surcharge(
                'WALK', walk, f"{logistics.walk_distance} walk distance ({_pct(walk)})"
            ))

        # Heavy items
        heavy = logistics.heavy_items_count
        if heavy > 0:
            raw = round(heavy * rates.HEAVY_ITEM_EACH, 4)
            adder = min(raw, rates.HEAVY_ITEM_CAP)
            capped = raw > rates.HEAVY_ITEM_CAP
            reason = f"Heavy items: {heavy} ({_pct(adder)}"
            reason += ", capped)" if capped else ")"
            matched.append(Surcharge('HEAVY', adder, reason, capped))

        # Packing
        packing = rates.PACKING_ADDERS[logistics.packing_type]
        if packing > 0:
            matched.append(Surcharge(
                'PACKING', packing, f"{logistics.packing_type} packing service ({_pct(packing)})"
            ))

        # Scheduling flags stack independently
        if logistics.is_same_day:
            matched.append(Surcharge(
                'SAME_DAY', rates.SAME_DAY_ADDER,
                f"Same-day surcharge applied ({_pct(rates.SAME_DAY_ADDER)})"
            ))
        if logistics.is_weekend:
            matched.append(Surcharge(
                'WEEKEND', rates.WEEKEND_ADDER,
                f"Weekend surcharge applied ({_pct(rates.WEEKEND_ADDER)})"
            ))
        if logistics.is_month_end:
            matched.append(Surcharge(
                'MONTH_END', rates.MONTH_END_ADDER,
                f"Month-end surcharge applied ({_pct(rates.MONTH_END_ADDER)})"
            ))

        # Multi-day
        extra_days = logistics.duration_days - 1
        if extra_days > 0:
            adder = round(extra_days * rates.EXTRA_DAY_ADDER, 4)
            matched.append(Surcharge(
                'MULTI_DAY', adder,
                f"Multi-day job: {extra_days} extra day{'s' if extra_days != 1 else ''} ({_pct(adder)})"
            ))

        return matched

    def apply_surcharges(self, surcharges: list[Surcharge]) -> float:
        """Stack surcharges onto the 1.0 base multiplier."""
        multiplier = 1.0 + sum(s.adder for s in surcharges)
        return round(multiplier, 4)
