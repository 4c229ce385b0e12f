"""
Pricing Engine - Deterministic three-tier pricing for moves with traceability.

Resolution pipeline:
- Labor (crew-size rate × billable hours) + truck + mileage + fuel = base subtotal
- Complexity multiplier stacked from surcharges
- Minimal → Recommended → Win-the-job tiers
- Deposit, card processing fee and fee-inclusive totals per tier
"""
import logging
import math
from typing import Optional

from . import rate_tables as rates
from .errors import InvalidInputError
from .models import (
    CompanySettings, CostBreakdown, MoveLogistics, PricingTier, SmartPricing,
    PACKING_TYPES, WALK_DISTANCES,
)
from .surcharges import SurchargeMatcher

logger = logging.getLogger(__name__)


TIER_LABELS = {
    'minimal': "Minimal",
    'recommended': "Recommended",
    'win_the_job': "Win the Job",
}

TIER_PITCH = {
    'minimal': "Lowest price that covers crew, truck and travel.",
    'recommended': "Full-service price with margin for the unexpected.",
    'win_the_job': "Competitive price to close the booking today.",
}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class PricingEngine:
    """
    Core pricing engine that turns move logistics into three priced tiers.

    The engine holds no state between calls beyond its settings, so a single
    instance can price any number of independent quotes.
    """

    def __init__(self, settings: Optional[CompanySettings] = None):
        self.settings = settings or CompanySettings()
        self.surcharge_matcher = SurchargeMatcher()

    def validate(self, logistics: MoveLogistics):
        """Raise InvalidInputError for the first bad field found."""
        if not _is_number(logistics.crew_size) or logistics.crew_size not in rates.LABOR_RATES:
            raise InvalidInputError(
                f"Crew size must be one of {sorted(rates.LABOR_RATES)}, got {logistics.crew_size!r}",
                field='crew_size',
            )

        for name in ('mileage', 'estimated_hours', 'stairs_pickup', 'stairs_dropoff', 'heavy_items_count'):
            value = getattr(logistics, name)
            if not _is_number(value):
                raise InvalidInputError(f"{name} must be a finite number, got {value!r}", field=name)
            if value < 0:
                raise InvalidInputError(f"{name} cannot be negative, got {value}", field=name)

        if not _is_number(logistics.duration_days) or logistics.duration_days < 1:
            raise InvalidInputError(
                f"duration_days must be a finite number of at least 1, got {logistics.duration_days!r}",
                field='duration_days',
            )

        if logistics.walk_distance not in WALK_DISTANCES:
            raise InvalidInputError(
                f"walk_distance must be one of {WALK_DISTANCES}, got {logistics.walk_distance!r}",
                field='walk_distance',
            )

        if logistics.packing_type not in PACKING_TYPES:
            raise InvalidInputError(
                f"packing_type must be one of {PACKING_TYPES}, got {logistics.packing_type!r}",
                field='packing_type',
            )

    def calculate(self, logistics: MoveLogistics) -> SmartPricing:
        """
        Price a move with full traceability.

        Args:
            logistics: MoveLogistics dataclass describing the move

        Returns:
            SmartPricing with minimal/recommended/win_the_job tiers,
            cost breakdown, surcharge reasons and trace
        """
        self.validate(logistics)
        settings = self.settings
        trace = []

        # Labor
        rate = rates.labor_rate(logistics.crew_size)
        hours = max(float(logistics.estimated_hours), float(settings.min_charge_hours))
        labor = round(rate * hours, 2)
        if hours > logistics.estimated_hours:
            trace.append(("Minimum Charge", f"Raised {logistics.estimated_hours}h to minimum", f"{hours:g}h"))
        trace.append(("Labor", f"{logistics.crew_size}-person crew at ${rate:.2f}/h × {hours:g}h", f"${labor:.2f}"))

        # Fixed + travel
        truck = rates.TRUCK_FEE
        mileage_charge = round(logistics.mileage * rates.MILEAGE_RATE, 2)
        fuel = rates.fuel_fee(logistics.mileage)
        trace.append(("Truck", "Flat truck fee", f"${truck:.2f}"))
        trace.append(("Mileage", f"{logistics.mileage:g} mi × ${rates.MILEAGE_RATE:.2f}", f"${mileage_charge:.2f}"))
        trace.append(("Fuel", f"Fuel band for {logistics.mileage:g} mi", f"${fuel:.2f}"))

        subtotal = round(labor + truck + mileage_charge + fuel, 2)
        trace.append(("Subtotal", "Labor + truck + mileage + fuel", f"${subtotal:.2f}"))

        # Complexity
        surcharges = self.surcharge_matcher.find_surcharges(logistics)
        multiplier = self.surcharge_matcher.apply_surcharges(surcharges)
        for s in surcharges:
            trace.append(("Surcharge", s.reason, f"+{s.adder:g}"))
        trace.append(("Multiplier", f"1.0 + {len(surcharges)} surcharge(s)", f"×{multiplier:g}"))

        # Tiers
        minimal_price = rates.round_dollars(subtotal * multiplier)
        recommended_price = rates.round_dollars(minimal_price * rates.RECOMMENDED_MARKUP)
        win_price = max(minimal_price, rates.round_dollars(recommended_price * rates.WIN_THE_JOB_DISCOUNT))
        trace.append(("Minimal", f"${subtotal:.2f} × {multiplier:g}", f"${minimal_price}"))
        trace.append(("Recommended", f"${minimal_price} × {rates.RECOMMENDED_MARKUP}", f"${recommended_price}"))
        trace.append(("Win the Job", f"max(minimal, ${recommended_price} × {rates.WIN_THE_JOB_DISCOUNT})", f"${win_price}"))

        deposit = rates.round_dollars(rates.clamp(
            rates.round_dollars(minimal_price * rates.DEPOSIT_RATE),
            settings.deposit_min,
            settings.deposit_max,
        ))
        trace.append(("Deposit", f"25% of minimal within ${settings.deposit_min:g}-${settings.deposit_max:g}", f"${deposit}"))

        tiers = {
            key: self._build_tier(key, price, subtotal, deposit, logistics.use_credit_card)
            for key, price in (
                ('minimal', minimal_price),
                ('recommended', recommended_price),
                ('win_the_job', win_price),
            )
        }

        pricing = SmartPricing(
            minimal=tiers['minimal'],
            recommended=tiers['recommended'],
            win_the_job=tiers['win_the_job'],
            breakdown=CostBreakdown(
                labor_revenue=labor,
                truck_fee=truck,
                mileage_charge=mileage_charge,
                fuel_fee=fuel,
                complexity_multiplier=multiplier,
                estimated_hours=hours,
                base_subtotal=subtotal,
            ),
            surcharge_reasons=[s.reason for s in surcharges],
            pricing_version=rates.PRICING_VERSION,
        )
        for step, desc, val in trace:
            pricing.add_trace(step, desc, val)

        logger.debug(
            "Priced %s-crew move (%s mi): %s / %s / %s",
            logistics.crew_size, logistics.mileage, minimal_price, recommended_price, win_price,
        )
        return pricing

    def _build_tier(self, key: str, price: int, subtotal: float, deposit: int, use_credit_card: bool) -> PricingTier:
        """Assemble one tier; fees and totals derive from its own price."""
        fee = rates.round_dollars(price * self.settings.processing_fee_rate) if use_credit_card else 0
        margin = 0.0
        if price > 0:
            margin = round(max(0.0, (price - subtotal) / price * 100), 1)

        description = f"{TIER_PITCH[key]} {rates.AGREEMENT_NOTICE}"
        if fee:
            description += f" Includes {self.settings.processing_fee_rate * 100:g}% card processing fee."

        return PricingTier(
            label=TIER_LABELS[key],
            price=price,
            margin=margin,
            description=description,
            deposit_due=deposit,
            processing_fee=fee,
            total_with_fees=price + fee,
        )


def price_quote(logistics: MoveLogistics, settings: Optional[CompanySettings] = None) -> SmartPricing:
    """Price a move with a one-off engine. See PricingEngine.calculate."""
    return PricingEngine(settings).calculate(logistics)
