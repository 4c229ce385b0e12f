"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field, asdict, fields
from typing import Optional


WALK_DISTANCES = ('Short', 'Medium', 'Long')
PACKING_TYPES = ('None', 'Partial', 'Full')
TIMELINE_VIEWS = ('Day', 'Week', 'Month')
TIER_KEYS = ('minimal', 'recommended', 'win_the_job')


def _known_fields(cls, data: dict) -> dict:
    """Drop keys the dataclass does not declare (older snapshots, extra form fields)."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class TraceStep:
    """A single step in the pricing calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class CompanySettings:
    """Company-wide configuration used when quoting."""
    name: str = "Elite Movers HQ"
    phone: str = "555-010-9988"
    service_area: list[str] = field(default_factory=lambda: [
        'Minneapolis', 'St. Paul', 'Brooklyn Park', 'Bloomington'
    ])
    # Not read by the engine; labor rates come from the crew-size table
    base_hourly_rate: float = 150.0
    min_charge_hours: float = 3.0
    deposit_amount: float = 50.0
    crew_sizes: list[int] = field(default_factory=lambda: [2, 3, 4, 5, 6])
    processing_fee_rate: float = 0.029
    deposit_min: float = 150.0
    deposit_max: float = 500.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'CompanySettings':
        return cls(**_known_fields(cls, data))


@dataclass
class MoveLogistics:
    """Everything about a move that affects its price."""
    date: str = ""
    time_window: str = "08:00 - 10:00"
    crew_size: int = 3
    stairs_pickup: int = 0
    stairs_dropoff: int = 0
    walk_distance: str = "Medium"  # Short / Medium / Long
    packing_type: str = "None"  # None / Partial / Full
    heavy_items_count: int = 0
    mileage: float = 10.0
    is_same_day: bool = False
    is_weekend: bool = False
    is_month_end: bool = False
    use_credit_card: bool = False
    estimated_hours: float = 4.0
    duration_days: int = 1
    timeline_notes: str = ""

    # Carried onto the job record, not priced
    pickup_address: str = "TBD"
    dropoff_address: str = "TBD"
    elevator: bool = False
    truck_size: str = "26ft Box"
    timeline_view: str = "Day"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'MoveLogistics':
        return cls(**_known_fields(cls, data))


@dataclass
class PricingTier:
    """One of the three priced options offered for a move."""
    label: str
    price: int
    margin: float
    description: str
    deposit_due: int
    processing_fee: int
    total_with_fees: int


@dataclass
class CostBreakdown:
    """Cost components that make up the base subtotal."""
    labor_revenue: float
    truck_fee: float
    mileage_charge: float
    fuel_fee: float
    complexity_multiplier: float
    estimated_hours: float
    base_subtotal: float


@dataclass
class SmartPricing:
    """Complete result of a pricing calculation."""
    minimal: PricingTier
    recommended: PricingTier
    win_the_job: PricingTier
    breakdown: CostBreakdown
    surcharge_reasons: list[str] = field(default_factory=list)
    tip: Optional[float] = None
    pricing_version: str = ""
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def tiers(self) -> dict[str, PricingTier]:
        return {
            'minimal': self.minimal,
            'recommended': self.recommended,
            'win_the_job': self.win_the_job,
        }

    def tier(self, key: str) -> PricingTier:
        """Look up a tier by key ("minimal", "recommended", "win_the_job")."""
        return self.tiers[key]

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the calculation trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'SmartPricing':
        """Rebuild from the dict form produced by to_dict (persisted jobs)."""
        return cls(
            minimal=PricingTier(**data['minimal']),
            recommended=PricingTier(**data['recommended']),
            win_the_job=PricingTier(**data['win_the_job']),
            breakdown=CostBreakdown(**data['breakdown']),
            surcharge_reasons=list(data.get('surcharge_reasons', [])),
            tip=data.get('tip'),
            pricing_version=data.get('pricing_version', ''),
            trace=[TraceStep(**t) for t in data.get('trace', [])],
        )
