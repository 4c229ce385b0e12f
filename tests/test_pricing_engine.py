"""
Pricing engine regression tests.

These pin the documented rate tables and tier rules and should fail if
pricing logic changes without a PRICING_VERSION bump.
"""
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from moving_tool.engine import PricingEngine, MoveLogistics, CompanySettings, InvalidInputError, price_quote
from moving_tool.engine import rate_tables


@pytest.fixture(scope="module")
def engine():
    """Create a single engine instance for all tests."""
    return PricingEngine(CompanySettings())


def plain_move(**overrides) -> MoveLogistics:
    """Short walk, no flags, so the multiplier is exactly 1.0 unless overridden."""
    base = dict(crew_size=3, estimated_hours=4, mileage=10, walk_distance='Short', packing_type='None')
    base.update(overrides)
    return MoveLogistics(**base)


def test_reference_scenario(engine):
    """3 movers, 4h, 10 mi, Medium walk, no packing or flags, no card."""
    logistics = MoveLogistics(
        crew_size=3, estimated_hours=4, mileage=10, walk_distance='Medium', packing_type='None',
        is_same_day=False, is_weekend=False, is_month_end=False, use_credit_card=False,
    )
    result = engine.calculate(logistics)
    b = result.breakdown

    assert b.labor_revenue == 900
    assert b.truck_fee == 100
    assert b.mileage_charge == pytest.approx(9.90)
    assert b.fuel_fee == 0
    assert b.base_subtotal == pytest.approx(1009.90)
    assert b.complexity_multiplier == pytest.approx(1.08)
    assert b.estimated_hours == 4

    assert result.minimal.price == 1091
    assert result.recommended.price == 1222
    assert result.win_the_job.price == 1161
    for tier in result.tiers.values():
        assert tier.deposit_due == 273
        assert tier.processing_fee == 0
        assert tier.total_with_fees == tier.price

    assert result.surcharge_reasons == ["Medium walk distance (+8%)"]


def test_deterministic(engine):
    logistics = MoveLogistics(
        crew_size=4, estimated_hours=7.5, mileage=42.3, walk_distance='Long', packing_type='Partial',
        stairs_pickup=2, stairs_dropoff=1, heavy_items_count=3, is_weekend=True, use_credit_card=True,
        duration_days=2,
    )
    first = engine.calculate(logistics)
    second = engine.calculate(logistics)
    assert first == second
    assert first.to_dict() == second.to_dict()
    assert price_quote(logistics) == first


def test_credit_card_fees(engine):
    result = engine.calculate(MoveLogistics(use_credit_card=True))

    assert result.minimal.processing_fee == 32  # round(1091 * 0.029)
    assert result.recommended.processing_fee == 35  # round(1222 * 0.029)
    assert result.win_the_job.processing_fee == 34  # round(1161 * 0.029)
    for tier in result.tiers.values():
        assert tier.total_with_fees == tier.price + tier.processing_fee


@pytest.mark.parametrize("card", [True, False])
@pytest.mark.parametrize("crew,hours,miles", [(2, 1, 0), (3, 6, 55), (4, 12, 180), (2, 3.5, 99.9)])
def test_tier_invariants(engine, card, crew, hours, miles):
    result = engine.calculate(plain_move(
        crew_size=crew, estimated_hours=hours, mileage=miles, use_credit_card=card, packing_type='Full',
    ))
    assert result.win_the_job.price >= result.minimal.price
    for tier in result.tiers.values():
        assert 150 <= tier.deposit_due <= 500
        assert tier.total_with_fees == tier.price + tier.processing_fee
        if not card:
            assert tier.processing_fee == 0
        assert "Moving Services Agreement" in tier.description
        assert tier.margin >= 0


def test_deposit_same_for_all_tiers(engine):
    result = engine.calculate(plain_move(crew_size=3, estimated_hours=5))
    deposits = {t.deposit_due for t in result.tiers.values()}
    assert deposits == {rate_tables.round_dollars(result.minimal.price * 0.25)}


def test_deposit_clamped_low(engine):
    # 2 movers at the 3h minimum, no travel: 450 + 100 = 550 -> 25% = 138
    result = engine.calculate(plain_move(crew_size=2, estimated_hours=1, mileage=0))
    assert result.minimal.price == 550
    assert result.minimal.deposit_due == 150


def test_deposit_clamped_high(engine):
    result = engine.calculate(plain_move(crew_size=4, estimated_hours=10, mileage=0))
    assert result.minimal.price == 3100
    assert result.minimal.deposit_due == 500


def test_minimum_charge_hours(engine):
    result = engine.calculate(plain_move(crew_size=2, estimated_hours=1.5))
    assert result.breakdown.estimated_hours == 3
    assert result.breakdown.labor_revenue == 450


def test_labor_rate_table_ignores_base_hourly_rate():
    settings = CompanySettings(base_hourly_rate=999)
    result = PricingEngine(settings).calculate(plain_move(crew_size=4, estimated_hours=4))
    assert result.breakdown.labor_revenue == 1200


@pytest.mark.parametrize("miles,fee", [
    (0, 0), (15, 0), (16, 25), (30, 25), (31, 45), (50, 45), (51, 65),
    (75, 65), (76, 85), (100, 85), (101, 150), (400, 150),
])
def test_fuel_band_boundaries(engine, miles, fee):
    assert rate_tables.fuel_fee(miles) == fee
    assert engine.calculate(plain_move(mileage=miles)).breakdown.fuel_fee == fee


def test_fractional_mileage_fuel_band():
    assert rate_tables.fuel_fee(15.5) == 25
    assert rate_tables.fuel_fee(100.5) == 150


def test_stairs_capped(engine):
    result = engine.calculate(plain_move(stairs_pickup=5, stairs_dropoff=5))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.30)
    assert any("capped" in r for r in result.surcharge_reasons)


def test_stairs_under_cap(engine):
    result = engine.calculate(plain_move(stairs_pickup=2, stairs_dropoff=1))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.15)
    assert result.surcharge_reasons == ["Stairs: 3 flights (+15%)"]


def test_stairs_exactly_at_cap_not_flagged(engine):
    result = engine.calculate(plain_move(stairs_pickup=3, stairs_dropoff=3))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.30)
    assert result.surcharge_reasons == ["Stairs: 6 flights (+30%)"]


def test_heavy_items_capped(engine):
    result = engine.calculate(plain_move(heavy_items_count=10))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.20)
    assert result.surcharge_reasons == ["Heavy items: 10 (+20%, capped)"]


def test_heavy_items_under_cap(engine):
    result = engine.calculate(plain_move(heavy_items_count=6))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.18)
    assert result.surcharge_reasons == ["Heavy items: 6 (+18%)"]


@pytest.mark.parametrize("walk,packing,expected", [
    ('Short', 'None', 1.0),
    ('Medium', 'None', 1.08),
    ('Long', 'None', 1.15),
    ('Short', 'Partial', 1.15),
    ('Short', 'Full', 1.30),
    ('Long', 'Full', 1.45),
])
def test_walk_and_packing(engine, walk, packing, expected):
    result = engine.calculate(plain_move(walk_distance=walk, packing_type=packing))
    assert result.breakdown.complexity_multiplier == pytest.approx(expected)


def test_scheduling_surcharges_stack(engine):
    result = engine.calculate(plain_move(is_same_day=True, is_weekend=True, is_month_end=True))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.40)
    assert result.surcharge_reasons == [
        "Same-day surcharge applied (+20%)",
        "Weekend surcharge applied (+10%)",
        "Month-end surcharge applied (+10%)",
    ]


def test_multi_day(engine):
    result = engine.calculate(plain_move(duration_days=3))
    assert result.breakdown.complexity_multiplier == pytest.approx(1.20)
    assert result.surcharge_reasons == ["Multi-day job: 2 extra days (+20%)"]


def test_no_surcharges_no_reasons(engine):
    result = engine.calculate(plain_move())
    assert result.breakdown.complexity_multiplier == 1.0
    assert result.surcharge_reasons == []


@pytest.mark.parametrize("overrides,field", [
    ({'crew_size': 5}, 'crew_size'),
    ({'crew_size': 1}, 'crew_size'),
    ({'mileage': -1}, 'mileage'),
    ({'estimated_hours': -0.5}, 'estimated_hours'),
    ({'stairs_pickup': -1}, 'stairs_pickup'),
    ({'heavy_items_count': -2}, 'heavy_items_count'),
    ({'duration_days': 0}, 'duration_days'),
    ({'mileage': float('nan')}, 'mileage'),
    ({'mileage': float('inf')}, 'mileage'),
    ({'estimated_hours': float('nan')}, 'estimated_hours'),
    ({'estimated_hours': float('-inf')}, 'estimated_hours'),
    ({'stairs_dropoff': float('inf')}, 'stairs_dropoff'),
    ({'heavy_items_count': float('nan')}, 'heavy_items_count'),
    ({'duration_days': float('inf')}, 'duration_days'),
    ({'walk_distance': 'Far'}, 'walk_distance'),
    ({'packing_type': 'Some'}, 'packing_type'),
])
def test_invalid_input(engine, overrides, field):
    with pytest.raises(InvalidInputError) as exc:
        engine.calculate(plain_move(**overrides))
    assert exc.value.field == field


def test_invalid_input_is_value_error(engine):
    with pytest.raises(ValueError):
        engine.calculate(plain_move(crew_size=6))


def test_trace_and_version(engine):
    result = engine.calculate(MoveLogistics())
    assert result.pricing_version == rate_tables.PRICING_VERSION
    steps = [t.step for t in result.trace]
    assert steps[0] == "Labor"
    assert "Deposit" in steps
    assert "Minimal: $1009.90 × 1.08 = $1091" in result.get_trace_text()


def test_round_dollars_half_up():
    assert rate_tables.round_dollars(272.5) == 273
    assert rate_tables.round_dollars(1090.49) == 1090
    assert rate_tables.round_dollars(2.5) == 3
