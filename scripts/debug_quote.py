#!/usr/bin/env python
"""
Print a quote and its calculation trace from the command line.

Usage:
    python scripts/debug_quote.py --crew 3 --hours 4 --miles 10 --walk Medium
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from moving_tool.engine import MoveLogistics, InvalidInputError, price_quote
from moving_tool.services import reports


def main():
    parser = argparse.ArgumentParser(description="Price a move and show the trace")
    parser.add_argument('--crew', type=int, default=3)
    parser.add_argument('--hours', type=float, default=4.0)
    parser.add_argument('--miles', type=float, default=10.0)
    parser.add_argument('--walk', default='Medium')
    parser.add_argument('--packing', default='None')
    parser.add_argument('--stairs-pickup', type=int, default=0)
    parser.add_argument('--stairs-dropoff', type=int, default=0)
    parser.add_argument('--heavy', type=int, default=0)
    parser.add_argument('--days', type=int, default=1)
    parser.add_argument('--same-day', action='store_true')
    parser.add_argument('--weekend', action='store_true')
    parser.add_argument('--month-end', action='store_true')
    parser.add_argument('--card', action='store_true')
    args = parser.parse_args()

    logistics = MoveLogistics(
        crew_size=args.crew,
        estimated_hours=args.hours,
        mileage=args.miles,
        walk_distance=args.walk,
        packing_type=args.packing,
        stairs_pickup=args.stairs_pickup,
        stairs_dropoff=args.stairs_dropoff,
        heavy_items_count=args.heavy,
        duration_days=args.days,
        is_same_day=args.same_day,
        is_weekend=args.weekend,
        is_month_end=args.month_end,
        use_credit_card=args.card,
    )

    try:
        pricing = price_quote(logistics)
    except InvalidInputError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"--- Quote ({pricing.pricing_version}) ---")
    print(reports.tiers_frame(pricing).to_string(index=False))
    print("\nSurcharges:")
    for reason in pricing.surcharge_reasons or ["(none)"]:
        print(f"  {reason}")
    print("\nTrace:")
    print(pricing.get_trace_text())


if __name__ == "__main__":
    main()
