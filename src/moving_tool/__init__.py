"""
Moving Tool Package

Operations tooling for a local moving company: quotes, jobs, crew and receipts.
Prices moves using Logistics → Subtotal → Multiplier → Tiers pipeline.
"""

__version__ = "1.0.0"
