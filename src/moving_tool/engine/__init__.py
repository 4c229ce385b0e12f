"""Engine subpackage - core move pricing logic."""
from .pricing_engine import PricingEngine, price_quote
from .models import MoveLogistics, CompanySettings, SmartPricing, PricingTier, CostBreakdown
from .errors import InvalidInputError, NotFoundError, StateLoadError

__all__ = [
    'PricingEngine', 'price_quote',
    'MoveLogistics', 'CompanySettings', 'SmartPricing', 'PricingTier', 'CostBreakdown',
    'InvalidInputError', 'NotFoundError', 'StateLoadError',
]
