"""API routes package"""

from . import guests, meals, totals, health

__all__ = ["guests", "meals", "totals", "health"]
