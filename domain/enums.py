"""
Domain enums for MealCheckin application.
Contains all enumeration types used across the domain models.
"""

import enum


class MealType(str, enum.Enum):
    """Meal attendance categories"""

    GUEST = "guest"
    EXTRA = "extra"
    RV = "rv"
    SHELTER = "shelter"
    UNITED_EFFORT = "united_effort"
    DAY_WORKER = "day_worker"
    LUNCH_BAG = "lunch_bag"
