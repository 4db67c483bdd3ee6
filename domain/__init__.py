"""
Domain layer - Business entities, models, schemas, and enums.
"""

from domain import enums, models, schemas

__all__ = ["enums", "models", "schemas"]
