"""Domain models and rules for resolving the applicable price of a product.

This package contains in-memory (Pydantic) models describing price-list
entries and the pure selection rule applied to them. They are independent
from persistence models so that the rule can be tested without a database.
"""

__all__ = [
    "base_types",
    "pricing",
]
