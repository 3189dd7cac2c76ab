"""
Pydantic model for catalog‑wide statistics.
"""

from pydantic import BaseModel


class CatalogStatistics(BaseModel):
    total_trips: int = 0
    average_price: float = 0
    min_price: float = 0
    max_price: float = 0
    average_length: float = 0
    total_reviews: int = 0
    average_rating: float = 0
