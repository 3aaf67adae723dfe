from decimal import Decimal

from pydantic import BaseModel


class ProductStats(BaseModel):
    total_products: int
    total_categories: int
    total_brands: int
    average_price: Decimal
