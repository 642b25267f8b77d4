from decimal import Decimal

from pydantic import BaseModel, Field

from models.product import Product


class CartLine(BaseModel):
    product: Product
    quantity: int = Field(default=1, ge=1)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    @property
    def savings(self) -> Decimal:
        original = self.product.original_price
        if original is None or original <= self.product.price:
            return Decimal(0)
        return (original - self.product.price) * self.quantity

    def to_dict(self):
        return {
            "product_id": self.product.id,
            "name": self.product.name,
            "unit": self.product.unit,
            "unit_price": float(self.product.price),
            "original_price": float(self.product.original_price) if self.product.original_price is not None else None,
            "in_stock": self.product.in_stock,
            "quantity": self.quantity,
            "subtotal": float(self.line_total),
            "savings": float(self.savings),
        }
