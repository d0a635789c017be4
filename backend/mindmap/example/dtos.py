from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


# -------------------------
# Users
# -------------------------

class AddressDto(BaseModel):
    id: int = 0
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class UserDto(BaseModel):
    id: int
    username: str
    email: str
    first_name: str = ""
    last_name: str = ""
    created_at: Optional[datetime] = None


class UserProfileDto(UserDto):
    addresses: List[AddressDto] = Field(default_factory=list)
    order_count: int = 0
    review_count: int = 0


class CreateUserDto(BaseModel):
    username: str
    email: str
    first_name: str = ""
    last_name: str = ""


class UpdateUserDto(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


# -------------------------
# Products
# -------------------------

class ReviewDto(BaseModel):
    id: int = 0
    user_id: int
    username: str = ""
    rating: int
    comment: str = ""
    created_at: Optional[datetime] = None


class ProductDto(BaseModel):
    id: int
    name: str
    description: str = ""
    price: Decimal
    stock: int = 0
    category: str = ""
    tags: List[str] = Field(default_factory=list)


class CreateProductDto(BaseModel):
    name: str
    description: str = ""
    price: Decimal
    stock: int = 0
    category: str = ""
    tags: List[str] = Field(default_factory=list)


class UpdateProductDto(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None


class ProductDetailDto(ProductDto):
    reviews: List[ReviewDto] = Field(default_factory=list)
    average_rating: float = 0.0


# -------------------------
# Orders
# -------------------------

class OrderDto(BaseModel):
    id: int
    user_id: int = 0
    order_number: str = ""
    order_date: Optional[datetime] = None
    status: str = ""
    total_amount: Decimal = Decimal("0")
    shipping_address: AddressDto = Field(default_factory=AddressDto)


class OrderItemDto(BaseModel):
    product_id: int
    quantity: int
    price: Decimal


class CreateOrderDto(BaseModel):
    user_id: int
    items: List[OrderItemDto] = Field(default_factory=list)
    shipping_address: AddressDto


class OrderItemDetailDto(BaseModel):
    id: int
    product_id: int
    product: ProductDto
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class OrderDetailDto(OrderDto):
    user: Optional[UserDto] = None
    items: List[OrderItemDetailDto] = Field(default_factory=list)
