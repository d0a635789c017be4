from typing import List, Optional

from fastapi import APIRouter, Body, Response

from mindmap.example.dtos import (
    AddressDto,
    CreateOrderDto,
    CreateProductDto,
    CreateUserDto,
    OrderDetailDto,
    OrderDto,
    OrderItemDetailDto,
    ProductDetailDto,
    ProductDto,
    ReviewDto,
    UpdateProductDto,
    UpdateUserDto,
    UserDto,
    UserProfileDto,
)


# -------------------------
# Orders
# -------------------------

orders = APIRouter(prefix="/api/orders", tags=["Orders"])


@orders.get("")
def get_orders(status: Optional[str] = None) -> List[OrderDto]:
    return []


@orders.get("/{id}")
def get_order(id: int) -> OrderDto:
    return OrderDto(id=id)


@orders.get("/{id}/details")
def get_order_details(id: int) -> OrderDetailDto:
    return OrderDetailDto(id=id)


@orders.post("", status_code=201)
def create_order(create_order_dto: CreateOrderDto) -> OrderDto:
    return OrderDto(id=1, user_id=create_order_dto.user_id)


@orders.put("/{id}/status")
def update_order_status(id: int, status: str = Body(...)) -> OrderDto:
    return OrderDto(id=id, status=status)


@orders.delete("/{id}", status_code=204)
def cancel_order(id: int) -> Response:
    return Response(status_code=204)


@orders.get("/user/{user_id}")
def get_orders_by_user(user_id: int) -> List[OrderDto]:
    return []


@orders.get("/{id}/items")
def get_order_items(id: int) -> List[OrderItemDetailDto]:
    return []


# -------------------------
# Products
# -------------------------

products = APIRouter(prefix="/api/products", tags=["Products"])


@products.get("")
def get_products(category: Optional[str] = None) -> List[ProductDto]:
    return []


@products.get("/search")
def search_products(query: str) -> List[ProductDto]:
    return []


@products.get("/{id}")
def get_product(id: int) -> ProductDto:
    return ProductDto(id=id, name="", price=0)


@products.get("/{id}/details")
def get_product_details(id: int) -> ProductDetailDto:
    return ProductDetailDto(id=id, name="", price=0)


@products.post("", status_code=201)
def create_product(create_product_dto: CreateProductDto) -> ProductDto:
    return ProductDto(id=1, **create_product_dto.model_dump())


@products.put("/{id}")
def update_product(id: int, update_product_dto: UpdateProductDto) -> ProductDto:
    return ProductDto(id=id, name=update_product_dto.name or "", price=update_product_dto.price or 0)


@products.delete("/{id}", status_code=204)
def delete_product(id: int) -> Response:
    return Response(status_code=204)


@products.get("/{id}/reviews")
def get_product_reviews(id: int) -> List[ReviewDto]:
    return []


@products.post("/{id}/reviews", status_code=201)
def add_product_review(id: int, review_dto: ReviewDto) -> ReviewDto:
    return review_dto


# -------------------------
# Users
# -------------------------

users = APIRouter(prefix="/api/users", tags=["Users"])


@users.get("")
def get_users() -> List[UserDto]:
    return []


@users.get("/{id}")
def get_user(id: int) -> UserDto:
    return UserDto(id=id, username="", email="")


@users.get("/{id}/profile")
def get_user_profile(id: int) -> UserProfileDto:
    return UserProfileDto(id=id, username="", email="")


@users.post("", status_code=201)
def create_user(create_user_dto: CreateUserDto) -> UserDto:
    return UserDto(id=1, **create_user_dto.model_dump())


@users.put("/{id}")
def update_user(id: int, update_user_dto: UpdateUserDto) -> UserDto:
    return UserDto(id=id, username="", email=update_user_dto.email or "")


@users.delete("/{id}", status_code=204)
def delete_user(id: int) -> Response:
    return Response(status_code=204)


@users.get("/{id}/addresses")
def get_user_addresses(id: int) -> List[AddressDto]:
    return []


@users.post("/{id}/addresses", status_code=201)
def add_user_address(id: int, address_dto: AddressDto) -> AddressDto:
    return address_dto


ROUTERS = [orders, products, users]
