"""
GraphQL schema mounted at /graphql

Resolvers are thin pass-throughs to the services; the request's database
session travels in the context.
"""
import dataclasses
from typing import List
from uuid import UUID
import logging

import strawberry
from fastapi import Depends
from sqlalchemy.orm import Session
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from storefront.api.orders import PAYMENT_CONFIRMS_ORDER
from storefront.config import settings
from storefront.db.database import get_db
from storefront.exceptions import StorefrontError
from storefront.gql.types import (
    Category,
    CreateCategoryInput,
    CreateOrderInput,
    CreateProductInput,
    CreateReviewInput,
    Order,
    Page,
    Product,
    Review,
    UpdateOrderInput,
    User,
    page_of,
)
from storefront.schemas.catalog import CategoryCreate, ProductCreate
from storefront.schemas.order import OrderCreate, OrderUpdate
from storefront.schemas.review import ReviewCreate
from storefront.services.category_service import CategoryService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.review_service import ReviewService
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

DEFAULT_SIZE = settings.default_page_size


def _db(info: Info) -> Session:
    return info.context["db"]


def _input(model, data):
    """Validate a strawberry input through the matching request model"""
    values = {k: v for k, v in dataclasses.asdict(data).items() if v is not None}
    return model.model_validate(values)


@strawberry.type
class Query:

    @strawberry.field
    def order(self, info: Info, id: UUID) -> Order:
        return Order.from_response(OrderService.get_order(_db(info), id))

    @strawberry.field
    def order_by_number(self, info: Info, order_number: str) -> Order:
        return Order.from_response(OrderService.get_order_by_number(_db(info), order_number))

    @strawberry.field
    def orders(self, info: Info, page: int = 0, size: int = DEFAULT_SIZE) -> Page[Order]:
        return page_of(OrderService.get_orders(_db(info), page, size), Order.from_response)

    @strawberry.field
    def orders_by_user(self, info: Info, user_id: UUID, page: int = 0, size: int = DEFAULT_SIZE) -> Page[Order]:
        return page_of(OrderService.get_orders_by_user(_db(info), user_id, page, size), Order.from_response)

    @strawberry.field
    def orders_by_status(self, info: Info, status: str, page: int = 0, size: int = DEFAULT_SIZE) -> Page[Order]:
        return page_of(OrderService.get_orders_by_status(_db(info), status, page, size), Order.from_response)

    @strawberry.field
    def product(self, info: Info, id: UUID) -> Product:
        return Product.from_response(ProductService.get_product(_db(info), id))

    @strawberry.field
    def products(self, info: Info, page: int = 0, size: int = DEFAULT_SIZE) -> Page[Product]:
        return page_of(ProductService.get_products(_db(info), page, size), Product.from_response)

    @strawberry.field
    def search_products(
        self, info: Info, keyword: str, page: int = 0, size: int = DEFAULT_SIZE
    ) -> Page[Product]:
        return page_of(ProductService.search_products(_db(info), keyword, page, size), Product.from_response)

    @strawberry.field
    def category(self, info: Info, id: UUID) -> Category:
        return Category.from_response(CategoryService.get_category(_db(info), id))

    @strawberry.field
    def categories(self, info: Info) -> List[Category]:
        return [Category.from_response(c) for c in CategoryService.get_categories(_db(info))]

    @strawberry.field
    def user(self, info: Info, id: UUID) -> User:
        return User.from_response(UserService.get_user(_db(info), id))

    @strawberry.field
    def users(self, info: Info, page: int = 0, size: int = DEFAULT_SIZE) -> Page[User]:
        return page_of(UserService.get_users(_db(info), page, size), User.from_response)

    @strawberry.field
    def reviews_by_product(
        self, info: Info, product_id: UUID, page: int = 0, size: int = DEFAULT_SIZE
    ) -> Page[Review]:
        return page_of(ReviewService.get_product_reviews(_db(info), product_id, page, size), Review.from_response)


@strawberry.type
class Mutation:

    @strawberry.mutation
    def create_order(self, info: Info, input: CreateOrderInput) -> Order:
        logger.info(f"GraphQL createOrder for user {input.user_id}")
        return Order.from_response(OrderService.create_order(_db(info), _input(OrderCreate, input)))

    @strawberry.mutation(
        description=(
            "Change references, notes or items of an order. Items not mentioned are kept; "
            "an edit that removes every item is rejected."
        )
    )
    def update_order(self, info: Info, id: UUID, input: UpdateOrderInput) -> Order:
        return Order.from_response(OrderService.update_order(_db(info), id, _input(OrderUpdate, input)))

    @strawberry.mutation
    def update_order_status(self, info: Info, id: UUID, status: str) -> Order:
        return Order.from_response(OrderService.update_order_status(_db(info), id, status))

    @strawberry.mutation(description=f"Update an order's payment status. {PAYMENT_CONFIRMS_ORDER}")
    def update_payment_status(self, info: Info, id: UUID, payment_status: str) -> Order:
        return Order.from_response(OrderService.update_payment_status(_db(info), id, payment_status))

    @strawberry.mutation
    def cancel_order(self, info: Info, id: UUID) -> Order:
        return Order.from_response(OrderService.cancel_order(_db(info), id))

    @strawberry.mutation
    def delete_order(self, info: Info, id: UUID) -> bool:
        OrderService.delete_order(_db(info), id)
        return True

    @strawberry.mutation
    def create_product(self, info: Info, input: CreateProductInput) -> Product:
        return Product.from_response(ProductService.create_product(_db(info), _input(ProductCreate, input)))

    @strawberry.mutation
    def create_category(self, info: Info, input: CreateCategoryInput) -> Category:
        return Category.from_response(CategoryService.create_category(_db(info), _input(CategoryCreate, input)))

    @strawberry.mutation
    def create_review(self, info: Info, input: CreateReviewInput) -> Review:
        return Review.from_response(ReviewService.create_review(_db(info), _input(ReviewCreate, input)))


class StorefrontSchema(strawberry.Schema):

    def process_errors(self, errors, execution_context=None) -> None:
        unexpected = []
        for error in errors:
            if isinstance(error.original_error, StorefrontError):
                logger.warning(f"GraphQL request rejected: {error.message}")
            else:
                unexpected.append(error)
        if unexpected:
            super().process_errors(unexpected, execution_context)


def get_context(db: Session = Depends(get_db)):
    return {"db": db}


schema = StorefrontSchema(query=Query, mutation=Mutation)
graphql_router = GraphQLRouter(schema, context_getter=get_context)
