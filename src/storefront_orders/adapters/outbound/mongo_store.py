from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Sequence

import structlog
from bson import ObjectId
from bson.decimal128 import Decimal128
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError
from returns.result import Failure, Result, Success

from storefront_orders.core.domain.model.catalog import Category, Product, UserSummary
from storefront_orders.core.domain.model.errors import (
    LineItemNotFound,
    OrderNotFound,
    PersistenceError,
    StorefrontError,
)
from storefront_orders.core.domain.model.order import (
    CategoryId,
    LineItem,
    LineItemId,
    Money,
    Order,
    OrderId,
    ProductId,
    ShippingAddress,
    UserId,
)
from storefront_orders.core.ports.outbound.catalog import ProductCatalog, UserDirectory
from storefront_orders.core.ports.outbound.line_items import LineItemRepository
from storefront_orders.core.ports.outbound.orders import OrderRepository

logger = structlog.get_logger(__name__)

ORDERS = "orders"
ORDER_ITEMS = "orderitems"
PRODUCTS = "products"
CATEGORIES = "categories"
USERS = "users"


def _store_error(exc: PyMongoError) -> PersistenceError:
    logger.error("mongo_operation_failed", error=str(exc))
    return PersistenceError(message=f"database error: {type(exc).__name__}")


def _id_match(raw: str) -> Any:
    # catalog and user documents written by the storefront carry ObjectId keys
    if ObjectId.is_valid(raw):
        return {"$in": [raw, ObjectId(raw)]}
    return raw


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return Decimal(str(value or 0))


# ---- document mapping ------------------------------------------------------


def order_to_doc(order: Order) -> Dict[str, Any]:
    return {
        "_id": order.order_id.value,
        "orderItems": [i.value for i in order.items],
        "shippingAddress1": order.shipping.address1,
        "shippingAddress2": order.shipping.address2,
        "city": order.shipping.city,
        "zip": order.shipping.zip,
        "country": order.shipping.country,
        "phone": order.phone,
        "status": order.status,
        "totalPrice": Decimal128(order.total_price.amount),
        "user": order.user_id.value,
        "dateOrdered": order.date_ordered,
    }


def order_from_doc(doc: Mapping[str, Any]) -> Order:
    return Order(
        order_id=OrderId(str(doc["_id"])),
        items=tuple(LineItemId(str(i)) for i in doc.get("orderItems", [])),
        shipping=ShippingAddress(
            address1=doc.get("shippingAddress1", ""),
            address2=doc.get("shippingAddress2", ""),
            city=doc.get("city", ""),
            zip=doc.get("zip", ""),
            country=doc.get("country", ""),
        ),
        phone=doc.get("phone", ""),
        status=doc.get("status", ""),
        total_price=Money.of(_to_decimal(doc.get("totalPrice"))),
        user_id=UserId(str(doc.get("user", ""))),
        date_ordered=doc["dateOrdered"],
    )


def product_from_doc(doc: Mapping[str, Any]) -> Product:
    return Product(
        product_id=ProductId(str(doc["_id"])),
        name=doc.get("name", ""),
        description=doc.get("description", ""),
        price=Money.of(_to_decimal(doc.get("price"))),
        category_id=CategoryId(str(doc.get("category", ""))),
        count_in_stock=int(doc.get("countInStock", 0)),
        rich_description=doc.get("richDescription", ""),
        image=doc.get("image", ""),
        images=tuple(doc.get("images", ())),
        brand=doc.get("brand", ""),
        rating=doc.get("rating", 0),
        num_reviews=doc.get("numReviews", 0),
        is_featured=bool(doc.get("isFeatured", False)),
        date_created=doc.get("dateCreated"),
    )


# ---- repositories ----------------------------------------------------------


@dataclass
class MongoOrderRepository(OrderRepository):
    collection: AsyncCollection

    async def save(self, order: Order) -> Result[OrderId, StorefrontError]:
        try:
            await self.collection.insert_one(order_to_doc(order))
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        return Success(order.order_id)

    async def get(self, order_id: OrderId) -> Result[Order, StorefrontError]:
        try:
            doc = await self.collection.find_one({"_id": order_id.value})
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if doc is None:
            return Failure(OrderNotFound(message="order not found", order_id=order_id.value))
        return Success(order_from_doc(doc))

    async def list_all(self) -> Result[Sequence[Order], StorefrontError]:
        return await self._find({}, sort=True)

    async def list_by_user(
        self, user_id: UserId
    ) -> Result[Sequence[Order], StorefrontError]:
        return await self._find({"user": _id_match(user_id.value)}, sort=False)

    async def _find(
        self, query: Mapping[str, Any], sort: bool
    ) -> Result[Sequence[Order], StorefrontError]:
        try:
            cursor = self.collection.find(query)
            if sort:
                cursor = cursor.sort("dateOrdered", -1)
            docs = await cursor.to_list(None)
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        return Success(tuple(order_from_doc(d) for d in docs))

    async def update_status(
        self, order_id: OrderId, status: str
    ) -> Result[Order, StorefrontError]:
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": order_id.value},
                {"$set": {"status": status}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if doc is None:
            return Failure(OrderNotFound(message="order not found", order_id=order_id.value))
        return Success(order_from_doc(doc))

    async def delete(self, order_id: OrderId) -> Result[Order, StorefrontError]:
        try:
            doc = await self.collection.find_one_and_delete({"_id": order_id.value})
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if doc is None:
            return Failure(OrderNotFound(message="order not found", order_id=order_id.value))
        return Success(order_from_doc(doc))

    async def count(self) -> Result[int, StorefrontError]:
        try:
            return Success(await self.collection.count_documents({}))
        except PyMongoError as exc:
            return Failure(_store_error(exc))

    async def total_sales(self) -> Result[Money, StorefrontError]:
        pipeline = [{"$group": {"_id": 0, "totalsales": {"$sum": "$totalPrice"}}}]
        try:
            cursor = await self.collection.aggregate(pipeline)
            rows = await cursor.to_list(None)
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if not rows:
            return Success(Money.zero())
        return Success(Money.of(_to_decimal(rows[0]["totalsales"])))


@dataclass
class MongoLineItemRepository(LineItemRepository):
    collection: AsyncCollection

    async def save(self, item: LineItem) -> Result[LineItemId, StorefrontError]:
        doc = {
            "_id": item.line_item_id.value,
            "quantity": item.quantity,
            "product": item.product_id.value,
        }
        try:
            await self.collection.insert_one(doc)
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        return Success(item.line_item_id)

    async def get(self, item_id: LineItemId) -> Result[LineItem, StorefrontError]:
        try:
            doc = await self.collection.find_one({"_id": item_id.value})
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if doc is None:
            return Failure(
                LineItemNotFound(message="line item not found", line_item_id=item_id.value)
            )
        return Success(
            LineItem(
                line_item_id=item_id,
                product_id=ProductId(str(doc.get("product", ""))),
                quantity=int(doc["quantity"]),
            )
        )

    async def delete(self, item_id: LineItemId) -> Result[bool, StorefrontError]:
        try:
            res = await self.collection.delete_one({"_id": item_id.value})
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        return Success(res.deleted_count > 0)


@dataclass
class MongoProductCatalog(ProductCatalog):
    products: AsyncCollection
    categories: AsyncCollection

    async def find_product(
        self, product_id: ProductId
    ) -> Result[Product | None, StorefrontError]:
        try:
            doc = await self.products.find_one({"_id": _id_match(product_id.value)})
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        return Success(None if doc is None else product_from_doc(doc))

    async def find_category(
        self, category_id: CategoryId
    ) -> Result[Category | None, StorefrontError]:
        try:
            doc = await self.categories.find_one({"_id": _id_match(category_id.value)})
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if doc is None:
            return Success(None)
        return Success(
            Category(
                category_id=category_id,
                name=doc.get("name", ""),
                color=doc.get("color"),
                icon=doc.get("icon"),
            )
        )


@dataclass
class MongoUserDirectory(UserDirectory):
    collection: AsyncCollection

    async def find_user(
        self, user_id: UserId
    ) -> Result[UserSummary | None, StorefrontError]:
        try:
            doc = await self.collection.find_one(
                {"_id": _id_match(user_id.value)}, {"name": 1}
            )
        except PyMongoError as exc:
            return Failure(_store_error(exc))
        if doc is None:
            return Success(None)
        return Success(UserSummary(user_id=user_id, name=doc.get("name", "")))


class MongoStore:
    """Owns the client and hands out one repository per collection."""

    def __init__(self, url: str, database: str) -> None:
        self.client: AsyncMongoClient = AsyncMongoClient(url, tz_aware=True)
        db = self.client[database]
        self.orders = MongoOrderRepository(db[ORDERS])
        self.line_items = MongoLineItemRepository(db[ORDER_ITEMS])
        self.catalog = MongoProductCatalog(db[PRODUCTS], db[CATEGORIES])
        self.users = MongoUserDirectory(db[USERS])

    async def close(self) -> None:
        await self.client.close()
