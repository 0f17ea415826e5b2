from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, Sequence

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from returns.result import Result, Success

from storefront_orders.adapters.inbound.web.auth import (
    TokenVerifier,
    identity_dependency,
)
from storefront_orders.core.domain.model.errors import (
    Forbidden,
    NotFound,
    PartialCompletion,
    StorefrontError,
    Unauthorized,
    ValidationError,
)
from storefront_orders.core.domain.model.identity import Identity
from storefront_orders.core.domain.model.order import Order
from storefront_orders.core.ports.inbound.get_order import (
    GetOrderQuery,
    GetOrderUseCase,
    LineItemView,
    ListOrdersUseCase,
    OrderView,
)
from storefront_orders.core.ports.inbound.manage_order import (
    DeleteOrderCommand,
    DeleteOrderUseCase,
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from storefront_orders.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
    PlaceOrderUseCase,
)
from storefront_orders.core.ports.inbound.sales_report import (
    OrdersByUserQuery,
    SalesReportUseCase,
)

logger = structlog.get_logger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class OrderItemIn(BaseModel):
    quantity: int = Field(gt=0, examples=[3])
    product: str = Field(min_length=1, examples=["5fcfc406ae79b0a6a90d2585"])


class PlaceOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_items: list[OrderItemIn] = Field(alias="orderItems", min_length=1)
    shipping_address1: str = Field(alias="shippingAddress1", min_length=1)
    shipping_address2: str = Field("", alias="shippingAddress2")
    city: str = Field(min_length=1, examples=["Prague"])
    zip: str = Field(min_length=1, examples=["00000"])
    country: str = Field(min_length=1, examples=["Czech Republic"])
    phone: str = Field(min_length=1, examples=["+420702241333"])
    status: str | None = Field(None, examples=["Pending"])
    user: str = Field(min_length=1)


class UpdateStatusRequest(BaseModel):
    status: str = Field(min_length=1, examples=["Shipped"])


# ---- response rendering ----------------------------------------------------


def _envelope(
    data: Any, message: str | None = None, error: str | None = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": error is None}
    if message is not None:
        body["message"] = message
    if error is not None:
        body["error"] = error
    body["data"] = data
    return body


def _order_record(order: Order) -> Dict[str, Any]:
    return {
        "id": order.order_id.value,
        "orderItems": [i.value for i in order.items],
        "shippingAddress1": order.shipping.address1,
        "shippingAddress2": order.shipping.address2,
        "city": order.shipping.city,
        "zip": order.shipping.zip,
        "country": order.shipping.country,
        "phone": order.phone,
        "status": order.status,
        "totalPrice": str(order.total_price.amount),
        "user": order.user_id.value,
        "dateOrdered": order.date_ordered.isoformat(),
    }


def _line_item_view(item: LineItemView) -> Dict[str, Any]:
    product = None
    if item.product is not None:
        category = None
        if item.product.category is not None:
            category = {
                "id": item.product.category.category_id,
                "name": item.product.category.name,
            }
        product = {
            "id": item.product.product_id,
            "name": item.product.name,
            "description": item.product.description,
            "category": category,
        }
    return {"id": item.line_item_id, "quantity": item.quantity, "product": product}


def _order_view(view: OrderView) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "id": view.order_id.value,
        "orderItems": [_line_item_view(i) for i in view.items],
    }
    if view.shipping is not None:
        doc.update(
            {
                "shippingAddress1": view.shipping.address1,
                "shippingAddress2": view.shipping.address2,
                "city": view.shipping.city,
                "zip": view.shipping.zip,
                "country": view.shipping.country,
            }
        )
    doc.update(
        {
            "phone": view.phone,
            "status": view.status,
            "totalPrice": str(view.total_price.amount),
            "user": None
            if view.user is None
            else {"id": view.user.user_id, "name": view.user.name},
            "dateOrdered": view.date_ordered.isoformat(),
        }
    )
    return doc


def _map_error_to_http(err: StorefrontError) -> tuple[int, Dict[str, Any]]:
    if isinstance(err, Unauthorized):
        return 401, _envelope(None, message=str(err), error="User not Authorized")

    if isinstance(err, Forbidden):
        return 403, _envelope(None, error=str(err))

    if isinstance(err, ValidationError):
        return 400, _envelope(None, error=str(err))

    if isinstance(err, NotFound):
        return 404, _envelope(None, error=str(err))

    if isinstance(err, PartialCompletion):
        return 500, _envelope(
            {"survivingIds": list(err.surviving_ids)}, error=str(err)
        )

    return 500, _envelope(None, error=str(err))


def _unwrap(result: Result[Any, StorefrontError]) -> Any:
    if isinstance(result, Success):
        return result.unwrap()
    raise result.failure()


# ---- App factory -----------------------------------------------------------


def create_app(
    place_order_uc: PlaceOrderUseCase,
    get_order_uc: GetOrderUseCase,
    list_orders_uc: ListOrdersUseCase,
    update_status_uc: UpdateOrderStatusUseCase,
    delete_order_uc: DeleteOrderUseCase,
    sales_report_uc: SalesReportUseCase,
    verifier: TokenVerifier,
    api_prefix: str = "/api/v1",
    cors_origins: Sequence[str] = ("*",),
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        if on_shutdown is not None:
            await on_shutdown()

    app = FastAPI(title="storefront_orders", lifespan=lifespan)

    # must stay inside CORSMiddleware (added below)
    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("unhandled_error", error_type=type(exc).__name__)
            response = JSONResponse(
                status_code=500, content=_envelope(None, error="internal server error")
            )
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- exception handlers (uniform envelope) -------------------------------

    @app.exception_handler(StorefrontError)
    async def handle_domain_error(_: Request, exc: StorefrontError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        detail = f"{where}: {first.get('msg', 'invalid value')}" if where else "invalid request"
        return JSONResponse(
            status_code=400,
            content=_envelope(None, message="invalid request", error=detail),
        )

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return _envelope({"status": "ok"})

    current_identity = identity_dependency(verifier)
    router = APIRouter(prefix=f"{api_prefix}/orders")

    @router.get("/get/count")
    async def count_orders(caller: Identity = Depends(current_identity)) -> Any:
        count = _unwrap(await sales_report_uc.count_orders(caller))
        return _envelope(
            {"count": count}, message="Count of orders has been generated"
        )

    @router.get("/get/totalsales")
    async def total_sales(caller: Identity = Depends(current_identity)) -> Any:
        total = _unwrap(await sales_report_uc.total_sales(caller))
        return _envelope(
            {"totalsales": str(total.amount)},
            message="The totalsales of orders has been generated",
        )

    @router.get("/get/orders/{user_id}")
    async def orders_by_user(
        user_id: str, caller: Identity = Depends(current_identity)
    ) -> Any:
        orders = _unwrap(
            await sales_report_uc.orders_by_user(OrdersByUserQuery(user_id), caller)
        )
        return _envelope(
            [_order_record(o) for o in orders], message="Orders found for this user"
        )

    @router.get("")
    async def list_orders(caller: Identity = Depends(current_identity)) -> Any:
        views = _unwrap(await list_orders_uc.list_orders(caller))
        return _envelope(
            [_order_view(v) for v in views],
            message="No orders" if not views else "Orders found",
        )

    @router.get("/{order_id}")
    async def get_order(
        order_id: str, caller: Identity = Depends(current_identity)
    ) -> Any:
        view = _unwrap(await get_order_uc.get_order(GetOrderQuery(order_id), caller))
        return _envelope(_order_view(view), message="Order with this id has been found")

    @router.post("", status_code=201)
    async def place_order(
        req: PlaceOrderRequest, caller: Identity = Depends(current_identity)
    ) -> Any:
        cmd = PlaceOrderCommand(
            user_id=req.user,
            lines=tuple(
                PlaceOrderLine(quantity=it.quantity, product_id=it.product)
                for it in req.order_items
            ),
            shipping_address1=req.shipping_address1,
            shipping_address2=req.shipping_address2,
            city=req.city,
            zip=req.zip,
            country=req.country,
            phone=req.phone,
            status=req.status,
        )
        order = _unwrap(await place_order_uc.place_order(cmd, caller))
        return _envelope(_order_record(order), message="This order has been posted")

    @router.put("/{order_id}")
    async def update_status(
        order_id: str,
        req: UpdateStatusRequest,
        caller: Identity = Depends(current_identity),
    ) -> Any:
        order = _unwrap(
            await update_status_uc.update_status(
                UpdateOrderStatusCommand(order_id=order_id, status=req.status), caller
            )
        )
        return _envelope(
            _order_record(order), message="The status for this order has been updated"
        )

    @router.delete("/{order_id}")
    async def delete_order(
        order_id: str, caller: Identity = Depends(current_identity)
    ) -> Any:
        order = _unwrap(
            await delete_order_uc.delete_order(DeleteOrderCommand(order_id), caller)
        )
        return _envelope(_order_record(order), message="This order has been deleted")

    app.include_router(router)
    return app
