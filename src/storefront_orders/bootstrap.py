from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog
from fastapi import FastAPI

from storefront_orders.adapters.inbound.web.auth import TokenVerifier
from storefront_orders.adapters.inbound.web.fastapi_app import create_app
from storefront_orders.adapters.outbound.in_memory_catalog import (
    InMemoryProductCatalog,
    InMemoryUserDirectory,
)
from storefront_orders.adapters.outbound.in_memory_line_items import (
    InMemoryLineItemRepository,
)
from storefront_orders.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from storefront_orders.adapters.outbound.log_events import LogEventPublisher
from storefront_orders.config import Settings
from storefront_orders.core.domain.service.line_items_service import LineItemMaterializer
from storefront_orders.core.domain.service.order_lifecycle_service import (
    OrderLifecycleDeps,
    OrderLifecycleService,
)
from storefront_orders.core.domain.service.order_query_service import (
    OrderQueryDeps,
    OrderQueryService,
)
from storefront_orders.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from storefront_orders.core.domain.service.pricing import PricingCalculator
from storefront_orders.core.domain.service.sales_report_service import (
    SalesReportDeps,
    SalesReportService,
)
from storefront_orders.core.ports.outbound.catalog import ProductCatalog, UserDirectory
from storefront_orders.core.ports.outbound.events import EventPublisher
from storefront_orders.core.ports.outbound.line_items import LineItemRepository
from storefront_orders.core.ports.outbound.orders import OrderRepository
from storefront_orders.logging_setup import configure_logging

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Adapters:
    orders: OrderRepository
    line_items: LineItemRepository
    catalog: ProductCatalog
    users: UserDirectory
    events: EventPublisher
    close: Callable[[], Awaitable[None]] | None = None


@dataclass(frozen=True)
class UseCases:
    place_order: PlaceOrderService
    queries: OrderQueryService
    lifecycle: OrderLifecycleService
    reports: SalesReportService


def build_in_memory_adapters() -> Adapters:
    return Adapters(
        orders=InMemoryOrderRepository(),
        line_items=InMemoryLineItemRepository(),
        catalog=InMemoryProductCatalog(),
        users=InMemoryUserDirectory(),
        events=LogEventPublisher(),
    )


def build_adapters(settings: Settings) -> Adapters:
    if settings.store_backend == "mongo":
        # imported lazily so the in-memory backend runs without a driver connection
        from storefront_orders.adapters.outbound.mongo_store import MongoStore

        store = MongoStore(settings.mongodb_url, settings.mongodb_database)
        logger.info("store_configured", backend="mongo", database=settings.mongodb_database)
        return Adapters(
            orders=store.orders,
            line_items=store.line_items,
            catalog=store.catalog,
            users=store.users,
            events=LogEventPublisher(),
            close=store.close,
        )
    logger.info("store_configured", backend="memory")
    return build_in_memory_adapters()


def build_usecases(adapters: Adapters, settings: Settings) -> UseCases:
    materializer = LineItemMaterializer(adapters.line_items)
    pricing = PricingCalculator(adapters.line_items, adapters.catalog)

    place_order = PlaceOrderService(
        PlaceOrderDeps(
            materializer=materializer,
            pricing=pricing,
            catalog=adapters.catalog,
            orders=adapters.orders,
            events=adapters.events,
            status_policy=settings.status_policy,
        )
    )
    queries = OrderQueryService(
        OrderQueryDeps(
            orders=adapters.orders,
            line_items=adapters.line_items,
            catalog=adapters.catalog,
            users=adapters.users,
        )
    )
    lifecycle = OrderLifecycleService(
        OrderLifecycleDeps(
            orders=adapters.orders,
            materializer=materializer,
            events=adapters.events,
            status_policy=settings.status_policy,
        )
    )
    reports = SalesReportService(SalesReportDeps(orders=adapters.orders))

    return UseCases(
        place_order=place_order, queries=queries, lifecycle=lifecycle, reports=reports
    )


def build_app(
    settings: Settings | None = None, adapters: Adapters | None = None
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    adapters = adapters or build_adapters(settings)
    usecases = build_usecases(adapters, settings)

    verifier = TokenVerifier(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        revoke_non_admin=settings.auth_policy == "admin_only",
    )
    return create_app(
        place_order_uc=usecases.place_order,
        get_order_uc=usecases.queries,
        list_orders_uc=usecases.queries,
        update_status_uc=usecases.lifecycle,
        delete_order_uc=usecases.lifecycle,
        sales_report_uc=usecases.reports,
        verifier=verifier,
        api_prefix=settings.api_prefix,
        cors_origins=settings.cors_origins,
        on_shutdown=adapters.close,
    )


def create_asgi_app() -> FastAPI:
    return build_app()
