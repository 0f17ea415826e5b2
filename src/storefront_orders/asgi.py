from __future__ import annotations

from storefront_orders.bootstrap import create_asgi_app

app = create_asgi_app()
