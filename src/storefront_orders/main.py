from __future__ import annotations

import uvicorn

from storefront_orders.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(
        "storefront_orders.bootstrap:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
