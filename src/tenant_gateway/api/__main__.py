"""
tenant_gateway.api.__main__

`python -m tenant_gateway.api`: serve the gateway on `TGW_API_HOST:TGW_API_PORT`.
"""

from __future__ import annotations

import uvicorn

from tenant_gateway.api.app import create_app
from tenant_gateway.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        # Logging is configured by create_app; keep uvicorn from installing its own.
        log_config=None,
    )


if __name__ == "__main__":
    main()
