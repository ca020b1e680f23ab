from __future__ import annotations

import uvicorn

from server.api.deps import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "server.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
