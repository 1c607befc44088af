"""Run the gateway with uvicorn: ``python -m gateway``."""

import uvicorn

from gateway.config import GatewaySettings


def main() -> None:
    settings = GatewaySettings.from_env()
    uvicorn.run(
        "gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
