"""Run the API with uvicorn."""

import uvicorn

from ficha_tecnica.config import settings


def run() -> None:
    """Start the HTTP server on the configured host and port."""
    uvicorn.run("ficha_tecnica.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
