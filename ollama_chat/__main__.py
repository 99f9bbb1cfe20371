"""Run the local API server: ``python -m ollama_chat``."""

import uvicorn

from ollama_chat.core.config import settings


def main() -> None:
    uvicorn.run(
        "ollama_chat.main:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level="debug" if settings.app.debug else "info",
    )


if __name__ == "__main__":
    main()
