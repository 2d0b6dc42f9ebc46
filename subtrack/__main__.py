import uvicorn

from .core.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "subtrack.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
