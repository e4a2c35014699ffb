# server.py
# Run with: python server.py  (or: uvicorn keygate.main:create_app --factory --reload)
import uvicorn

from keygate.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "keygate.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
