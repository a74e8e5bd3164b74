"""
Run the API with uvicorn: python -m fridgelog
"""
import uvicorn

from .config import settings

if __name__ == "__main__":
    uvicorn.run(
        "fridgelog.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
