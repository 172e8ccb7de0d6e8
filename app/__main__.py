"""Serve the contact relay: python -m app"""
import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    # lifespan="on": a failed mail verification stops uvicorn before it binds
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        lifespan="on",
        log_config=None,
    )
