from __future__ import annotations

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.error_handlers import register_error_handlers
from .api.v1.routers import convert, health
from .app_logging import configure_logging
from .config import get_settings

load_dotenv()
configure_logging(structured=get_settings().log_structured)

app = FastAPI(title="PDF Conversion Service", version="0.1.0")

app.add_middleware(
  CORSMiddleware,
  allow_origins=["*"],
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(convert.router)
app.include_router(health.router)


def run() -> None:
  settings = get_settings()
  uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
  run()
