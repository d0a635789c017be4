import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mindmap.api.routes import include_mindmap
from mindmap.config import LOG_LEVEL, load_options
from mindmap.example.controllers import ROUTERS
from mindmap.example.entities import Base

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="API Mindmap Demo",
        version="0.1.0",
    )

    # Middleware FIRST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in ROUTERS:
        app.include_router(router)

    return include_mindmap(app, load_options(), schema_source=Base)


app = create_app()
