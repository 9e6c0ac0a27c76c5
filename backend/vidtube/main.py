import logging
import sys

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from vidtube.api.v1.routes import routers as v1_routers
from vidtube.core.config import configs
from vidtube.core.container import Container
from vidtube.core.exceptions import register_exception_handlers
from vidtube.utils.class_object import singleton

load_dotenv()

logging.basicConfig(
    level=configs.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)


@singleton
class AppCreator:
    def __init__(self):
        self.app = FastAPI(
            title=configs.PROJECT_NAME,
            version="0.1.0",
            openapi_url=f"{configs.API_V1_STR}/openapi.json",
        )

        # DI container, wires the endpoint modules on creation
        self.container = Container()

        if configs.BACKEND_CORS_ORIGINS:
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=[str(origin) for origin in configs.BACKEND_CORS_ORIGINS],
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )

        register_exception_handlers(self.app)

        @self.app.get("/")
        async def root():
            return {"status": "service is working"}

        self.app.include_router(
            v1_routers,
            prefix=configs.API_V1_STR,
        )


app_creator = AppCreator()
app = app_creator.app
container = app_creator.container
