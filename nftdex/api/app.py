# /nftdex/api/app.py
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from nftdex.api.responses import (
    app_error_handler,
    success_response,
    unhandled_error_handler,
    validation_error_handler,
)
from nftdex.api.routes import deploy, nft, pool, trade, web3
from nftdex.core.decorators import retry_node_check
from nftdex.core.errors import AppError
from nftdex.core.logger import bind_request, get_logger
from nftdex.core.services import Services

log = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    services: Services = app.state.services
    # Refuses to start if the node is unreachable or on another chain.
    info = await retry_node_check(services.chain.check_connectivity)()
    log.info("API_STARTED", signer=services.tx_manager.address, chain_id=info["chain_id"])
    yield
    await services.close()
    log.warning("API_SHUTDOWN_COMPLETE")


def create_app(services: Services, api_prefix: str = "/api/v1", cors_origin: str = "*") -> FastAPI:
    app = FastAPI(title="NFT DEX API", version=VERSION, lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origin.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        bind_request(request_id, request.method, request.url.path)
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    for module in (deploy, nft, pool, trade, web3):
        app.include_router(module.router, prefix=api_prefix)

    @app.get("/health")
    async def health():
        return success_response({"status": "ok", "version": VERSION}, "Service is running")

    @app.get("/")
    async def index():
        return success_response(
            {
                "name": "NFT DEX API",
                "version": VERSION,
                "prefix": api_prefix,
                "endpoints": ["/deploy", "/nft", "/pool", "/trade", "/web3"],
            },
            "NFT DEX API",
        )

    app.mount("/metrics", make_asgi_app())
    return app
