# /main.py
# Entry point: validate configuration, wire the services, serve the API.
import uvicorn

from nftdex.api.app import create_app
from nftdex.core.config import settings
from nftdex.core.config_validator import validate as validate_config
from nftdex.core.logger import configure_from_settings, get_logger
from nftdex.core.services import build_services


def main():
    configure_from_settings(settings)
    log = get_logger("NFTDEX.System")
    validate_config(settings)
    log.info("NFTDEX_API_STARTING", host=settings.HOST, port=settings.PORT, rpc_url=settings.RPC_URL)

    app = create_app(build_services(settings), api_prefix=settings.API_PREFIX, cors_origin=settings.CORS_ORIGIN)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
