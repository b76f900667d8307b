import json
import logging
import traceback
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from config_provider import __version__
from config_provider.config import ProviderSettings
from config_provider.dispatcher import Dispatcher
from config_provider.errors import FetchError, TemplateError, UnsupportedBackendError
from config_provider.models import EventContext
from config_provider.response import build_response

logger = logging.getLogger("webhook_service")

SERVICE_NAME = "Woodpecker Config Provider (Enhanced Multi-file)"


def create_app(settings: Optional[ProviderSettings] = None, dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    settings = settings or ProviderSettings.from_env()
    dispatcher = dispatcher or Dispatcher(settings)

    app = FastAPI(title=SERVICE_NAME, version=__version__)
    app.state.settings = settings

    @app.get("/")
    def status():
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": __version__,
            "config": {
                "server_type": settings.server_type,
                "namespace_tmpl": settings.namespace_template,
                "reponame_tmpl": settings.repo_name_template,
                "branch_tmpl": settings.branch_template,
                "path_tmpl": settings.path_template,
                "verify_ssl": str(settings.verify_ssl).lower(),
                "debug": str(settings.debug).lower(),
            },
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "woodpecker-config-provider", "version": __version__}

    @app.post("/ciconfig")
    async def ciconfig(request: Request):
        logger.debug("=== Config Request Start ===")
        body = await request.body()
        logger.debug(f"Request body: {body.decode('utf-8', errors='replace')}")

        try:
            event = EventContext.from_payload(json.loads(body))
        except ValueError as e:
            logger.debug(f"Failed to parse request: {e}")
            return JSONResponse(status_code=400, content={"detail": str(e)})

        logger.debug(
            f"Parsed request - Repo: {event.repo.name}, Branch: {event.pipeline.branch}, Owner: {event.repo.owner}"
        )

        try:
            files = await run_in_threadpool(dispatcher.resolve_files, event)
        except TemplateError as e:
            logger.error(f"Bad coordinate template: {e}")
            return JSONResponse(status_code=400, content={"detail": str(e)})
        except UnsupportedBackendError as e:
            logger.error(f"Misconfiguration: {e}")
            return JSONResponse(status_code=500, content={"detail": str(e)})
        except FetchError as e:
            # Repositories without an override directory use their own config
            logger.debug(f"No override available: {e}")
            return Response(status_code=204)
        except Exception as e:
            logger.error(f"Exception in ciconfig handler: {e}")
            logger.error(traceback.format_exc())
            raise

        logger.debug(f"Found {len(files)} config files")
        bundle = build_response(files)
        if bundle.is_empty():
            return Response(status_code=204)

        content = bundle.to_dict()
        logger.debug(f"Response (formatted):\n{json.dumps(content, indent=2)}")
        logger.debug("=== Config Request End ===")
        return JSONResponse(status_code=200, content=content, media_type="application/json; charset=utf-8")

    return app


def main():
    """
    Run the config provider service.
    """
    settings = ProviderSettings.from_env()
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    logger.info(f"{SERVICE_NAME} starting on {settings.host}:{settings.port}")
    settings.log_summary()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
