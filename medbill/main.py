# medbill/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from medbill.api.routes import api_router
from medbill.api.v1 import v1_router
from medbill.api.v1.envelope import error
from medbill.core.config import settings
from medbill.core.logging_config import setup_logging
from medbill.domain.errors import BillingError, LineItemIndexError

logger = logging.getLogger("main")


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError):
        status_code = 404 if isinstance(exc, LineItemIndexError) else 400
        logger.info("Billing request rejected (%s): %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content=error(str(exc)))

    app.include_router(api_router)
    app.include_router(v1_router)
    return app


app = create_app()
