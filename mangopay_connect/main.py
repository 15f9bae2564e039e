from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import init_db
from .exceptions import InvalidArgumentError, NotFoundError
from .mangopay.client import MangopayApiError
from .routers import payments, users, wallets
from .settings import get_settings
from .utils.logs import setup_logging

app = FastAPI(title="MangopayConnect")

app.include_router(users.router, tags=["Users"])
app.include_router(wallets.router, tags=["Wallets"])
app.include_router(payments.router, tags=["Pay-ins / Pay-outs"])


@app.on_event("startup")
async def _startup():
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.APP_ENV)
    await init_db(settings.TOKEN_DB_FILE)


@app.exception_handler(InvalidArgumentError)
async def _invalid_argument(request: Request, exc: InvalidArgumentError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(MangopayApiError)
async def _mangopay_error(request: Request, exc: MangopayApiError):
    return JSONResponse(
        status_code=502,
        content={
            "detail": exc.message,
            "mangopay_status": exc.status_code,
            "errors": exc.errors,
        },
    )


@app.get("/health", tags=["Ops"])
async def health():
    return {"status": "ok"}
