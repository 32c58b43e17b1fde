import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from multisig.api_v1 import transactions as transactions_v1
from multisig.core.config import settings
from multisig.core.errors import ErrorKind, TransactionError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_TITLE)

@app.exception_handler(TransactionError)
async def transaction_error_handler(request: Request, exc: TransactionError):
    """
    Every core failure becomes a 400 carrying the human-readable message and
    the error kind for programmatic callers.
    """
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc), "kind": exc.kind.value})

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported like any other encoding error."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.warning("%s %s rejected malformed body: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=400,
        content={"detail": f"Malformed request: {problems}", "kind": ErrorKind.ENCODING_ERROR.value},
    )

# Include API routers
app.include_router(transactions_v1.router, prefix=settings.API_PREFIX)

@app.get("/")
def root():
    return {"message": "Welcome to the multisig note signing service"}
