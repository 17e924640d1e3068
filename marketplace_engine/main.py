import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from marketplace_engine.config import LOG_LEVEL
from marketplace_engine.errors import EngineError
from marketplace_engine.routers import executions, health

logger = logging.getLogger(__name__)

def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

configure_logging()

app = FastAPI(title="GPU Marketplace Execution Engine")

@app.exception_handler(EngineError)
def engine_error_handler(request: Request, exc: EngineError):
    level = logging.ERROR if exc.is_remote else logging.INFO
    logger.log(level, f"{request.method} {request.url.path} -> {exc.code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.to_dict()})

app.include_router(executions.router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")
