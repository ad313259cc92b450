import logging
import time

from fastapi import FastAPI, Request

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

request_logger = logging.getLogger("planpro.requests")


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the ``planpro`` logger tree."""
    root = logging.getLogger("planpro")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    root.propagate = False


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        t0 = time.time()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt = int((time.time() - t0) * 1000)
            request_logger.info(
                "%s %s -> %d (%dms)", request.method, request.url.path, status, dt,
            )
