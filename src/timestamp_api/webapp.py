import logging
from typing import Optional

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from .normalizer import InvalidDate, current_time, normalize
from .server import Settings

logger = logging.getLogger(__name__)

INVALID_DATE_BODY = {"error": "Invalid Date"}


async def root(request: Request) -> PlainTextResponse:
    return PlainTextResponse("Hello, World!")


async def now(request: Request) -> JSONResponse:
    return JSONResponse(current_time().model_dump())


async def parse_date(request: Request) -> JSONResponse:
    # path params arrive URL-decoded; an encoded "/" stays part of the value
    value = request.path_params["date"]
    try:
        res = normalize(value)
    except InvalidDate:
        logger.info("rejected date input %r", value)
        return JSONResponse(INVALID_DATE_BODY, status_code=400)
    logger.debug("normalized %r -> %s", value, res.unix)
    return JSONResponse(res.model_dump())


routes = [
    Route("/", root, methods=["GET"]),
    Route("/api", now, methods=["GET"]),
    Route("/api/{date:path}", parse_date, methods=["GET"]),
]


def create_app(settings: Optional[Settings] = None) -> Starlette:
    """App factory; serve directly with `uvicorn --factory timestamp_api.webapp:create_app`."""
    settings = settings or Settings()
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["GET"],
        )
    ]
    return Starlette(routes=routes, middleware=middleware)
