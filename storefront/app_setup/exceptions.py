"""
Gestionnaires d'exceptions.
- StorefrontError: statut et corps {error, details?} portés par l'exception.
- RequestValidationError (pydantic): 400 {error: "Invalid input", details}.
- HTTPException: corps {error}; 401/403 pour un navigateur hors /api/* => redirection /admin.
"""
import logging
import urllib.parse
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException
from starlette.status import HTTP_303_SEE_OTHER

from storefront.errors import ConfigurationError, StorefrontError

logger = logging.getLogger(__name__)

def _validation_details(exc: RequestValidationError):
    return [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
        for err in exc.errors()
    ]

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if isinstance(exc, ConfigurationError):
            logger.error("configuration error on %s: %s", request.url.path, exc.error)
        elif exc.status_code >= 500:
            logger.error("server error on %s: %s", request.url.path, exc.error)
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid input", "details": jsonable_encoder(_validation_details(exc))},
        )

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403):
            accept = (request.headers.get("accept") or "").lower()
            is_api = request.url.path.startswith("/api/")
            if "text/html" in accept and not is_api:
                target = urllib.parse.quote(request.url.path, safe="")
                return RedirectResponse(url=f"/admin?redirect={target}", status_code=HTTP_303_SEE_OTHER)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )
