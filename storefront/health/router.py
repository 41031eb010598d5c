from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from storefront.infra.supabase_client import is_configured as supabase_configured
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/ready")
def health_ready(request: Request):
    gateway = getattr(request.app.state, "payment_gateway", None)
    rate_limit = rate_limit_health_info(request)
    ready = gateway is not None and rate_limit["ready"]
    return JSONResponse(
        {
            "ok": ready,
            "payments": {"mode": getattr(gateway, "mode", None)},
            "rateLimit": rate_limit,
            "supabase": {"configured": supabase_configured()},
        },
        status_code=200 if ready else 503,
    )
