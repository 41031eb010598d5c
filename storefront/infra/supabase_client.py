from typing import Optional
from supabase import create_client, Client
from storefront import config

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def is_configured() -> bool:
    """Supabase est optionnel: sans URL, les repositories utilisent leur stockage local."""
    return bool(config.SUPABASE_URL and (config.SUPABASE_ANON or config.SUPABASE_SERVICE_KEY))

def get_supabase() -> Client:
    global _supabase
    if _supabase is None:
        _supabase = create_client(config.SUPABASE_URL, config.SUPABASE_ANON or config.SUPABASE_SERVICE_KEY)
    return _supabase

def get_service_supabase() -> Client:
    global _service_supabase
    if not config.SUPABASE_SERVICE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
    if _service_supabase is None:
        _service_supabase = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)
    return _service_supabase
