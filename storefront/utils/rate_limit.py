"""
Limitation de débit des tentatives de connexion.

Store injectable, choisi au démarrage (lifespan):
- InMemoryRateLimitStore: mono-instance, fenêtres expirées évincées à l'accès + balayage périodique
- RedisRateLimitStore: compteur partagé entre instances (INCR + EXPIRE)
Les deux appliquent: N tentatives autorisées par fenêtre fixe, la (N+1)e est refusée.
"""
from typing import Any, Callable, Dict, Optional, Protocol
from dataclasses import dataclass
import logging
import threading
import time

import redis
from fastapi import Request

from storefront.errors import RateLimitError

logger = logging.getLogger(__name__)

LOGIN_MAX_ATTEMPTS = 5
LOGIN_WINDOW_SECONDS = 15 * 60


class RateLimitStore(Protocol):
    backend: str

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Enregistre une tentative; False si la limite est déjà atteinte."""
        ...


@dataclass
class RateLimitRecord:
    count: int
    reset_at: float


class InMemoryRateLimitStore:
    backend = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_every: int = 256):
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sweep_every = sweep_every
        self._calls = 0

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        now = self._clock()
        with self._lock:
            self._calls += 1
            if self._calls % self._sweep_every == 0:
                self._sweep(now)
            record = self._records.get(key)
            if record is None or now > record.reset_at:
                self._records[key] = RateLimitRecord(count=1, reset_at=now + window_seconds)
                return True
            if record.count >= limit:
                return False
            record.count += 1
            return True

    def _sweep(self, now: float) -> int:
        expired = [k for k, r in self._records.items() if now > r.reset_at]
        for k in expired:
            del self._records[k]
        return len(expired)

    def sweep(self) -> int:
        with self._lock:
            return self._sweep(self._clock())

    def __len__(self) -> int:
        return len(self._records)


class RedisRateLimitStore:
    backend = "redis"

    def __init__(self, client: Any, prefix: str = "rl:"):
        self._redis = client
        self._prefix = prefix

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        rkey = f"{self._prefix}{key}"
        # Fenêtre fixe posée à la création (SET NX EX) puis INCR, en une transaction MULTI/EXEC
        pipe = self._redis.pipeline()
        pipe.set(rkey, 0, ex=window_seconds, nx=True)
        pipe.incr(rkey)
        _, count = pipe.execute()
        return int(count) <= limit


def create_store(redis_url: Optional[str] = None) -> RateLimitStore:
    if redis_url:
        client = redis.Redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        return RedisRateLimitStore(client)
    return InMemoryRateLimitStore()


def client_ip(request: Request) -> str:
    """
    Adresse source du pair. Les en-têtes X-Forwarded-For ne sont jamais lus ici:
    ProxyHeadersMiddleware réécrit request.client seulement pour les proxys de confiance.
    """
    return request.client.host if request.client else "unknown"


def get_rate_limit_store(request: Request) -> RateLimitStore:
    store = getattr(request.app.state, "rate_limit_store", None)
    if store is None:
        store = InMemoryRateLimitStore()
        request.app.state.rate_limit_store = store
    return store


def login_rate_limit(request: Request) -> None:
    """Dépendance FastAPI: 5 tentatives / 15 min par adresse, avant toute vérification d'identifiants."""
    ip = client_ip(request)
    store = get_rate_limit_store(request)
    try:
        allowed = store.hit(f"login:{ip}", LOGIN_MAX_ATTEMPTS, LOGIN_WINDOW_SECONDS)
    except Exception:
        # Store partagé indisponible: on refuse plutôt que d'ouvrir le login sans limite
        logger.exception("rate_limit store failure backend=%s", getattr(store, "backend", None))
        raise RateLimitError()
    if not allowed:
        logger.warning("login rate limited ip=%s", ip)
        raise RateLimitError()


def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    store = getattr(request.app.state, "rate_limit_store", None)
    return {
        "ready": store is not None,
        "backend": getattr(store, "backend", None),
    }
