"""
Emplacements clé/valeur où le panier est recopié à chaque mutation.
- MemoryStorage: dict en mémoire (tests, scripts)
- SessionStorage: session Starlette signée (cookie), donc détenue par le client
"""
from typing import Any, Dict, MutableMapping, Optional, Protocol


class CartStorage(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class SessionStorage:
    def __init__(self, session: MutableMapping[str, Any]):
        self._session = session

    def get(self, key: str) -> Optional[Any]:
        return self._session.get(key)

    def set(self, key: str, value: Any) -> None:
        self._session[key] = value
