"""HTTP connector for the REST backend."""
from typing import Any, Dict, Mapping, Optional

import httpx

from app.backend.query_cache import QueryCache
from app.errors import BackendError
from app.logger import logger


class BackendConnector:
    """Gère un client httpx asynchrone vers le backend REST."""

    def __init__(
            self,
            base_url: str,
            timeout: float = 10.0,
            query_cache: Optional[QueryCache] = None
        ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.query_cache = query_cache
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self):
        """Initialise le client HTTP (pool de connexions partagé)."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        logger.info("Backend client initialised for {url}", url=self.base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def request(
            self,
            method: str,
            path: str,
            *,
            params: Optional[Mapping[str, Any]] = None,
            json: Optional[Any] = None,
            headers: Optional[Dict[str, str]] = None
        ) -> Any:
        """Exécute une requête et renvoie le JSON décodé.

        Raises:
            BackendError: erreur réseau, statut >= 400 ou JSON invalide.
        """
        try:
            response = await self.client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("{method} {path} failed: {error}", method=method, path=path, error=e)
            raise BackendError(f"Failed to reach backend: {e}", path=path) from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(
                "{method} {path} -> {status}: {message}",
                method=method, path=path, status=response.status_code, message=message
            )
            raise BackendError(message, status_code=response.status_code, path=path)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                "Invalid JSON in backend response", status_code=response.status_code, path=path
            ) from e

    async def get(
            self,
            path: str,
            params: Optional[Mapping[str, Any]] = None,
            headers: Optional[Dict[str, str]] = None,
            cached: bool = True
        ) -> Any:
        """GET, passé par le cache de requêtes sauf pour les données par utilisateur."""
        if not cached or self.query_cache is None:
            return await self.request("GET", path, params=params, headers=headers)

        key = QueryCache.make_key(path, params)
        return await self.query_cache.fetch(
            key, lambda: self.request("GET", path, params=params, headers=headers)
        )

    async def post(self, path: str, json: Optional[Any] = None,
                   headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.request("POST", path, json=json, headers=headers)

    async def patch(self, path: str, json: Optional[Any] = None,
                    headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.request("PATCH", path, json=json, headers=headers)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"Backend returned {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
        return str(body)

    async def close(self):
        """Ferme le client proprement."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
