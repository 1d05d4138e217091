"""Cache des requêtes GET au backend, indexé par clé de requête."""
import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from redis.exceptions import RedisError

from app.cache import CacheManager
from app.logger import logger


class QueryCache:
    """
    Une seule requête en vol par clé, réponses réglées gardées dans Redis.

    Les appels concurrents sur la même clé attendent la même tâche. Seules
    les réponses réussies sont mises en cache.
    """

    def __init__(self, cache: CacheManager, ttl: int = 300):
        self.cache = cache
        self.ttl = ttl
        self._inflight: Dict[str, asyncio.Task] = {}

    @staticmethod
    def make_key(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Clé stable : chemin + paramètres triés."""
        if not params:
            return f"query:{path}"
        items = sorted((k, str(v)) for k, v in params.items() if v is not None)
        return f"query:{path}?{urlencode(items)}"

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader))
            self._inflight[key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(key, None))
        else:
            logger.debug("Joining in-flight request for key: {key}", key=key)
        # shield : l'abandon d'un appelant n'annule pas la requête partagée
        return await asyncio.shield(task)

    async def _load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        cached = await self._read(key)
        if cached is not None:
            logger.info("Cache HIT for key: {key}", key=key)
            return cached

        logger.info("Cache MISS for key: {key}", key=key)
        result = await loader()
        await self._write(key, result)
        return result

    async def _read(self, key: str) -> Any:
        try:
            raw = await self.cache.get(key)
        except RedisError as e:
            logger.warning("Redis unavailable, bypassing query cache: {error}", error=e)
            return None
        return json.loads(raw) if raw else None

    async def _write(self, key: str, value: Any) -> None:
        try:
            await self.cache.set(key, json.dumps(value), expire=self.ttl)
        except RedisError as e:
            logger.warning("Could not store {key} in query cache: {error}", key=key, error=e)
