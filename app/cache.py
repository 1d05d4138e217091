"""Cache management module."""
import json
import time
from typing import List, Optional

import redis.asyncio as redis
from app.config import settings
from app.models import RecentSearch

LAST_LOCATION_KEY = "laundrylocator:last_location"
RECENT_SEARCHES_KEY = "laundrylocator:recent_searches"
FAVORITES_KEY = "laundrylocator:favorites"


class CacheManager:
    """A class to manage the Redis cache."""
    def __init__(self):
        """Initialize the CacheManager."""
        self.redis_url = settings.REDIS_URL
        self.redis = redis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)

    async def get(self, key: str):
        """Get a value from the cache."""
        return await self.redis.get(key)

    async def set(self, key: str, value: str, expire: Optional[int] = 300):
        """Set a value in the cache. `expire=None` keeps it forever."""
        await self.redis.set(key, value, ex=expire)

    async def close(self):
        """Close the Redis connection."""
        await self.redis.close()


class LocationCache:
    """Dernière localisation affichée et recherches récentes.

    Un seul emplacement par clé pour tout le processus, écrasé sans verrou :
    les écritures sont sérialisées par la boucle d'événements.
    """

    def __init__(self, cache: CacheManager, default_name: str = settings.DEFAULT_LOCATION_NAME):
        self.cache = cache
        self.default_name = default_name

    async def save(self, name: str) -> None:
        """Persiste le dernier nom de lieu résolu (pas d'expiration)."""
        await self.cache.set(LAST_LOCATION_KEY, name, expire=None)

    async def load(self) -> str:
        """Renvoie le dernier nom sauvegardé, ou le nom par défaut."""
        name = await self.cache.get(LAST_LOCATION_KEY)
        return name or self.default_name

    async def recent_searches(self) -> List[RecentSearch]:
        raw = await self.cache.get(RECENT_SEARCHES_KEY)
        if not raw:
            return []
        return [RecentSearch(**item) for item in json.loads(raw)]

    async def save_recent_search(
            self,
            query: str,
            lat: Optional[float] = None,
            lng: Optional[float] = None
        ) -> List[RecentSearch]:
        """Ajoute une recherche en tête, sans doublon, en gardant les plus récentes."""
        entry = RecentSearch(query=query, lat=lat, lng=lng, timestamp=int(time.time() * 1000))
        searches = [s for s in await self.recent_searches() if s.query != query]
        searches.insert(0, entry)
        searches = searches[:settings.RECENT_SEARCHES_LIMIT]
        await self.cache.set(
            RECENT_SEARCHES_KEY,
            json.dumps([s.model_dump() for s in searches]),
            expire=None
        )
        return searches

    async def favorites(self) -> List[int]:
        """Ids des laveries favorites, dans l'ordre d'ajout."""
        raw = await self.cache.get(FAVORITES_KEY)
        return json.loads(raw) if raw else []

    async def is_favorite(self, laundry_id: int) -> bool:
        return laundry_id in await self.favorites()

    async def save_favorite(self, laundry_id: int) -> None:
        favorites = await self.favorites()
        if laundry_id not in favorites:
            favorites.append(laundry_id)
            await self.cache.set(FAVORITES_KEY, json.dumps(favorites), expire=None)

    async def remove_favorite(self, laundry_id: int) -> None:
        favorites = [f for f in await self.favorites() if f != laundry_id]
        await self.cache.set(FAVORITES_KEY, json.dumps(favorites), expire=None)

    async def toggle_favorite(self, laundry_id: int) -> bool:
        """Ajoute ou retire le favori ; renvoie le nouvel état."""
        if await self.is_favorite(laundry_id):
            await self.remove_favorite(laundry_id)
            return False
        await self.save_favorite(laundry_id)
        return True


cache_manager = CacheManager()
location_cache = LocationCache(cache_manager)
