from blog_api.clients.memory_client import MemoryClient
from blog_api.clients.protocols import CacheClientProtocol, SearchIndexProtocol
from blog_api.clients.redis_client import RedisClient
from blog_api.clients.search_client import SearchClient

__all__ = [
    "CacheClientProtocol",
    "MemoryClient",
    "RedisClient",
    "SearchClient",
    "SearchIndexProtocol",
]
