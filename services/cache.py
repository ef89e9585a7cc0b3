import logging
import redis
from models.sessions import ChartSession
from config import config

logger = logging.getLogger(__name__)

# --- Valkey/Redis Backend Implementations ---

class _MockValkeyBackend:
    """Simulates the low-level Valkey/Redis client (in-memory)."""
    def __init__(self):
        self._cache = {}

    def get(self, key: str) -> str | None:
        logger.debug("cache mock get: %s", key)
        return self._cache.get(key)

    def set(self, key: str, value: str, ex: int):
        # expiry is not simulated, entries live as long as the process
        logger.debug("cache mock set: %s, value: %s", key, value)
        self._cache[key] = value

    def delete(self, key: str):
        logger.debug("cache mock delete: %s", key)
        self._cache.pop(key, None)


class RealValkeyBackend:
    """Real implementation using redis-py client (compatible with Valkey)."""
    def __init__(self, host: str, port: int, db: int = 0, password: str | None = None):
        try:
            self.client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_timeout=2.0
            )
            self.client.ping()
        except redis.RedisError as e:
            logger.error("Failed to connect to Valkey/Redis: %s", e)
            raise

    def get(self, key: str) -> str | None:
        try:
            logger.debug("cache valkey get: %s", key)
            return self.client.get(key)
        except redis.RedisError as e:
            logger.error("Valkey GET error for key %s: %s", key, e)
            return None

    def set(self, key: str, value: str, ex: int):
        try:
            logger.debug("cache valkey set: %s, value: %s", key, value)
            self.client.set(key, value, ex=ex)
        except redis.RedisError as e:
            logger.error("Valkey SET error for key %s: %s", key, e)

    def delete(self, key: str):
        try:
            logger.debug("cache valkey delete: %s", key)
            self.client.delete(key)
        except redis.RedisError as e:
            logger.error("Valkey DELETE error for key %s: %s", key, e)


# --- Dedicated Cache Client Class ---

class CacheClient:
    """High-level client for storing chart sessions."""

    def __init__(self, backend, session_ttl: int = config.session_ttl):
        self.backend = backend
        self.session_ttl = session_ttl
        logger.debug("CacheClient backend: %s", self.backend)

    @staticmethod
    def _session_key(session_id: str) -> str:
        return f"chart:session:{session_id}"

    def get_session(self, session_id: str) -> ChartSession | None:
        json_str = self.backend.get(self._session_key(session_id))
        if json_str:
            logger.debug("cache get session %s: %s", session_id, json_str)
            return ChartSession.model_validate_json(json_str)

        return None

    def set_session(self, session: ChartSession):
        json_str = session.model_dump_json()
        self.backend.set(self._session_key(session.id), json_str, ex=self.session_ttl)
        logger.debug("Session %s cached.", session.id)

    def delete_session(self, session_id: str):
        self.backend.delete(self._session_key(session_id))


# --- Initialize Backend and Default Client ---

def _create_backend():
    if not config.valkey_host:
        logger.info("VALKEY_HOST not set. Using Mock Valkey Backend.")
        return _MockValkeyBackend()

    logger.info("valkey_host: %s, port: %d", config.valkey_host, config.valkey_port)
    try:
        return RealValkeyBackend(host=config.valkey_host, port=config.valkey_port)
    except redis.RedisError:
        logger.info("Falling back to Mock Valkey Backend due to connection failure.")
        return _MockValkeyBackend()


VALKEY_BACKEND = _create_backend()

# Initialize a default client (singleton)
_DEFAULT_CACHE_CLIENT = CacheClient(backend=VALKEY_BACKEND)

def get_cache_client():
    return _DEFAULT_CACHE_CLIENT

def get_mock_cache_client():
    return CacheClient(backend=_MockValkeyBackend())
