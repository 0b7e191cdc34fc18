from .auth import AuthService
from .rate_limiter import RateLimiter
from .result_cache import ResultCache, build_cache_key

__all__ = ["AuthService", "RateLimiter", "ResultCache", "build_cache_key"]
