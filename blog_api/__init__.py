"""Blog content API: posts and activity logs backed by PostgreSQL, Redis and Elasticsearch."""

__version__ = "1.0.0"
