from blog_api.data.statistics import CacheStatistics

__all__ = ["CacheStatistics"]
