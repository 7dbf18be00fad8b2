from blog_api.managers.cache_manager import CacheManager
from blog_api.managers.task_queue import BackgroundTaskQueue, InlineTaskQueue, TaskQueueProtocol

__all__ = ["BackgroundTaskQueue", "CacheManager", "InlineTaskQueue", "TaskQueueProtocol"]
