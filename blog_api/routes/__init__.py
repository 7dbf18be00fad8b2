from blog_api.routes.activity_logs import router as activity_logs_router
from blog_api.routes.posts import router as posts_router

__all__ = ["activity_logs_router", "posts_router"]
