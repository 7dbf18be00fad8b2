"""Cache key builders shared by readers and writers of cached posts."""

POST_NAMESPACE = "post"


def post_key(post_id: int) -> str:
    """
    Key of a cached post snapshot, relative to the cache manager's prefix.

    The full stored key is ``{prefix}:post:{post_id}``.
    """
    return str(post_id)
