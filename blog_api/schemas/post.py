"""
Post schemas for the blog content API.

Request bodies, response models and the search-index projection of a post.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_api.configs.settings import MAX_TITLE_LENGTH


class PostCreate(BaseModel):
    """Post creation model (request body - excludes server-assigned fields)."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Post title",
        examples=["My First Blog Post"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Post content",
        examples=["This is the content of my first blog post."],
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Post tags, order preserved",
        examples=[["python", "programming", "tutorial"]],
    )

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            mssg = "must not be blank"
            raise ValueError(mssg)
        return value


class PostUpdate(BaseModel):
    """
    Partial post update.

    Empty or blank ``title`` / ``content`` mean "leave unchanged". ``tags`` is
    tri-state: omitted leaves the tags alone, any explicit list (``[]``
    included) replaces them. Use ``tags_provided`` to tell the cases apart.
    """

    title: str | None = Field(
        default=None,
        max_length=MAX_TITLE_LENGTH,
        description="Updated title",
        examples=["Updated Blog Post Title"],
    )
    content: str | None = Field(
        default=None,
        description="Updated content",
        examples=["Updated content of the blog post."],
    )
    tags: list[str] | None = Field(
        default=None,
        description="Replacement tags (omit to keep the current ones)",
        examples=[["python", "programming", "updated"]],
    )

    @property
    def tags_provided(self) -> bool:
        return "tags" in self.model_fields_set and self.tags is not None

    def changes(self) -> dict[str, str | list[str]]:
        """
        Fields that should overwrite the stored post.

        Returns:
            dict: Column name to new value, skipping blank or omitted fields.
        """
        updates: dict[str, str | list[str]] = {}
        if self.title and self.title.strip():
            updates["title"] = self.title
        if self.content and self.content.strip():
            updates["content"] = self.content
        if self.tags_provided:
            updates["tags"] = list(self.tags or [])
        return updates


class PostResponse(BaseModel):
    """Post as returned to clients and stored in the cache."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Post ID", examples=[1])
    title: str = Field(description="Post title")
    content: str = Field(description="Post content")
    tags: list[str] = Field(default_factory=list, description="Post tags")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class PostWithRelated(BaseModel):
    """A post together with posts sharing at least one of its tags."""

    post: PostResponse
    related_posts: list[PostResponse] = Field(default_factory=list)


class PostSearchDocument(BaseModel):
    """Projection of a post stored in the search index."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Full-text search result, served straight from the index."""

    posts: list[PostSearchDocument] = Field(default_factory=list)
    total: int = Field(description="Total matches reported by the index", examples=[25])
    took: int = Field(description="Query time in milliseconds", examples=[5])


class TagSearchResponse(BaseModel):
    """Exact tag search result, served from the relational store."""

    posts: list[PostResponse] = Field(default_factory=list)
    count: int = Field(examples=[10])


class DeleteResponse(BaseModel):
    """Confirmation of a deleted post."""

    message: str = Field(examples=["Post deleted successfully"])
    id: int = Field(examples=[1])
