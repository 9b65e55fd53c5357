from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PostStatus = Literal["draft", "published"]


class PostCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=200)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    featured_image: Optional[str] = Field(default=None, alias="featuredImage")
    status: PostStatus = "draft"


class PostUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None
    excerpt: Optional[str] = Field(default=None, max_length=500)
    featured_image: Optional[str] = Field(default=None, alias="featuredImage")
    status: Optional[PostStatus] = None
