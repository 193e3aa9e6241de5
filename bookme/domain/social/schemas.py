"""Social feed schemas - posts, likes and comments"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class PostUpdate(BaseModel):
    caption: Optional[str] = None
    hashtags: Optional[list[str]] = None


class PostModeration(BaseModel):
    action: Literal["approve", "reject"]


class PostAuthor(BaseModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None
    role: str


class PostResponse(BaseModel):
    id: int
    author: Optional[PostAuthor] = None
    authorType: str
    barberId: Optional[int] = None
    caption: Optional[str] = None
    imageUrl: Optional[str] = None
    postType: str
    hashtags: list[str] = []
    status: str
    viewCount: int
    likesCount: int
    commentsCount: int
    likedByMe: bool = False
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, post, viewer_id: Optional[int] = None) -> "PostResponse":
        author = post.author
        return cls(
            id=post.id,
            author=PostAuthor(id=author.id, name=author.name, image=author.image, role=author.role)
            if author
            else None,
            authorType=post.author_type,
            barberId=post.barber_id,
            caption=post.caption,
            imageUrl=post.image_url,
            postType=post.post_type or "IMAGE",
            hashtags=post.hashtags or [],
            status=post.status,
            viewCount=post.view_count or 0,
            likesCount=len(post.likes),
            commentsCount=len(post.comments),
            likedByMe=viewer_id is not None and any(like.user_id == viewer_id for like in post.likes),
            createdAt=post.created_at,
        )


class PostEnvelope(BaseModel):
    post: PostResponse


class PostListResponse(BaseModel):
    posts: list[PostResponse]


class LikeResult(BaseModel):
    liked: bool
    likesCount: int


class CommentCreate(BaseModel):
    postId: Optional[int] = None
    content: Optional[str] = None
    parentId: Optional[int] = None


class CommentResponse(BaseModel):
    id: int
    postId: int
    parentId: Optional[int] = None
    content: str
    authorId: int
    authorName: Optional[str] = None
    authorImage: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, comment) -> "CommentResponse":
        author = comment.author
        return cls(
            id=comment.id,
            postId=comment.post_id,
            parentId=comment.parent_id,
            content=comment.content,
            authorId=comment.author_id,
            authorName=author.name if author else None,
            authorImage=author.image if author else None,
            createdAt=comment.created_at,
        )


class CommentEnvelope(BaseModel):
    comment: CommentResponse


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
