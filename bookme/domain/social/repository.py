"""Social repository - posts, likes and comments"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Comment, Post, PostLike


class PostStatus:
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class SocialRepository:
    """Repository for social feed database operations"""

    @staticmethod
    def get_post(db: Session, post_id: int) -> Optional[Post]:
        return db.query(Post).filter(Post.id == post_id).first()

    @staticmethod
    def list_posts(
        db: Session,
        status: Optional[str] = None,
        author_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[Post]:
        query = db.query(Post)
        if status:
            query = query.filter(Post.status == status)
        if author_id is not None:
            query = query.filter(Post.author_id == author_id)
        return query.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit).all()

    @staticmethod
    def get_like(db: Session, post_id: int, user_id: int) -> Optional[PostLike]:
        return db.query(PostLike).filter(PostLike.post_id == post_id, PostLike.user_id == user_id).first()

    @staticmethod
    def count_likes(db: Session, post_id: int) -> int:
        return db.query(PostLike).filter(PostLike.post_id == post_id).count()

    @staticmethod
    def get_comment(db: Session, comment_id: int) -> Optional[Comment]:
        return db.query(Comment).filter(Comment.id == comment_id).first()

    @staticmethod
    def list_comments(db: Session, post_id: int) -> list[Comment]:
        return (
            db.query(Comment)
            .filter(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )
