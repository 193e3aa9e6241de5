"""
Social feed service
Posts with moderation, likes and threaded comments
"""

import logging
import re
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Comment, Post, PostLike, Role, User
from ..notifications.repository import NotificationType
from ..notifications.service import notify_user, push_notification
from .repository import PostStatus, SocialRepository
from .schemas import CommentCreate, PostUpdate

logger = logging.getLogger(__name__)

HASHTAG_SPLIT = re.compile(r"[\s,]+")


def parse_hashtags(raw: Optional[str]) -> list[str]:
    """'#fade, #barba corte' -> ['fade', 'barba', 'corte']"""
    if not raw:
        return []
    tags = []
    for token in HASHTAG_SPLIT.split(raw):
        tag = token.strip().lstrip("#").lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def is_auto_approved(user: User) -> bool:
    return user.role in (Role.BARBER, Role.ADMIN)


class SocialService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SocialRepository()

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def list_posts(self, viewer: Optional[User], status: Optional[str] = None, mine: bool = False) -> list[Post]:
        if mine:
            if viewer is None:
                raise HTTPException(status_code=401, detail="No autorizado")
            return self.repo.list_posts(self.db, status=status, author_id=viewer.id)
        if viewer is not None and viewer.role == Role.ADMIN:
            return self.repo.list_posts(self.db, status=status)
        return self.repo.list_posts(self.db, status=PostStatus.APPROVED)

    def get_post(self, post_id: int) -> Post:
        post = self.repo.get_post(self.db, post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Publicación no encontrada")
        return post

    def view_post(self, post_id: int, viewer: Optional[User]) -> Post:
        """Fetch a post for display and count the view"""
        post = self.get_post(post_id)
        if post.status != PostStatus.APPROVED:
            allowed = viewer is not None and (viewer.id == post.author_id or viewer.role == Role.ADMIN)
            if not allowed:
                raise HTTPException(status_code=404, detail="Publicación no encontrada")
        post.view_count = (post.view_count or 0) + 1
        self.db.commit()
        self.db.refresh(post)
        return post

    def create_post(
        self,
        author: User,
        image_key: str,
        image_url: str,
        caption: Optional[str] = None,
        hashtags: Optional[str] = None,
    ) -> Post:
        post = Post(
            author_id=author.id,
            author_type=author.role,
            barber_id=author.barber.id if author.barber else None,
            caption=(caption or "").strip() or None,
            image_url=image_url,
            cloud_storage_path=image_key,
            post_type="IMAGE",
            hashtags=parse_hashtags(hashtags),
            status=PostStatus.APPROVED if is_auto_approved(author) else PostStatus.PENDING,
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"📸 Post {post.id} created by user {author.id} ({post.status})")
        return post

    def update_post(self, post_id: int, user: User, data: PostUpdate) -> Post:
        post = self.get_post(post_id)
        if post.author_id != user.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        updates = data.model_dump(exclude_unset=True)
        if "caption" in updates:
            post.caption = (updates["caption"] or "").strip() or None
        if "hashtags" in updates:
            post.hashtags = parse_hashtags(" ".join(updates["hashtags"] or []))
        self.db.commit()
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: int, user: User) -> Post:
        post = self.get_post(post_id)
        if post.author_id != user.id and user.role != Role.ADMIN:
            raise HTTPException(status_code=403, detail="Sin permisos")
        self.db.delete(post)
        self.db.commit()
        logger.info(f"🗑️ Post {post_id} deleted by user {user.id}")
        return post

    def moderate_post(self, post_id: int, admin: User, action: str) -> Post:
        post = self.get_post(post_id)
        approved = action == "approve"
        post.status = PostStatus.APPROVED if approved else PostStatus.REJECTED

        notification = notify_user(
            self.db,
            post.author_id,
            NotificationType.POST_APPROVED if approved else NotificationType.POST_REJECTED,
            "Publicación aprobada" if approved else "Publicación rechazada",
            "Tu publicación ya es visible en el feed"
            if approved
            else "Tu publicación no cumple con las normas de la comunidad",
            link="/feed",
            actor_id=admin.id,
            post_id=post.id,
        )
        self.db.commit()
        self.db.refresh(post)
        push_notification(self.db, notification)
        logger.info(f"🛡️ Post {post.id} {post.status} by admin {admin.id}")
        return post

    def toggle_like(self, post_id: int, user: User) -> tuple[bool, int]:
        post = self.get_post(post_id)
        existing = self.repo.get_like(self.db, post.id, user.id)
        notification = None

        if existing:
            self.db.delete(existing)
            liked = False
        else:
            self.db.add(PostLike(post_id=post.id, user_id=user.id))
            liked = True
            notification = notify_user(
                self.db,
                post.author_id,
                NotificationType.POST_LIKE,
                "Nuevo me gusta",
                f"A {user.name or 'alguien'} le gustó tu publicación",
                link="/feed",
                actor_id=user.id,
                post_id=post.id,
            )

        try:
            self.db.commit()
        except IntegrityError:
            # concurrent double-tap already stored the like
            self.db.rollback()
            liked = True
            notification = None

        push_notification(self.db, notification)
        return liked, self.repo.count_likes(self.db, post.id)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def list_comments(self, post_id: Optional[int]) -> list[Comment]:
        if not post_id:
            raise HTTPException(status_code=400, detail="postId es requerido")
        return self.repo.list_comments(self.db, post_id)

    def create_comment(self, user: User, data: CommentCreate) -> Comment:
        content = (data.content or "").strip()
        if not data.postId or not content:
            raise HTTPException(status_code=400, detail="Faltan campos requeridos")

        post = self.get_post(data.postId)
        parent = None
        if data.parentId:
            parent = self.repo.get_comment(self.db, data.parentId)
            if not parent or parent.post_id != post.id:
                raise HTTPException(status_code=400, detail="Comentario padre inválido")

        comment = Comment(post_id=post.id, author_id=user.id, parent_id=parent.id if parent else None, content=content)
        self.db.add(comment)
        self.db.flush()

        actor_name = user.name or "Alguien"
        if parent:
            notification = notify_user(
                self.db,
                parent.author_id,
                NotificationType.COMMENT_REPLY,
                "Nueva respuesta",
                f"{actor_name} respondió a tu comentario",
                link="/feed",
                actor_id=user.id,
                post_id=post.id,
                comment_id=comment.id,
            )
        else:
            notification = notify_user(
                self.db,
                post.author_id,
                NotificationType.POST_COMMENT,
                "Nuevo comentario",
                f"{actor_name} comentó tu publicación",
                link="/feed",
                actor_id=user.id,
                post_id=post.id,
                comment_id=comment.id,
            )

        self.db.commit()
        self.db.refresh(comment)
        push_notification(self.db, notification)
        return comment
