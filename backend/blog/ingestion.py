from __future__ import annotations
from datetime import datetime, timezone
import structlog
from sqlalchemy.orm import Session
from .config import settings
from .models import Post
from .repository import create_post
from .schemas import PostDraft, PostRecord

logger = structlog.get_logger(__name__)

def _stamp(draft: PostDraft) -> PostRecord:
    return PostRecord(**draft.model_dump(), publish_date=datetime.now(timezone.utc))

def ingest_post(db: Session, draft: PostDraft) -> Post:
    """Persist a single validated post. Storage errors roll back and propagate."""
    try:
        post = create_post(db, _stamp(draft))
    except Exception:
        db.rollback()
        raise
    logger.info("Post created", post_id=post.id)
    return post

def ingest_batch(db: Session, drafts: list[PostDraft], atomic: bool | None = None) -> int:
    """Persist validated drafts one by one, in submission order.

    Without ``atomic`` every post is committed on its own, so a failure part
    way through keeps the posts created before it. With ``atomic`` the whole
    batch shares one transaction and is rolled back on any failure.
    """
    if atomic is None:
        atomic = settings.BULK_ATOMIC
    created = 0
    try:
        for draft in drafts:
            create_post(db, _stamp(draft), commit=not atomic)
            created += 1
        if atomic:
            db.commit()
    except Exception:
        db.rollback()
        logger.error(
            "Batch ingestion failed",
            created=0 if atomic else created,
            total=len(drafts),
            atomic=atomic,
        )
        raise
    logger.info("Batch created", count=created, atomic=atomic)
    return created
