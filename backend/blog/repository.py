from sqlalchemy import select
from sqlalchemy.orm import Session
from .models import Post
from .schemas import PostRecord

# Integer maps to int4 on PostgreSQL, the narrowest supported backend
MAX_POST_ID = 2**31 - 1

def _to_row(record: PostRecord) -> Post:
    return Post(
        title=record.title,
        summary=record.summary,
        content=record.content,
        publish_date=record.publish_date,
    )

def create_post(db: Session, record: PostRecord, commit: bool = True) -> Post:
    """Insert one post and return it with its storage-assigned id."""
    post = _to_row(record)
    db.add(post)
    if commit:
        db.commit()
        db.refresh(post)
    else:
        db.flush()
    return post

def get_post(db: Session, post_id: int) -> Post | None:
    if post_id > MAX_POST_ID:
        return None
    return db.get(Post, post_id)

def list_posts(db: Session) -> list[Post]:
    return list(db.scalars(select(Post)).all())
