from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from .db import Base

TITLE_MAX = 30
SUMMARY_MAX = 50
CONTENT_MAX = 2000

class Post(Base):
    __tablename__ = "posts"
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX), nullable=False)
    summary = Column(String(SUMMARY_MAX), nullable=False)
    content = Column(Text, nullable=False)
    publish_date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('ix_posts_publish_date', 'publish_date'),
    )

    def __repr__(self) -> str:
        return f"<Post id={self.id} title={self.title!r}>"
