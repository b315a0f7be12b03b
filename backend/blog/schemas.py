from pydantic import BaseModel
from datetime import datetime

class PostDraft(BaseModel):
    """A validated article that has not been stamped or stored yet."""
    title: str
    summary: str
    content: str

class PostRecord(PostDraft):
    publish_date: datetime

class PostForm(BaseModel):
    """Echo of a form submission; absent fields come back as empty strings."""
    title: str = ""
    summary: str = ""
    content: str = ""

class FormResult(BaseModel):
    valid: bool
    post: PostForm
