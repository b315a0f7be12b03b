from __future__ import annotations
from typing import Any
import structlog
from .models import TITLE_MAX, SUMMARY_MAX, CONTENT_MAX
from .schemas import PostDraft, PostForm, FormResult

logger = structlog.get_logger(__name__)

MAX_BATCH_SIZE = 100

# reason code -> client-facing message
BATCH_MESSAGES = {
    "not an array": "artigos must be an array",
    "empty batch": "artigos array cannot be empty",
    "batch too large": f"Maximum {MAX_BATCH_SIZE} articles allowed per request",
    "missing required field": "Each article must have title, description, and resumo",
    "invalid title": f"Title must be a string between 1 and {TITLE_MAX} characters",
    "invalid summary": f"Summary must be a string between 1 and {SUMMARY_MAX} characters",
    "invalid description": f"Description must be a string between 1 and {CONTENT_MAX} characters",
}


class BatchValidationError(ValueError):
    def __init__(self, reason: str, index: int | None = None):
        self.reason = reason
        self.index = index
        self.message = BATCH_MESSAGES[reason]
        super().__init__(self.message)


def _within(value, limit: int) -> bool:
    return isinstance(value, str) and 0 < len(value) <= limit


def validate_post_form(title: str | None, summary: str | None, content: str | None) -> FormResult:
    echo = PostForm(title=title or "", summary=summary or "", content=content or "")
    if not title or not summary or not content:
        return FormResult(valid=False, post=echo)
    valid = (
        _within(title, TITLE_MAX)
        and _within(summary, SUMMARY_MAX)
        and _within(content, CONTENT_MAX)
    )
    return FormResult(valid=valid, post=echo)


def _missing(value: Any) -> bool:
    """Absent values: None, empty string, false and numeric zero or NaN.

    Empty lists and objects count as present and fail the type check instead.
    """
    if value is None or value == "":
        return True
    if isinstance(value, (int, float)):
        return not value or value != value
    return False


def _check_item(item: Any) -> PostDraft:
    if not isinstance(item, dict):
        raise BatchValidationError("missing required field")
    title = item.get("title")
    content = item.get("description")
    # "summary" is accepted when the item has no "resumo"
    summary = item.get("resumo") if "resumo" in item else item.get("summary")

    if _missing(title) or _missing(content) or _missing(summary):
        raise BatchValidationError("missing required field")
    if not _within(title, TITLE_MAX):
        raise BatchValidationError("invalid title")
    if not _within(summary, SUMMARY_MAX):
        raise BatchValidationError("invalid summary")
    if not _within(content, CONTENT_MAX):
        raise BatchValidationError("invalid description")
    return PostDraft(title=title, summary=summary, content=content)


def validate_batch(items: Any) -> list[PostDraft]:
    """Validate a bulk submission as a whole.

    Raises BatchValidationError for the first violation found; on success
    returns the normalized drafts in submission order.
    """
    if not isinstance(items, list):
        raise BatchValidationError("not an array")
    if len(items) == 0:
        raise BatchValidationError("empty batch")
    if len(items) > MAX_BATCH_SIZE:
        raise BatchValidationError("batch too large")

    drafts = []
    for index, item in enumerate(items):
        try:
            drafts.append(_check_item(item))
        except BatchValidationError as e:
            e.index = index
            logger.info("Batch rejected", reason=e.reason, index=index, size=len(items))
            raise
    return drafts
