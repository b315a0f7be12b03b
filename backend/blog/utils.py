import re

ID_RE = re.compile(r"[0-9]+")

def parse_post_id(raw: str) -> int | None:
    """Return the positive integer in ``raw`` or None when it is not one."""
    if not raw or not ID_RE.fullmatch(raw):
        return None
    value = int(raw)
    return value if value > 0 else None
