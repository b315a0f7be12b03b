import pytest
from blog.utils import parse_post_id

@pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), ("007", 7), ("99999999", 99999999)])
def test_parse_post_id_accepts_positive_integers(raw, expected):
    assert parse_post_id(raw) == expected

@pytest.mark.parametrize("raw", ["", "abc", "0", "-1", "1.5", "12abc", " 3"])
def test_parse_post_id_rejects_everything_else(raw):
    assert parse_post_id(raw) is None
