# File: tests/features/polishing/test_text_cleaning.py
import pytest

from scribe.features.polishing.service.text_cleaning import strip_cjk_spaces, has_cjk_spacing


@pytest.mark.parametrize("raw, expected", [
    ("台 積 電 的 股 價", "台積電的股價"),
    ("台積電  今天\t上漲", "台積電今天上漲"),
    ("  你 好  ", "你好"),
    ("台 積 電  and  NVIDIA", "台積電 and NVIDIA"),
])
def test_gaps_between_ideographs_are_removed(raw, expected):
    assert strip_cjk_spaces(raw) == expected


@pytest.mark.parametrize("raw", [
    "我用 iPhone 15 拍的",
    "Hello  world",
    "台積電",
    "",
])
def test_text_without_artifacts_is_untouched(raw):
    assert not has_cjk_spacing(raw)
    assert strip_cjk_spaces(raw) == raw


def test_none_is_passed_through():
    assert strip_cjk_spaces(None) is None
