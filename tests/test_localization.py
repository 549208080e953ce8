import pytest

from souq.domain.localization import ORDER_STATUS_LABELS, label, localize, resolve_language


@pytest.mark.parametrize(
    "header, expected",
    [(None, "en"), ("", "en"), ("ar", "ar"), ("ar-EG,ar;q=0.9", "ar"), ("en-US", "en"), ("fr", "en")],
)
def test_resolve_language(header, expected):
    assert resolve_language(header) == expected


def test_localize_pair():
    value = {"en": "Phone", "ar": "هاتف"}
    assert localize(value, "ar") == "هاتف"
    assert localize(value, "en") == "Phone"


def test_localize_falls_back_to_other_language():
    assert localize({"ar": "هاتف"}, "en") == "هاتف"
    assert localize({"en": "Phone", "ar": ""}, "ar") == "Phone"


def test_localize_plain_and_absent():
    assert localize("Phone", "ar") == "Phone"
    assert localize(None, "en", fallback="N/A") == "N/A"
    assert localize({}, "en", fallback="N/A") == "N/A"


def test_localize_list():
    assert localize([{"en": "a"}, "b", None], "en") == "a, b"


def test_label_unknown_key_uses_raw_value():
    assert label(ORDER_STATUS_LABELS, "pending", "ar") == "قيد الانتظار"
    assert label(ORDER_STATUS_LABELS, "on_hold", "en") == "on_hold"
