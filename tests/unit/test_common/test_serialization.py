"""
Test Value Serialization
"""

import pytest

from atproto_storage.common.serialization import decode_value, encode_value, try_decode


def test_strings_are_stored_verbatim():
    assert encode_value("did:plc:abc") == "did:plc:abc"
    assert encode_value('{"already": "json"}') == '{"already": "json"}'


def test_structured_values_are_json_encoded():
    assert encode_value({"did": "did:plc:abc"}) == '{"did": "did:plc:abc"}'
    assert encode_value([1, 2]) == "[1, 2]"
    assert encode_value(None) == "null"
    assert encode_value(7) == "7"


def test_unserializable_value_raises():
    with pytest.raises(TypeError):
        encode_value({"when": object()})


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('{"did": "did:plc:abc"}', {"did": "did:plc:abc"}),
        ("[1, 2]", [1, 2]),
        ("null", None),
        ("did:plc:abc", "did:plc:abc"),
        ("{broken", "{broken"),
        ("", ""),
    ],
)
def test_decode_falls_back_to_raw_text(raw, expected):
    assert decode_value(raw) == expected


def test_decode_non_text_is_returned_unchanged():
    assert decode_value(None) is None


def test_try_decode_reports_branch():
    assert try_decode('{"a": 1}') == ({"a": 1}, True)
    assert try_decode("not json") == ("not json", False)
