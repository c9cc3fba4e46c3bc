from __future__ import annotations

import pytest

from shared.tools.service_tag import is_dell_service_tag, is_express_service_code


@pytest.mark.parametrize(
    "serial",
    [
        "ABC1234",  # standard 7-character
        "abc1234",  # normalized to upper case
        "  ABC1234 ",
        "1234567890",  # express service code
        "12345678901",
        "AB123",  # 5-character
        "A1B2C3",  # 6-character
        "12AB345",  # mixed
        "GH12345",
    ],
)
def test_accepts_dell_formats(serial: str) -> None:
    assert is_dell_service_tag(serial) is True


@pytest.mark.parametrize(
    "serial",
    [
        "",
        "   ",
        "ABCDEFG",  # purely alphabetic
        "1234567",  # purely numeric, not express length
        "123456789",
        "123456789012",
        "AB1O234",  # contains O
        "AB1I234",  # contains I
        "QB12345",  # contains Q
        "ABC-123",
        "ABCD12345",
        "C02XK0ABJG5H",  # Apple-style serial
    ],
)
def test_rejects_non_dell_formats(serial: str) -> None:
    assert is_dell_service_tag(serial) is False


@pytest.mark.parametrize("value", [None, 1234567, 1234567890, ["ABC1234"], b"ABC1234"])
def test_non_string_input_is_not_a_service_tag(value) -> None:
    assert is_dell_service_tag(value) is False


def test_express_code_bypasses_exclusion_filter() -> None:
    # purely digits would be excluded, but 10-11 digits is an express code
    assert is_express_service_code("0123456789")
    assert is_dell_service_tag("0123456789") is True
    assert is_express_service_code("ABC1234") is False


def test_classification_is_deterministic() -> None:
    samples = ["ABC1234", "AB1O234", "1234567890", "", "xyz"]
    first = [is_dell_service_tag(sample) for sample in samples]
    second = [is_dell_service_tag(sample) for sample in samples]
    assert first == second
