from online_forms.utils.tracking import (
    TRACKING_PATTERN,
    generate_tracking_number,
    is_valid_tracking_number,
    to_base36,
)


def test_base36_encoding():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    assert to_base36(1700000000000) == "LOYW3V28"


def test_tracking_number_embeds_timestamp():
    number = generate_tracking_number(now_ms=1700000000000)
    assert number.startswith("TRK-LOYW3V28-")
    assert TRACKING_PATTERN.match(number)


def test_tracking_numbers_are_upper_case_and_well_formed():
    numbers = {generate_tracking_number() for _ in range(200)}
    for number in numbers:
        assert number == number.upper()
        assert is_valid_tracking_number(number)
    # Random suffix keeps numbers from the same millisecond apart
    assert len(numbers) > 190


def test_invalid_tracking_numbers():
    assert not is_valid_tracking_number("")
    assert not is_valid_tracking_number("TRK-abc-12345")
    assert not is_valid_tracking_number("TRK-ABC-1234")
    assert not is_valid_tracking_number("XYZ-ABC-12345")
