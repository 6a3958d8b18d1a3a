from datetime import date
from decimal import Decimal

import pytest

from booking import ValidationError
from booking.formatting import display_phone
from booking.validation import (
    clean_professional,
    clean_service,
    parse_date,
    parse_duration,
    parse_grid,
    parse_price,
    parse_time_label,
)


class TestParsing:
    def test_date_accepts_iso_day(self):
        assert parse_date("2024-06-01") == date(2024, 6, 1)
        assert parse_date(date(2024, 6, 1)) == date(2024, 6, 1)

    @pytest.mark.parametrize("value", ["01/06/2024", "2024-6-1", "2024-02-30", "", None, 20240601])
    def test_date_rejects_other_forms(self, value):
        with pytest.raises(ValidationError):
            parse_date(value)

    @pytest.mark.parametrize("value", ["9:00", "24:00", "10:60", "10h", None])
    def test_time_rejects_bad_labels(self, value):
        with pytest.raises(ValidationError):
            parse_time_label(value)

    def test_time_keeps_valid_label(self):
        assert parse_time_label(" 13:00 ") == "13:00"

    def test_grid_from_env_string(self):
        assert parse_grid("09:00, 10:00,13:00") == ("09:00", "10:00", "13:00")

    def test_grid_must_ascend_without_duplicates(self):
        with pytest.raises(ValidationError):
            parse_grid("10:00,09:00")
        with pytest.raises(ValidationError):
            parse_grid(["09:00", "09:00"])
        with pytest.raises(ValidationError):
            parse_grid("")

    def test_price_rounds_to_cents(self):
        assert parse_price("800") == Decimal("800.00")
        assert parse_price(19.999) == Decimal("20.00")

    @pytest.mark.parametrize("value", [-1, "abc", None, True, "NaN"])
    def test_price_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_price(value)

    @pytest.mark.parametrize("value", [0, -15, 12.5, "1.5", True, None, "x"])
    def test_duration_must_be_positive_minutes(self, value):
        with pytest.raises(ValidationError):
            parse_duration(value)

    def test_duration_accepts_numeric_string(self):
        assert parse_duration("45") == 45


class TestCatalogCleaning:
    def test_service_requires_title(self):
        with pytest.raises(ValidationError) as exc:
            clean_service({"price": 10, "duration_min": 30})
        assert exc.value.details["field"] == "title"

    def test_service_partial_only_touches_given_fields(self):
        assert clean_service({"price": "99.9"}, partial=True) == {"price": Decimal("99.90")}

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            clean_service({"title": "x", "duration_min": 30, "color": "gold"})

    def test_professional_requires_name_and_specialty(self):
        with pytest.raises(ValidationError):
            clean_professional({"name": "Dra. Ana Costa"})
        with pytest.raises(ValidationError):
            clean_professional({"specialty": "Ortodontia"})


class TestDisplayPhone:
    def test_mobile_number(self):
        assert display_phone("82998887766") == "(82) 99888-7766"

    def test_country_code_dropped(self):
        assert display_phone("+55 11 3333-4444") == "(11) 3333-4444"

    def test_unknown_shape_returned_trimmed(self):
        assert display_phone("  +1 555 0100 ") == "+1 555 0100"
