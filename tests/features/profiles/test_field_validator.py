"""Tests for custom profile field validation."""

import pytest

from forum_access.core.exceptions import (
    InsufficientReputationError,
    InvalidDateError,
    InvalidLinkError,
    InvalidNumberError,
    InvalidSelectValueError,
    InvalidTextError,
    ValueTooLongError,
)
from forum_access.features.profiles.entities.custom_field import CustomFieldDefinition, FieldType
from forum_access.features.profiles.services.field_validator import (
    TYPE_CHECKS,
    validate_custom_fields,
    validate_field,
)

WEBSITE = CustomFieldDefinition(key="website", name="Website", type=FieldType.INPUT_LINK)
LOCATION = CustomFieldDefinition(key="location", name="Location", type=FieldType.INPUT_TEXT)
ANNIVERSARY = CustomFieldDefinition(key="favouriteDate", name="Anniversary", type=FieldType.INPUT_DATE)
LANGUAGES = CustomFieldDefinition(
    key="favouriteLanguages",
    name="Favourite Languages",
    type=FieldType.SELECT_MULTI,
    select_options=CustomFieldDefinition.parse_options("C++\nC\nJavascript\nPython\nAssembly"),
)
LUCKY_NUMBER = CustomFieldDefinition(
    key="luckyNumber", name="Lucky Number", type=FieldType.INPUT_NUMBER, min_rep=7
)
SOCCER_TEAM = CustomFieldDefinition(
    key="soccerTeam",
    name="Soccer Team",
    type=FieldType.SELECT,
    select_options=CustomFieldDefinition.parse_options("Barcelona\nLiverpool\nArsenal\nGalatasaray\n"),
)

ALL_FIELDS = [WEBSITE, LOCATION, ANNIVERSARY, LANGUAGES, LUCKY_NUMBER, SOCCER_TEAM]


class TestReputationGate:
    """Minimum reputation per field."""

    def test_low_reputation_rejected_with_params(self):
        with pytest.raises(InsufficientReputationError) as exc_info:
            validate_field(LUCKY_NUMBER, 13, reputation=0)
        assert exc_info.value.message == "[[error:not-enough-reputation-custom-field, 7, Lucky Number]]"
        assert exc_info.value.params == (7, "Lucky Number")

    def test_exact_reputation_passes(self):
        validate_field(LUCKY_NUMBER, 13, reputation=7)

    def test_disabled_reputation_system_skips_gate(self):
        validate_field(LUCKY_NUMBER, 13, reputation=0, reputation_disabled=True)

    def test_zero_min_rep_always_passes(self):
        validate_field(LOCATION, "Toronto", reputation=-5)

    def test_zero_min_rep_fields_accept_negative_reputation(self):
        validate_custom_fields([LOCATION, WEBSITE], {"location": "Toronto", "website": "nodebb.org"}, reputation=-100)

    def test_reputation_checked_before_type(self):
        with pytest.raises(InsufficientReputationError):
            validate_field(LUCKY_NUMBER, "not-a-number", reputation=0)


class TestLengthGate:
    """255-character limit on string values."""

    def test_255_characters_pass(self):
        validate_field(LOCATION, "a" * 255, reputation=0)

    def test_256_characters_fail(self):
        with pytest.raises(ValueTooLongError) as exc_info:
            validate_field(LOCATION, "a" * 256, reputation=0)
        assert exc_info.value.message == "[[error:custom-user-field-value-too-long, Location]]"

    def test_length_checked_before_type(self):
        with pytest.raises(ValueTooLongError):
            validate_field(WEBSITE, "x" * 300, reputation=0)

    def test_length_counted_in_utf16_units(self):
        # each emoji is a surrogate pair
        validate_field(LOCATION, "a" + "\U0001F600" * 127, reputation=0)
        with pytest.raises(ValueTooLongError):
            validate_field(LOCATION, "\U0001F600" * 128, reputation=0)

    def test_bmp_characters_count_once(self):
        validate_field(LOCATION, "\u00e9" * 255, reputation=0)

    def test_custom_limit(self):
        with pytest.raises(ValueTooLongError):
            validate_field(LOCATION, "abcdef", reputation=0, max_length=5)


class TestTypeChecks:
    """Per-type value checks."""

    @pytest.mark.parametrize("value", [13, 3.5, "42", "-7.25", "0", ".5", "1e3", " 8 "])
    def test_numbers_accepted(self, value):
        validate_field(LUCKY_NUMBER, value, reputation=10)

    @pytest.mark.parametrize("value", ["not-a-number", "", True, "inf", "nan", "1_000", "\u0661\u0662\u0663", "0x1A", "1e"])
    def test_non_numbers_rejected(self, value):
        with pytest.raises(InvalidNumberError) as exc_info:
            validate_field(LUCKY_NUMBER, value, reputation=10)
        assert exc_info.value.message == "[[error:custom-user-field-invalid-number, Lucky Number]]"

    def test_text_with_url_rejected(self):
        with pytest.raises(InvalidTextError) as exc_info:
            validate_field(LOCATION, "https://spam.com", reputation=0)
        assert exc_info.value.message == "[[error:custom-user-field-invalid-text, Location]]"

    def test_bare_domain_text_accepted(self):
        validate_field(LOCATION, "spam.com", reputation=0)

    @pytest.mark.parametrize("value", ["Toronto", "", "St. John's, NL"])
    def test_plain_text_accepted(self, value):
        validate_field(LOCATION, value, reputation=0)

    @pytest.mark.parametrize("value", ["2014-05-01", "2014/05/01", ""])
    def test_dates_accepted(self, value):
        validate_field(ANNIVERSARY, value, reputation=0)

    @pytest.mark.parametrize("value", ["not-a-date", "2014-02-30", "01-05-2014"])
    def test_invalid_dates_rejected(self, value):
        with pytest.raises(InvalidDateError) as exc_info:
            validate_field(ANNIVERSARY, value, reputation=0)
        assert exc_info.value.message == "[[error:custom-user-field-invalid-date, Anniversary]]"

    @pytest.mark.parametrize("value", ["https://nodebb.org", "nodebb.org/about", "http://127.0.0.1:4567", ""])
    def test_links_accepted(self, value):
        validate_field(WEBSITE, value, reputation=0)

    @pytest.mark.parametrize("value", ["not-a-url", "localhost", "http://"])
    def test_invalid_links_rejected(self, value):
        with pytest.raises(InvalidLinkError) as exc_info:
            validate_field(WEBSITE, value, reputation=0)
        assert exc_info.value.message == "[[error:custom-user-field-invalid-link, Website]]"

    @pytest.mark.parametrize("value", ["Galatasaray", ""])
    def test_select_accepts_option_or_empty(self, value):
        validate_field(SOCCER_TEAM, value, reputation=0)

    def test_select_rejects_unknown_option(self):
        with pytest.raises(InvalidSelectValueError) as exc_info:
            validate_field(SOCCER_TEAM, "not-in-options", reputation=0)
        assert exc_info.value.message == "[[error:custom-user-field-select-value-invalid, Soccer Team]]"

    @pytest.mark.parametrize("value", ['["Javascript", "Python"]', "[]", "", "not json"])
    def test_select_multi_accepts_subsets(self, value):
        validate_field(LANGUAGES, value, reputation=0)

    @pytest.mark.parametrize("value", ['["not-in-options"]', '["C", "Rust"]', '"C"', '{"a": 1}'])
    def test_select_multi_rejects_other_values(self, value):
        with pytest.raises(InvalidSelectValueError) as exc_info:
            validate_field(LANGUAGES, value, reputation=0)
        assert exc_info.value.params == ("Favourite Languages",)


class TestValidateCustomFields:
    """Whole-submission validation."""

    def test_unsubmitted_fields_skipped(self):
        validate_custom_fields(ALL_FIELDS, {"uid": 1}, reputation=0)

    def test_none_counts_as_not_submitted(self):
        validate_custom_fields(ALL_FIELDS, {"luckyNumber": None}, reputation=0)

    def test_valid_submission(self):
        validate_custom_fields(ALL_FIELDS, {
            "website": "https://nodebb.org",
            "location": "Toronto",
            "favouriteDate": "2014-05-01",
            "favouriteLanguages": '["Javascript", "Python"]',
            "luckyNumber": 13,
            "soccerTeam": "Galatasaray",
        }, reputation=10)

    def test_first_failing_field_in_definition_order(self):
        with pytest.raises(InvalidLinkError):
            validate_custom_fields(ALL_FIELDS, {"soccerTeam": "nope", "website": "not-a-url"}, reputation=10)


def test_every_field_type_has_a_check():
    assert set(TYPE_CHECKS) == set(FieldType)
