from timestamp_api.normalizer import DATE_PATTERNS, CivilDate, match_date, parse_integer


def layout_name(value):
    matched = match_date(value)
    return matched[0].name if matched else None


def test_patterns_are_tried_in_declared_order():
    assert [p.name for p in DATE_PATTERNS] == [
        "YYYY-MM-DD",
        "YYYY-MM-DDTHH:MM:SS",
        "YYYY-MM-DDTHH:MM:SS.ffffff",
        "YYYY-MM-DDTHH:MM:SS.ffffffZ",
        "YYYY-MM-DDTHH:MM:SS.ffffff+HH:MM",
        "DD Month YYYY, TZ",
        "Dow Mon DD YYYY HH:MM:SS GMT+HHMM",
        "Dow Mon DD YYYY HH:MM:SS +HHMM",
        "Dow Mon DD YYYY HH:MM:SS GMT+HH:MM (TZ)",
        "Dow Mon DD YYYY HH:MM:SS +HH:MM (TZ)",
    ]


def test_earlier_pattern_wins():
    value = "2015-10-21T07:28:00"
    # the fractional layout accepts a missing fraction too
    assert DATE_PATTERNS[2].parse(value) == CivilDate(2015, 10, 21)
    assert layout_name(value) == "YYYY-MM-DDTHH:MM:SS"


def test_offset_colon_is_optional():
    value = "Wed Oct 21 2015 07:28:00 GMT+02:00"
    assert layout_name(value) == "Dow Mon DD YYYY HH:MM:SS GMT+HHMM"


def test_each_layout_has_a_matching_literal():
    samples = {
        "2015-10-21": "YYYY-MM-DD",
        "2015-10-21T07:28:00.1": "YYYY-MM-DDTHH:MM:SS.ffffff",
        "2015-10-21T07:28:00.123456789Z": "YYYY-MM-DDTHH:MM:SS.ffffffZ",
        "2015-10-21T07:28:00.123+02:00": "YYYY-MM-DDTHH:MM:SS.ffffff+HH:MM",
        "21 October 2015, UTC": "DD Month YYYY, TZ",
        "Wed Oct 21 2015 07:28:00 -0700": "Dow Mon DD YYYY HH:MM:SS +HHMM",
        "Wednesday October 21 2015 07:28:00 GMT-0700 (Pacific Daylight Time)":
            "Dow Mon DD YYYY HH:MM:SS GMT+HH:MM (TZ)",
        "wed oct 21 2015 07:28:00 +0000 (UTC)": "Dow Mon DD YYYY HH:MM:SS +HH:MM (TZ)",
    }
    for value, name in samples.items():
        assert layout_name(value) == name, value


def test_weekday_must_agree_with_date():
    assert DATE_PATTERNS[6].parse("Thu Oct 22 2015 07:28:00 GMT+0000") == CivilDate(2015, 10, 22)
    assert DATE_PATTERNS[6].parse("Wed Oct 22 2015 07:28:00 GMT+0000") is None


def test_out_of_range_time_fields_are_rejected():
    assert layout_name("2015-10-21T07:60:00") is None
    assert layout_name("Wed Oct 21 2015 07:28:00 +2400") is None
    assert layout_name("2015-10-21T23:59:60") is not None


def test_parse_integer():
    assert parse_integer("42") == 42
    assert parse_integer("-42") == -42
    assert parse_integer("+42") == 42
    assert parse_integer("-") is None
    assert parse_integer("4.2") is None
    assert parse_integer("-9223372036854775808") == -(2 ** 63)
    assert parse_integer("-9223372036854775809") is None


def test_match_date_returns_layout_and_date():
    pattern, parsed = match_date("21 October 2015, UTC")
    assert pattern is DATE_PATTERNS[5]
    assert parsed == CivilDate(2015, 10, 21)
    assert match_date("not-a-date") is None


def test_year_forms():
    assert DATE_PATTERNS[0].parse("999-01-01") == CivilDate(999, 1, 1)
    assert DATE_PATTERNS[0].parse("+10000-02-29") == CivilDate(10000, 2, 29)
    assert DATE_PATTERNS[0].parse("-0001-12-31") == CivilDate(-1, 12, 31)
    # unsigned years stop at four digits
    assert DATE_PATTERNS[0].parse("10000-01-01") is None
    assert DATE_PATTERNS[0].parse("+262143-01-01") is None
