import pytest

from decay_search.query import (
    Energy,
    Modifier,
    QueryParseError,
    energy_bounds,
    parse_line,
    parse_modifier,
    parse_query,
    unit_factor,
)


@pytest.mark.parametrize("value", ["0", "1", "6.96", "661.657", ".5"])
def test_zero_uncertainty_collapses_to_point(value):
    e = parse_line(f"{value} keV")
    assert e.lower_keV == float(value)
    assert e.upper_keV == float(value)


@pytest.mark.parametrize(
    "line, value, factor, u",
    [
        ("662 keV 2%", 662.0, 1.0, 2.0),
        ("1.5 MeV 10%", 1.5, 1000.0, 10.0),
        ("5000 eV 0.5%", 5000.0, 0.001, 0.5),
        ("maybe 59.54keV 1%", 59.54, 1.0, 1.0),
    ],
)
def test_uncertainty_bounds(line, value, factor, u):
    e = parse_line(line)
    assert e.lower_keV == pytest.approx(value * factor * (1 - u / 100))
    assert e.upper_keV == pytest.approx(value * factor * (1 + u / 100))
    assert e.lower_keV <= e.upper_keV


def test_unit_conversion_agrees():
    a = parse_line("1 MeV")
    b = parse_line("1000 keV")
    c = parse_line("1000000 eV")
    assert a.lower_keV == pytest.approx(b.lower_keV) == pytest.approx(c.lower_keV)
    assert a.upper_keV == pytest.approx(b.upper_keV) == pytest.approx(c.upper_keV)


def test_unknown_unit_falls_back_to_kev():
    assert unit_factor("furlongs") == 1.0
    e = parse_line("5 furlongs 10%")
    assert e.lower_keV == pytest.approx(4.5)
    assert e.upper_keV == pytest.approx(5.5)


def test_units_are_case_sensitive():
    # "mev" is not "MeV": it takes the permissive x1 branch
    assert unit_factor("mev") == 1.0
    assert energy_bounds(2.0, "mev") == (2.0, 2.0)


@pytest.mark.parametrize(
    "word, expected",
    [
        ("", Modifier.DEFINITE),
        ("definitely", Modifier.DEFINITE),
        ("Definitely", Modifier.DEFINITE),
        ("maybe", Modifier.MAYBE),
        ("MAYBE", Modifier.MAYBE),
        ("perhaps", Modifier.DEFINITE),
    ],
)
def test_modifier_words(word, expected):
    assert parse_modifier(word) == expected
    assert parse_line(f"{word} 10 keV".strip()).modifier == expected


def test_text_after_recognised_prefix_is_ignored():
    # no blank before the uncertainty, and a bare number without "%"
    assert parse_line("662 keV5%") == Energy(662.0, 662.0, Modifier.DEFINITE)
    assert parse_line("662 keV 5") == Energy(662.0, 662.0, Modifier.DEFINITE)


@pytest.mark.parametrize("line", ["banana", "662", "keV 662", "% 5 keV", "-5 keV"])
def test_malformed_line_raises(line):
    with pytest.raises(QueryParseError) as exc:
        parse_line(line)
    assert exc.value.line == line
    assert line in str(exc.value)


def test_query_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_line("banana")


def test_comments_and_blank_lines_give_empty_query():
    assert parse_query("# just a comment\n\n") == []
    assert parse_query("") == []
    assert parse_query("   \n\t\n# a\n   # b") == []


def test_query_keeps_line_order():
    energies = parse_query("\n215 keV  # second peak\n\n7 keV\n# done\n1 MeV 1%\n")
    assert [e.lower_keV for e in energies] == pytest.approx([215.0, 7.0, 990.0])


def test_first_bad_line_fails_whole_query():
    with pytest.raises(QueryParseError) as exc:
        parse_query("662 keV 1%\n1173 keV\nbanana\n1332 keV")
    assert exc.value.line == "banana"


def test_comment_is_stripped_before_parsing():
    # would be a parse error without the comment cut
    (e,) = parse_query("maybe 662 keV 1% # cs-137, banana")
    assert e.modifier == Modifier.MAYBE
    assert e.lower_keV == pytest.approx(655.38)


def test_energy_str_mentions_bounds_and_modifier():
    s = str(Energy(1.0, 2.0, Modifier.MAYBE))
    assert "lower bound=1.0" in s
    assert "upper bound=2.0" in s
    assert "maybe" in s


def test_lower_bound_never_negative():
    e = parse_line("5 keV 150%")
    assert e.lower_keV == 0.0
    assert e.upper_keV == pytest.approx(12.5)


@pytest.mark.parametrize("line", ["9" * 400 + " keV", "0 keV " + "9" * 400 + "%", "1 keV " + "9" * 400 + "%"])
def test_overflowing_numbers_raise(line):
    with pytest.raises(QueryParseError):
        parse_line(line)


def test_overflowing_line_fails_whole_query():
    with pytest.raises(QueryParseError):
        parse_query("662 keV\n" + "9" * 400 + " MeV")
