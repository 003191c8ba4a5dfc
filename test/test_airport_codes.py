import pytest

from utils.airport_codes import COMMON_AIRPORTS, find_airport_code, is_airport_code


@pytest.mark.parametrize("value", ["JFK", "jfk", "Nrt", "lhr", "ZZZ"])
def test_three_letter_codes_are_uppercased(value):
    assert find_airport_code(value) == value.upper()


def test_three_letter_city_alias_is_taken_as_code():
    # "nyc" matches the code pattern before the table is consulted
    assert find_airport_code("nyc") == "NYC"


@pytest.mark.parametrize("city", list(COMMON_AIRPORTS))
def test_table_cities_resolve_to_primary_airport(city):
    assert find_airport_code(city) == (city.upper() if is_airport_code(city) else COMMON_AIRPORTS[city][0])


def test_city_names_are_case_insensitive():
    assert find_airport_code("New York") == "JFK"
    assert find_airport_code("  TOKYO ") == "NRT"
    assert find_airport_code("San Francisco") == "SFO"


def test_substring_match_either_direction():
    assert find_airport_code("Tokyo, Japan") == "NRT"
    assert find_airport_code("londo") == "LHR"


def test_substring_ties_go_to_first_table_entry():
    assert find_airport_code("ta") == "ATL"


def test_unknown_city_returns_none():
    assert find_airport_code("Reykjavik") is None


@pytest.mark.parametrize("value", ["", "   ", None])
def test_empty_input_returns_none(value):
    assert find_airport_code(value) is None
