from cinesift_app.routes.validators import QUERY_REQUIRED, validate_search_payload


def test_valid_payload():
    assert validate_search_payload({"query": " 铃芽之旅 ", "type": "movie"}) == ("铃芽之旅", "movie", None)


def test_non_string_type_is_ignored():
    assert validate_search_payload({"query": "铃芽之旅", "type": 3}) == ("铃芽之旅", None, None)


def test_long_query_is_passed_through_whole():
    query = "铃芽之旅" * 100
    assert validate_search_payload({"query": query}) == (query, None, None)


def test_invalid_payloads():
    for payload in (None, [], "铃芽之旅", {}, {"query": ""}, {"query": None}, {"query": ["a"]}):
        assert validate_search_payload(payload) == (None, None, QUERY_REQUIRED)
