import pytest

from headers_mw import InvalidOriginConfiguration, resolve_allow_origin


@pytest.mark.parametrize("origin", ["", "https://a.test", "null"])
def test_wildcard_always_returns_star(origin):
    assert resolve_allow_origin("*", origin) == "*"


def test_origin_list_or_null_without_origin_returns_null():
    assert resolve_allow_origin("origin-list-or-null", "") == "null"


def test_origin_list_or_null_reflects_origin_verbatim():
    assert resolve_allow_origin("origin-list-or-null", "https://a.test") == "https://a.test"
    assert resolve_allow_origin("origin-list-or-null", "http://evil.example:8080") == "http://evil.example:8080"


@pytest.mark.parametrize("origin", ["", "https://a.test"])
def test_unknown_mode_always_fails(origin):
    with pytest.raises(InvalidOriginConfiguration) as excinfo:
        resolve_allow_origin("bogus", origin)
    assert excinfo.value.value == "bogus"
    assert str(excinfo.value) == "invalid Access-Control-Allow-Origin setting: bogus"


def test_unset_mode_fails():
    with pytest.raises(InvalidOriginConfiguration):
        resolve_allow_origin("", "https://a.test")
