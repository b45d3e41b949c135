import pytest

from providers.error_handling import APIError, ProvidersExhaustedError, try_in_order


def test_returns_first_success():
    calls = []

    def attempt(endpoint):
        calls.append(endpoint)
        if endpoint != "c":
            raise APIError(f"{endpoint} down", "test")
        return endpoint.upper()

    assert try_in_order(["a", "b", "c", "d"], attempt, "test") == "C"
    assert calls == ["a", "b", "c"]


def test_exhausted_collects_failures():
    def attempt(endpoint):
        raise APIError("down", "test")

    with pytest.raises(ProvidersExhaustedError) as exc_info:
        try_in_order(["a", "b"], attempt, "test")
    assert exc_info.value.failures == [("a", "down"), ("b", "down")]
    assert exc_info.value.api_name == "test"


def test_other_exceptions_propagate():
    def attempt(endpoint):
        raise KeyError(endpoint)

    with pytest.raises(KeyError):
        try_in_order(["a", "b"], attempt, "test")
