import logging

import pytest
import requests

from core.call_recorder import ObservedCall, normalize_path
from core.coverage_ledger import MatchResult
from core.exceptions import NormalizationError


@pytest.mark.parametrize("url,base_url,expected", [
    ("/v1/items", "https://api.example.com", "/v1/items"),
    ("/v1/items?page=2#top", "https://api.example.com", "/v1/items"),
    ("https://api.example.com/users/1?expand=true", None, "/users/1"),
    ("", "https://api.example.com", "/"),
    (None, "https://api.example.com/base", "/base"),
])
def test_normalize_path(url, base_url, expected):
    assert normalize_path(url, base_url) == expected


@pytest.mark.parametrize("url,base_url", [
    (None, None),
    ("", None),
    ("/relative/only", None),
])
def test_normalize_path_without_usable_url_raises(url, base_url):
    with pytest.raises(NormalizationError):
        normalize_path(url, base_url)


def test_record_matches_case_insensitive_method(model):
    result = model.recorder.record(ObservedCall("GET", "/users/42", 200, base_url="http://localhost"))

    assert result is MatchResult.RECORDED
    assert model.ledger.count("/users/{id}", "get", "200") == 1


def test_record_distinguishes_no_match_from_undeclared(model):
    no_match = model.recorder.record(ObservedCall("get", "http://localhost/orders", 200))
    undeclared_status = model.recorder.record(ObservedCall("get", "http://localhost/users/42", 500))
    undeclared_method = model.recorder.record(ObservedCall("patch", "http://localhost/users/42", 200))

    assert no_match is MatchResult.NO_PATH_MATCH
    assert undeclared_status is MatchResult.OPERATION_UNDECLARED
    assert undeclared_method is MatchResult.OPERATION_UNDECLARED
    assert all(record.count == 0 for record in model.build_records())


def test_record_surfaces_normalization_errors(model, caplog):
    with caplog.at_level(logging.ERROR, logger="core.call_recorder"):
        with pytest.raises(NormalizationError):
            model.recorder.record(ObservedCall("get", None, 200))

    assert "Unable to normalize observed call" in caplog.text


def test_record_failure_with_response(model):
    response = requests.Response()
    response.status_code = 404
    response.request = requests.Request("GET", "http://localhost/users/9").prepare()
    error = requests.HTTPError("not found", response=response)

    assert model.recorder.record_failure(error) is MatchResult.RECORDED
    assert model.ledger.count("/users/{id}", "get", "404") == 1


def test_record_failure_without_response_only_warns(model, caplog):
    before = model.ledger.to_dict()

    with caplog.at_level(logging.WARNING, logger="core.call_recorder"):
        result = model.recorder.record_failure(requests.ConnectionError("connection refused"))

    assert result is None
    assert "not an HTTP response" in caplog.text
    assert model.ledger.to_dict() == before


def test_observed_call_from_response():
    response = requests.Response()
    response.status_code = 201
    response.request = requests.Request("POST", "https://api.example.com/users?x=1").prepare()

    call = ObservedCall.from_response(response)
    assert call == ObservedCall("POST", "https://api.example.com/users?x=1", 201)


def test_normalize_path_rejects_malformed_url():
    with pytest.raises(NormalizationError, match="Malformed URL") as exc_info:
        normalize_path("http://[::1/x")

    assert exc_info.value.url == "http://[::1/x"


def test_record_surfaces_malformed_urls(model, caplog):
    with caplog.at_level(logging.ERROR, logger="core.call_recorder"):
        with pytest.raises(NormalizationError):
            model.recorder.record(ObservedCall("get", "/users/1", 200, base_url="http://[::1"))

    assert "Unable to normalize observed call" in caplog.text
    assert all(record.count == 0 for record in model.build_records())
