# test_response_normalizer.py - Wire response to abstract result

import math

import pytest
from restprovider import normalize_response, rename_identifier
from restprovider.response_normalizer import parse_total

@pytest.mark.parametrize("operation", ["list", "get-many", "get-many-reference"])
def test_list_like_responses(operation):
    response = {"headers": {"x-total-count": "1"}, "data": [{"_id": "1", "name": "a"}]}
    result = normalize_response(response, operation, "posts", {})

    assert result == {"data": [{"id": "1", "name": "a"}], "total": 1}
    assert "_id" not in result["data"][0]

def test_list_does_not_mutate_wire_records():
    record = {"_id": "1", "name": "a"}
    normalize_response({"headers": {"x-total-count": "1"}, "data": [record]}, "list", "posts", {})
    assert record == {"_id": "1", "name": "a"}

def test_total_header_lookup_is_case_insensitive():
    response = {"headers": {"X-Total-Count": "42"}, "data": []}
    assert normalize_response(response, "list", "posts", {})["total"] == 42

def test_malformed_total_is_nan():
    response = {"headers": {"x-total-count": "lots"}, "data": []}
    total = normalize_response(response, "list", "posts", {})["total"]
    assert math.isnan(total)

def test_missing_total_is_nan():
    assert math.isnan(parse_total({}))

def test_total_uses_leading_integer():
    assert parse_total({"x-total-count": " 12abc"}) == 12
    assert parse_total({"x-total-count": 7}) == 7

@pytest.mark.parametrize("operation", ["delete", "delete-many"])
def test_delete_echoes_params(operation):
    params = {"id": "9", "previousData": {"name": "gone"}}
    result = normalize_response({"headers": {}, "data": {"ok": 1}}, operation, "posts", params)
    assert result == {"data": params}
    assert result["data"] is params

@pytest.mark.parametrize("operation", ["get-one", "create", "update"])
def test_single_record_renamed(operation):
    response = {"headers": {}, "data": {"_id": "5", "title": "x"}}
    assert normalize_response(response, operation, "posts", {}) == {"data": {"id": "5", "title": "x"}}

def test_single_record_without_wire_id_passes_through():
    response = {"headers": {}, "data": {"id": "5", "title": "x"}}
    assert normalize_response(response, "get-one", "posts", {}) == {"data": {"id": "5", "title": "x"}}

def test_rename_identifier_edge_cases():
    assert rename_identifier(None) is None
    assert rename_identifier("text") == "text"
    assert rename_identifier({"_id": 1, "id": 2}) == {"id": 1}
