"""Tests for document validation schemas."""

import json

import pytest
from pydantic import ValidationError
from pydantic_core import PydanticCustomError

from docvault.modules.common.constants import ClassificationLevel
from docvault.modules.common.validation import format_validation_errors, like_pattern
from docvault.modules.document.schemas import (
    ClassificationBreakdown,
    DocumentCreate,
    DocumentListQuery,
    DocumentStats,
    DocumentUpdate,
    clean_search_term,
)


def test_create_escapes_and_trims_title():
    document = DocumentCreate(title="  <b>Bold</b> & co  ", content="Body")

    assert document.title == "&lt;b&gt;Bold&lt;/b&gt; &amp; co"


def test_create_rejects_title_that_overflows_once_escaped():
    with pytest.raises(ValidationError) as exc_info:
        DocumentCreate(title="<" * 100, content="Body")

    assert exc_info.value.errors()[0]["loc"] == ("title",)


def test_create_accepts_max_length_title():
    document = DocumentCreate(title="x" * 255, content="Body")

    assert len(document.title) == 255


def test_create_rejects_oversized_content():
    with pytest.raises(ValidationError):
        DocumentCreate(title="Title", content="x" * 1_000_001)


@pytest.mark.parametrize("classification", [0, 5, 99, -1])
def test_create_rejects_unknown_classification(classification):
    with pytest.raises(ValidationError) as exc_info:
        DocumentCreate(title="Title", content="Body", classification=classification)

    assert exc_info.value.errors()[0]["loc"] == ("classification",)


@pytest.mark.parametrize("model", [DocumentCreate, DocumentUpdate])
def test_classification_rejects_booleans(model):
    payload = {"title": "Title", "content": "Body", "classification": True}

    with pytest.raises(ValidationError) as exc_info:
        model.model_validate_json(json.dumps(payload))

    error = exc_info.value.errors()[0]
    assert error["loc"] == ("classification",)
    assert error["type"] == "int_type"


def test_classification_accepts_integer_forms():
    assert DocumentCreate(title="T", content="C", classification=4).classification is ClassificationLevel.SECRET
    assert DocumentUpdate.model_validate_json('{"classification": "1"}').classification is ClassificationLevel.PUBLIC


def test_create_collects_every_error():
    with pytest.raises(ValidationError) as exc_info:
        DocumentCreate.model_validate({"title": "", "content": " ", "classification": 7, "owner_id": ""})

    assert {error["loc"][0] for error in exc_info.value.errors()} == {
        "title",
        "content",
        "classification",
        "owner_id",
    }


def test_update_changes_only_reports_supplied_fields():
    update = DocumentUpdate.model_validate({"title": " New ", "owner_id": "someone", "unknown": 1})

    assert update.changes() == {"title": "New"}


def test_update_with_nothing_recognised_is_empty():
    assert DocumentUpdate.model_validate({}).changes() == {}


def test_clean_search_term():
    assert clean_search_term("  a<b  ") == "a&lt;b"

    with pytest.raises(PydanticCustomError):
        clean_search_term("   ")


def test_like_pattern_escapes_wildcards():
    assert like_pattern("50%_off") == "%50\\%\\_off%"


def test_list_query_normalises_window():
    query = DocumentListQuery(page=0, limit=1000, classification=ClassificationLevel.PUBLIC)

    assert query.normalized_page == 1
    assert query.normalized_limit == 100
    assert query.offset == 0

    filters = query.to_filters()
    assert filters.limit == 100
    assert filters.offset == 0
    assert filters.classification == 1
    assert filters.without_window().limit is None


def test_list_query_offset():
    assert DocumentListQuery(page=3, limit=20).offset == 40


def test_stats_serialises_breakdown_key():
    stats = DocumentStats(
        total=3, by_classification=ClassificationBreakdown(public=1, internal=2, confidential=0, secret=0)
    )

    assert stats.model_dump(by_alias=True) == {
        "total": 3,
        "byClassification": {"public": 1, "internal": 2, "confidential": 0, "secret": 0},
    }


def test_format_validation_errors():
    errors = [
        {"loc": ("body", "classification"), "msg": "Input should be 1, 2, 3 or 4", "input": 99},
        {"loc": ("query", "page"), "msg": "Input should be greater than or equal to 1", "input": "0"},
        {"loc": ("title",), "msg": "Title is required and cannot be blank", "input": ""},
    ]

    assert format_validation_errors(errors) == [
        {"field": "classification", "location": "body", "message": "Input should be 1, 2, 3 or 4", "value": 99},
        {
            "field": "page",
            "location": "query",
            "message": "Input should be greater than or equal to 1",
            "value": "0",
        },
        {"field": "title", "location": "body", "message": "Title is required and cannot be blank", "value": ""},
    ]
