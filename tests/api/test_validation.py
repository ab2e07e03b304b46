"""Tests for validate() and the @validate_request decorator."""

import pytest
from pydantic import BaseModel, Field

from tzcalendar.api.validation import validate, validate_request
from tzcalendar.exceptions import ValidationError


class MockCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    identifier: str


class MockUpdateRequest(BaseModel):
    name: str | None = None


@validate_request
def create(data: MockCreateRequest) -> MockCreateRequest:
    return data


@validate_request
def update(item_id: str, data: MockUpdateRequest) -> tuple[str, MockUpdateRequest]:
    return item_id, data


class TestValidate:
    """Tests for validate()."""

    def test_dict_is_converted(self):
        """validate() should build the model from a dict."""
        result = validate(MockCreateRequest, {"name": "Tokyo", "identifier": "Asia/Tokyo"})
        assert result == MockCreateRequest(name="Tokyo", identifier="Asia/Tokyo")

    def test_instance_passes_through(self):
        """validate() should return a model instance unchanged."""
        data = MockCreateRequest(name="Tokyo", identifier="Asia/Tokyo")
        assert validate(MockCreateRequest, data) is data

    def test_missing_data(self):
        """validate() should reject None."""
        with pytest.raises(ValidationError, match="Missing input data"):
            validate(MockCreateRequest, None)

    def test_errors_in_details(self):
        """Validation errors should be listed in details."""
        with pytest.raises(ValidationError) as exc_info:
            validate(MockCreateRequest, {"name": ""})
        errors = exc_info.value.details["errors"]
        assert {error["loc"][0] for error in errors} == {"name", "identifier"}

    def test_other_model_is_revalidated(self):
        """A different model should be checked against the target."""
        result = validate(MockUpdateRequest, MockCreateRequest(name="Tokyo", identifier="x"))
        assert result.name == "Tokyo"


class TestValidateRequest:
    """Tests for the @validate_request decorator."""

    def test_dict_argument(self):
        """@validate_request should convert a positional dict."""
        result = create({"name": "Tokyo", "identifier": "Asia/Tokyo"})
        assert isinstance(result, MockCreateRequest)

    def test_keyword_argument(self):
        """@validate_request should convert a keyword dict."""
        result = create(data={"name": "Tokyo", "identifier": "Asia/Tokyo"})
        assert result.identifier == "Asia/Tokyo"

    def test_plain_arguments_untouched(self):
        """@validate_request should leave other arguments alone."""
        item_id, data = update("abc", {"name": "Osaka"})
        assert item_id == "abc"
        assert data.name == "Osaka"

    def test_invalid_argument_raises(self):
        """@validate_request should raise ValidationError for bad input."""
        with pytest.raises(ValidationError):
            create({"name": "Tokyo"})

    def test_preserves_metadata(self):
        """@validate_request should keep the wrapped function's name."""
        assert create.__name__ == "create"
