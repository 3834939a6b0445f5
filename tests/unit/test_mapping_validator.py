"""
Unit tests for MappingSelectionValidator.

Run: pytest tests/unit/test_mapping_validator.py -v
"""

from types import SimpleNamespace

import pytest

from services.mapping_validator import MappingSelectionValidator
from models.mapping import RejectionReason
from exceptions import MissingContentError
from tests.factories import MappingFactory


class TestMappingSelectionValidator:
    """Tests for validate() and ensure_valid()"""

    def test_accepts_mapping_with_content(self):
        validator = MappingSelectionValidator()
        mapping = MappingFactory.create(csv_content="a,b\n1,2")

        result = validator.validate(mapping)

        assert result.accepted is True
        assert result.reason is None

    def test_rejects_empty_content(self):
        """Empty csv_content should be rejected as MissingContent."""
        validator = MappingSelectionValidator()
        mapping = MappingFactory.create(csv_content="")

        result = validator.validate(mapping)

        assert result.accepted is False
        assert result.reason == RejectionReason.MISSING_CONTENT

    def test_rejects_null_content_read_from_storage(self):
        """A null column becomes "" and is rejected."""
        validator = MappingSelectionValidator()
        mapping = MappingFactory.create(csv_content=None)

        result = validator.validate(mapping)

        assert result.accepted is False

    def test_rejects_object_without_content_attribute(self):
        validator = MappingSelectionValidator()

        result = validator.validate(SimpleNamespace(id="x"))

        assert result.reason == RejectionReason.MISSING_CONTENT

    @pytest.mark.parametrize("content", [" ", "\n", "a", "a,b\n1,2"])
    def test_accepts_any_non_empty_string(self, content):
        """Whitespace-only content is still content."""
        validator = MappingSelectionValidator()

        result = validator.validate(SimpleNamespace(id="x", csv_content=content))

        assert result.accepted is True

    def test_ensure_valid_raises_missing_content(self):
        validator = MappingSelectionValidator()
        mapping = MappingFactory.create(id="map-empty", csv_content="")

        with pytest.raises(MissingContentError) as exc_info:
            validator.ensure_valid(mapping)

        assert exc_info.value.code == "MISSING_CONTENT"
        assert exc_info.value.status_code == 422
        assert exc_info.value.details == {"id": "map-empty"}

    def test_ensure_valid_passes_with_content(self):
        validator = MappingSelectionValidator()

        validator.ensure_valid(MappingFactory.create(csv_content="x"))
