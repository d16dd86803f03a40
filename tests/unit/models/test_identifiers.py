"""
Unit tests for entity identifiers and the Document model.
"""

import os
import uuid
from datetime import datetime, timezone

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")


class TestEntityId:
    """Tests for canonical identifier equality."""

    @pytest.mark.unit
    def test_uuid_forms_are_equal(self):
        from app.models.identifiers import EntityId

        value = uuid.uuid4()

        assert EntityId(str(value).upper()) == EntityId(value)
        assert EntityId(value) == str(value)
        assert EntityId(str(value)) == value
        assert hash(EntityId(str(value).upper())) == hash(EntityId(value))

    @pytest.mark.unit
    def test_non_uuid_values_are_stripped(self):
        from app.models.identifiers import EntityId

        assert EntityId("  u1 ") == "u1"
        assert EntityId("u1") != "u2"

    @pytest.mark.unit
    def test_membership_uses_canonical_form(self):
        from app.models.identifiers import EntityId

        value = uuid.uuid4()
        paid = [EntityId(value)]

        assert EntityId(str(value).upper()) in paid

    @pytest.mark.unit
    def test_new_is_unique(self):
        from app.models.identifiers import EntityId

        assert EntityId.new() != EntityId.new()


class TestDocumentModel:
    """Tests for the Document wire format."""

    @pytest.mark.unit
    def test_serializes_with_wire_names(self):
        from app.models.document import Document

        created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        document = Document(
            id="d1",
            title="Algebra",
            category="math",
            pdf_url="https://storage.googleapis.com/b/pdf-uploads/1-a.pdf",
            cover_image_url="https://storage.googleapis.com/b/book-covers/1-c.png",
            owner_id="u1",
            paid_users=["u2"],
            created_at=created,
            updated_at=created,
        )

        data = document.model_dump(mode="json", by_alias=True)

        assert data == {
            "id": "d1",
            "title": "Algebra",
            "category": "math",
            "pdf": "https://storage.googleapis.com/b/pdf-uploads/1-a.pdf",
            "coverImage": "https://storage.googleapis.com/b/book-covers/1-c.png",
            "owner": "u1",
            "paidUsers": ["u2"],
            "createdAt": "2024-01-02T03:04:05+00:00",
            "updatedAt": "2024-01-02T03:04:05+00:00",
        }

    @pytest.mark.unit
    def test_validates_from_wire_names(self):
        from app.models.document import Document

        document = Document.model_validate(
            {"id": "d1", "title": "T", "category": "c", "owner": "u1", "paidUsers": ["u2"]}
        )

        assert document.owner_id == "u1"
        assert document.has_paid("u2") is True
        assert document.has_paid("u3") is False
        assert document.is_owned_by("u1") is True

    @pytest.mark.unit
    def test_file_payload_size(self):
        from app.models.document import FilePayload

        assert FilePayload(filename="a.pdf", content=b"12345").size == 5
