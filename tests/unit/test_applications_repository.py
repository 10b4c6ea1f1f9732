from unittest.mock import MagicMock

import pytest

from app.database.exceptions import StoredDocumentNotFoundError
from app.database.models import ApplicationRecord, StoredDocument
from app.database.repositories.applications_repository import (
    APPLICATIONS_COLLECTION,
    ApplicationsRepository,
)
from app.database.repositories.base import BaseDocumentStore


def _make_application(**overrides: object) -> StoredDocument:
    data: dict = {
        "participantId": "p1",
        "companyCode": "T1",
        "applicationStatus": "accepted",
        "beneficiaryName": "Acme",
        "complianceDocuments": [{"type": "CIPC"}],
    }
    data.update(overrides)
    return StoredDocument(id="a1", data=data)


def _make_repo(documents: list[StoredDocument] | None = None) -> tuple[ApplicationsRepository, MagicMock]:
    store = MagicMock(spec=BaseDocumentStore)
    store.query_documents.return_value = documents or []
    return ApplicationsRepository(store), store


class TestListByStatus:
    def test_filters_by_tenant_and_status(self) -> None:
        repo, store = _make_repo([_make_application()])

        result = repo.list_by_status("T1", "accepted")

        store.query_documents.assert_called_once_with(
            APPLICATIONS_COLLECTION,
            [("companyCode", "T1"), ("applicationStatus", "accepted")],
        )
        assert result == [
            ApplicationRecord(
                id="a1",
                participant_id="p1",
                tenant_code="T1",
                application_status="accepted",
                beneficiary_name="Acme",
                compliance_documents=[{"type": "CIPC"}],
            )
        ]

    def test_missing_documents_array_becomes_empty(self) -> None:
        repo, _store = _make_repo([_make_application(complianceDocuments=None)])

        assert repo.list_by_status("T1", "accepted")[0].compliance_documents == []

    def test_keeps_malformed_entries_untouched(self) -> None:
        repo, _store = _make_repo([_make_application(complianceDocuments=[{"type": "CIPC"}, "junk"])])

        assert repo.list_by_status("T1", "accepted")[0].compliance_documents == [
            {"type": "CIPC"},
            "junk",
        ]

    def test_blank_name_becomes_none(self) -> None:
        repo, _store = _make_repo([_make_application(beneficiaryName="")])

        assert repo.list_by_status("T1", "accepted")[0].beneficiary_name is None


class TestListForParticipant:
    def test_filters_by_tenant_and_participant(self) -> None:
        repo, store = _make_repo([])

        assert repo.list_for_participant("T1", "p1") == []
        store.query_documents.assert_called_once_with(
            APPLICATIONS_COLLECTION,
            [("companyCode", "T1"), ("participantId", "p1")],
        )


class TestReplaceComplianceDocuments:
    def test_overwrites_array_field(self) -> None:
        repo, store = _make_repo()

        repo.replace_compliance_documents("a1", ({"type": "CIPC"},))

        store.update_document.assert_called_once_with(
            APPLICATIONS_COLLECTION, "a1", {"complianceDocuments": [{"type": "CIPC"}]}
        )

    def test_propagates_not_found(self) -> None:
        repo, store = _make_repo()
        store.update_document.side_effect = StoredDocumentNotFoundError("gone")

        with pytest.raises(StoredDocumentNotFoundError):
            repo.replace_compliance_documents("a9", [])
