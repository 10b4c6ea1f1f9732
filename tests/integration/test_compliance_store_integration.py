from datetime import date
from typing import Any

import pytest

from app.compliance.exceptions import ComplianceDocumentNotFoundError
from app.compliance.models import CompositeKey, EffectiveStatus, VerificationStatus
from app.config.settings import Settings
from app.database.exceptions import StoredDocumentNotFoundError
from app.database.repositories.postgres_document_store import PostgresDocumentStore
from app.main import build_service

TODAY = date(2024, 1, 1)


def _application(tenant_code: str, participant_id: str, docs: list[Any], **extra: Any) -> dict:
    return {
        "companyCode": tenant_code,
        "participantId": participant_id,
        "applicationStatus": "accepted",
        "complianceDocuments": docs,
        **extra,
    }


@pytest.mark.integration
class TestPostgresDocumentStore:
    def test_query_uses_equality_filters(self, seed, tenant_code: str) -> None:
        accepted = seed("applications", _application(tenant_code, "p1", []))
        seed("applications", _application(tenant_code, "p2", [], applicationStatus="rejected"))

        results = PostgresDocumentStore().query_documents(
            "applications",
            [("companyCode", tenant_code), ("applicationStatus", "accepted")],
        )

        assert [doc.id for doc in results] == [accepted]

    def test_update_overwrites_top_level_field(self, seed, tenant_code: str) -> None:
        app_id = seed("applications", _application(tenant_code, "p1", [{"type": "A"}, {"type": "B"}]))
        store = PostgresDocumentStore()

        store.update_document("applications", app_id, {"complianceDocuments": [{"type": "C"}]})

        stored = store.get_document("applications", app_id)
        assert stored is not None
        assert stored.data["complianceDocuments"] == [{"type": "C"}]
        assert stored.data["companyCode"] == tenant_code

    def test_update_of_missing_document_raises(self, integration_pool: None) -> None:
        with pytest.raises(StoredDocumentNotFoundError):
            PostgresDocumentStore().update_document("applications", "does-not-exist", {"x": 1})


@pytest.mark.integration
class TestComplianceServiceIntegration:
    def test_load_and_verify_round_trip(self, seed, tenant_code: str) -> None:
        participant_id = seed(
            "participants", {"beneficiaryName": "Acme", "email": "ops@acme.example"}
        )
        seed(
            "applications",
            _application(
                tenant_code,
                participant_id,
                [
                    {"id": "d1", "type": "CIPC", "status": "valid", "url": "https://f/1"},
                    {"type": "Tax Clearance", "documentName": "tax.pdf", "expiryDate": "2023-06-01",
                     "url": "https://f/2"},
                ],
            ),
        )
        service = build_service(Settings(), PostgresDocumentStore())

        snapshot = service.load(tenant_code, now=TODAY)

        assert len(snapshot.participants) == 1
        summary = snapshot.participants[0]
        assert summary.beneficiary_name == "Acme"
        assert summary.email == "ops@acme.example"
        assert [d.effective_status for d in summary.docs] == [
            EffectiveStatus.VALID,
            EffectiveStatus.EXPIRED,
        ]

        service.verify_document(
            tenant_code,
            participant_id,
            VerificationStatus.QUERIED,
            composite=CompositeKey(type="tax clearance", document_name="TAX.pdf", expiry_date="2023-06-01"),
            comment="Expired certificate",
            reviewer_name="Thandi",
        )

        refreshed = service.snapshot(tenant_code)
        assert refreshed is not None
        tax = refreshed.participants[0].docs[1]
        assert tax.effective_status is EffectiveStatus.INVALID
        assert tax.document.verification_comment == "Expired certificate"
        assert tax.document.last_verified_by == "Thandi"

    def test_verify_unknown_document_leaves_store_untouched(self, seed, tenant_code: str) -> None:
        docs = [{"id": "d1", "type": "CIPC", "url": "https://f/1"}]
        app_id = seed("applications", _application(tenant_code, "p1", docs))
        store = PostgresDocumentStore()
        service = build_service(Settings(), store)

        with pytest.raises(ComplianceDocumentNotFoundError):
            service.verify_document(tenant_code, "p1", VerificationStatus.VERIFIED, doc_id="d9")

        stored = store.get_document("applications", app_id)
        assert stored is not None
        assert stored.data["complianceDocuments"] == docs
