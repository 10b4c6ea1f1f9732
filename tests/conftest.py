from collections.abc import Callable
from datetime import date
from typing import Any

import pytest


@pytest.fixture()
def today() -> date:
    """Fixed reference date for status resolution."""
    return date(2024, 1, 1)


@pytest.fixture()
def make_raw_doc() -> Callable[..., dict[str, Any]]:
    """Factory for a raw compliance document with a file and a valid stored status."""

    def _make(**overrides: Any) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "participantId": "p1",
            "type": "Tax Clearance",
            "documentName": "tax.pdf",
            "status": "valid",
            "url": "https://files.example.com/tax.pdf",
            "verificationStatus": "unverified",
        }
        doc.update(overrides)
        return doc

    return _make
