"""Pytest fixtures for intake unit tests."""

import json

import pytest

from caseintake.ingestion.parser import UploadedFile


@pytest.fixture
def sample_csv() -> bytes:
    """A small intake export with aliased headers."""
    return (
        b"name,phone,species,breed,request,status\n"
        b"Jane Doe,9045551234,Dog,Beagle,Food assistance,open\n"
        b"\n"
        b"  Sam Lee ,(904) 555-0000,Cat,,Vet referral,\n"
    )


@pytest.fixture
def sample_json_records() -> list[dict]:
    """Records as a partner system exports them."""
    return [
        {
            "case_id": "EXT-100",
            "contact_name": "Alex Kim",
            "phone_number": "904-555-7777",
            "pet": "Rex",
            "species": "Dog",
            "initial_request": "Rehoming",
        },
        {"id": 42, "contact": "Pat Ortiz", "phone": "9045558888", "notes": "Call back"},
    ]


@pytest.fixture
def csv_upload(sample_csv) -> UploadedFile:
    return UploadedFile(filename="intake.csv", mimetype="text/csv", content=sample_csv)


@pytest.fixture
def json_upload(sample_json_records) -> UploadedFile:
    return UploadedFile(
        filename="partner.json",
        mimetype="application/json",
        content=json.dumps(sample_json_records).encode("utf-8"),
    )


@pytest.fixture
def broken_json_upload() -> UploadedFile:
    return UploadedFile(filename="broken.json", mimetype="application/json", content=b"{not json")
