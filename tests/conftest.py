"""Shared fixtures for QUIRE tests."""

import io
from pathlib import Path

import pytest
from PIL import Image

from quire.contexts.templating.resume_data_structure import Document, load_document
from quire.utils import event_logging

FIXTURES_PATH = Path(__file__).parent / "fixtures"
SAMPLE_DOCUMENT_PATH = FIXTURES_PATH / "ada_lovelace.yaml"


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path_factory, monkeypatch):
    """Send pipeline events to a per-test file instead of outs/logs."""
    events_file = tmp_path_factory.mktemp("events") / "export_events.log"
    monkeypatch.setattr(event_logging, "EVENTS_FILE", events_file)
    return events_file


@pytest.fixture
def sample_document() -> Document:
    return load_document(SAMPLE_DOCUMENT_PATH)


@pytest.fixture
def one_experience_payload() -> dict:
    """Editor payload with a single experience and nothing else."""
    return {
        "id": "resume-one",
        "templateId": "classic",
        "contact": {"fullName": "Grace Hopper"},
        "experiences": [
            {
                "id": "exp-1",
                "company": "Harvard Computation Lab",
                "title": "Programmer",
                "startDate": "1944",
                "endDate": "1949",
                "bullets": ["<p>Programmed the Mark I computer</p>"],
            }
        ],
    }


@pytest.fixture
def one_experience_document(one_experience_payload) -> Document:
    return Document.from_dict(one_experience_payload)


def make_pdf(pages: int = 1) -> bytes:
    """Blank A4-proportioned PDF built with Pillow (no text layer)."""
    images = [Image.new("RGB", (794, 1123), "white") for _ in range(pages)]
    buffer = io.BytesIO()
    images[0].save(buffer, "PDF", save_all=True, append_images=images[1:], resolution=96)
    return buffer.getvalue()


@pytest.fixture
def pdf_factory():
    return make_pdf
