from __future__ import annotations

import fitz
import pytest

from conftest import make_pdf
from pdf_multiplier.exceptions import (
    AnnotationError,
    DocumentLoadError,
    EmptyRecipientList,
    SerializationError,
    SignatureValidationError,
    ValidationReason,
)
from pdf_multiplier.models import NamingPattern, NormalizedArea, Outcome, Recipient
from pdf_multiplier.services import DuplicationPipeline, PyMuPdfBackend


class FailingLoadBackend(PyMuPdfBackend):
    """Fails load_copy on selected calls (call 1 is the up-front source check)"""

    def __init__(self, failing_calls):
        self.failing_calls = set(failing_calls)
        self.calls = 0

    def load_copy(self, data):
        self.calls += 1
        if self.calls in self.failing_calls:
            raise DocumentLoadError("Corrupt buffer")
        return super().load_copy(data)


class FailingSerializeBackend(PyMuPdfBackend):
    def __init__(self, failing_calls):
        self.failing_calls = set(failing_calls)
        self.calls = 0

    def to_bytes(self, handle):
        self.calls += 1
        if self.calls in self.failing_calls:
            raise SerializationError("Disk full")
        return super().to_bytes(handle)


class FailingAnnotationBackend(PyMuPdfBackend):
    def draw_rectangle(self, handle, page_index, rect, style):
        raise AnnotationError("Font not available")


AREA = NormalizedArea(page=0, x=0.1, y=0.7, width=0.3, height=0.1)


def _page_text(content: bytes, page: int = 0) -> str:
    doc = fitz.open(stream=content, filetype="pdf")
    try:
        return doc[page].get_text()
    finally:
        doc.close()


def test_one_success_per_recipient_in_input_order(source_pdf, recipients):
    report = DuplicationPipeline().duplicate_for_all(source_pdf, recipients, NamingPattern.USERNAME)

    assert [r.outcome for r in report.results] == [Outcome.SUCCESS] * 3
    assert [r.filename for r in report.results] == ["e-001.pdf", "e-002.pdf", "e-003.pdf"]
    assert [r.recipient for r in report.results] == recipients
    for result in report.results:
        assert result.content.startswith(b"%PDF")
        assert "Contract page 1" in _page_text(result.content)


def test_load_failure_is_isolated_to_one_recipient(source_pdf, recipients):
    report = DuplicationPipeline(backend=FailingLoadBackend({3})).duplicate_for_all(
        source_pdf, recipients, NamingPattern.FULL_NAME
    )

    assert [r.outcome for r in report.results] == [Outcome.SUCCESS, Outcome.FAILURE, Outcome.SUCCESS]
    failure = report.results[1]
    assert failure.filename == "bruno_diaz.pdf"
    assert failure.content is None
    assert "Corrupt buffer" in failure.error

    baseline = DuplicationPipeline().duplicate_for_all(source_pdf, recipients, NamingPattern.FULL_NAME)
    for index in (0, 2):
        assert report.results[index].filename == baseline.results[index].filename
        assert _page_text(report.results[index].content) == _page_text(baseline.results[index].content)

    assert report.stats == {"total": 3, "successful": 2, "failed": 1, "success_rate": pytest.approx(66.666, rel=1e-3)}
    assert [r.filename for r in report.failures] == ["bruno_diaz.pdf"]


def test_serialization_failure_is_recorded(source_pdf, recipients):
    report = DuplicationPipeline(backend=FailingSerializeBackend({1})).duplicate_for_all(source_pdf, recipients)

    assert [r.outcome for r in report.results] == [Outcome.FAILURE, Outcome.SUCCESS, Outcome.SUCCESS]
    assert report.results[0].filename == "e-001.pdf"
    assert "Disk full" in report.results[0].error


def test_every_recipient_failing_still_returns_full_report(source_pdf, recipients):
    report = DuplicationPipeline(backend=FailingLoadBackend({2, 3, 4})).duplicate_for_all(source_pdf, recipients)

    assert len(report.results) == 3
    assert report.successes == []
    assert len(report.failures) == 3


def test_signature_area_is_drawn_on_each_copy(source_pdf, recipients):
    report = DuplicationPipeline().duplicate_for_all(source_pdf, recipients, area=AREA)

    for result in report.results:
        doc = fitz.open(stream=result.content, filetype="pdf")
        try:
            page = doc[0]
            assert "Signature area" in page.get_text()
            rects = [item["rect"] for item in page.get_drawings()]
        finally:
            doc.close()

        expected = fitz.Rect(61.2, 554.4, 61.2 + 183.6, 554.4 + 79.2)
        assert any(
            abs(r.x0 - expected.x0) < 2 and abs(r.y0 - expected.y0) < 2
            and abs(r.x1 - expected.x1) < 2 and abs(r.y1 - expected.y1) < 2
            for r in rects
        )


def test_signature_area_on_second_page(recipients):
    source = make_pdf(pages=2, size=(595, 842))
    area = NormalizedArea(page=1, x=0.5, y=0.5, width=0.25, height=0.1)

    report = DuplicationPipeline().duplicate_for_all(source, recipients[:1], area=area)

    content = report.results[0].content
    assert "Signature area" not in _page_text(content, 0)
    assert "Signature area" in _page_text(content, 1)


def test_annotation_failure_still_delivers_document(source_pdf, recipients):
    report = DuplicationPipeline(backend=FailingAnnotationBackend()).duplicate_for_all(
        source_pdf, recipients, area=AREA
    )

    assert all(r.succeeded for r in report.results)
    assert "Signature area" not in _page_text(report.results[0].content)


@pytest.mark.parametrize(
    "values",
    [
        {"x": 0.9, "y": 0.9, "width": 0.5, "height": 0.5},
        {"x": float("nan"), "y": 0.1, "width": 0.2, "height": 0.1},
    ],
)
def test_area_outside_the_page_fails_the_whole_batch(source_pdf, recipients, values):
    # Built without validation, as if restored from a stale session
    stale = NormalizedArea.model_construct(page=0, **values)
    backend = FailingLoadBackend(set())
    events = []

    with pytest.raises(SignatureValidationError) as exc_info:
        DuplicationPipeline(backend=backend).duplicate_for_all(
            source_pdf, recipients, area=stale, on_progress=events.append
        )

    assert exc_info.value.reason == ValidationReason.OUT_OF_BOUNDS
    assert backend.calls == 0
    assert events == []


def test_progress_is_reported_after_each_recipient(source_pdf, recipients):
    events = []

    DuplicationPipeline(backend=FailingLoadBackend({3})).duplicate_for_all(
        source_pdf, recipients, on_progress=events.append
    )

    assert [(e.current, e.total, e.percentage) for e in events] == [(1, 3, 33), (2, 3, 67), (3, 3, 100)]
    assert [e.recipient_name for e in events] == ["Ana Pérez", "Bruno Díaz", "Carla Gómez"]


def test_prefix_and_pattern_drive_filenames(source_pdf, recipients):
    report = DuplicationPipeline().duplicate_for_all(source_pdf, recipients, "email", prefix="Recibo Enero")
    assert [r.filename for r in report.results] == [
        "recibo_enero_ana.perez.pdf",
        "recibo_enero_bruno.pdf",
        "recibo_enero_carla.pdf",
    ]


def test_empty_recipient_list_is_a_hard_failure(source_pdf):
    with pytest.raises(EmptyRecipientList):
        DuplicationPipeline().duplicate_for_all(source_pdf, [])


def test_unreadable_source_is_a_hard_failure(recipients):
    with pytest.raises(DocumentLoadError):
        DuplicationPipeline().duplicate_for_all(b"not a pdf at all", recipients)
    with pytest.raises(DocumentLoadError):
        DuplicationPipeline().duplicate_for_all(b"", recipients)


def test_area_on_missing_page_is_rejected_before_processing(source_pdf, recipients):
    with pytest.raises(SignatureValidationError):
        DuplicationPipeline().duplicate_for_all(
            source_pdf, recipients, area=NormalizedArea(page=3, x=0.1, y=0.1, width=0.2, height=0.1)
        )


def test_copies_are_independent_documents(source_pdf):
    recipients = [Recipient.from_humand({"id": i}) for i in range(1, 6)]

    report = DuplicationPipeline().duplicate_for_all(source_pdf, recipients, area=AREA)

    texts = [_page_text(r.content) for r in report.results]
    assert all(text.count("Signature area") == 1 for text in texts)
