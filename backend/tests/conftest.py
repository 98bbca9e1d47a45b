from __future__ import annotations

from typing import List, Tuple

import fitz
import pytest

from pdf_multiplier.models import Recipient


def make_pdf(pages: int = 1, size: Tuple[float, float] = (612, 792)) -> bytes:
    doc = fitz.open()
    try:
        for number in range(pages):
            page = doc.new_page(width=size[0], height=size[1])
            page.insert_text(fitz.Point(72, 72), f"Contract page {number + 1}")
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def source_pdf() -> bytes:
    return make_pdf()


@pytest.fixture
def recipients() -> List[Recipient]:
    return [
        Recipient.from_humand({"id": 11, "employeeInternalId": "E-001", "firstName": "Ana", "lastName": "Pérez", "email": "ana.perez@example.com"}),
        Recipient.from_humand({"id": 12, "employeeInternalId": "E-002", "firstName": "Bruno", "lastName": "Díaz", "email": "bruno@example.com"}),
        Recipient.from_humand({"id": 13, "employeeInternalId": "E-003", "firstName": "Carla", "lastName": "Gómez", "email": "carla@example.com"}),
    ]
