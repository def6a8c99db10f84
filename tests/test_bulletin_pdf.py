"""Bulletins and receipts render to PDF."""
from datetime import date

from ecogest.utils.bulletin_pdf import (
    annual_bulletin_pdf,
    class_bulletin_pdf,
    payment_receipt_pdf,
    student_bulletin_pdf,
)

SCHOOL = {"name": "Ecole Best", "slogan": "Travail, Discipline", "currency": "XOF"}
SUBJECTS = [{"id": "math", "name": "Mathématiques", "abbreviation": "MATH", "coefficient": 4.0}]


def test_class_bulletin():
    results = {"class_average": 15.5, "graded_count": 1, "students": [
        {"id": "s1", "name": "Fatou Ba", "student_number": "Eleve001", "average": 15.5,
         "subjects": {"math": 15.5}, "appreciation": "Good", "rank": 1},
        {"id": "s2", "name": "Moussa Fall", "student_number": "Eleve002", "average": None,
         "subjects": {}, "appreciation": "", "rank": None},
    ]}
    content = class_bulletin_pdf(SCHOOL, "6e A", "semestre1", SUBJECTS, results)
    assert content.startswith(b"%PDF")


def test_student_bulletin():
    rows = [{**SUBJECTS[0], "average": 12.0, "appreciation": "Fairly Good"}]
    summary = {"average": 12.0, "rank": 3, "class_size": 30, "class_average": 11.2, "appreciation": "Fairly Good"}
    content = student_bulletin_pdf(SCHOOL, {"name": "Fatou Ba", "student_number": "Eleve001"},
                                   "6e A", "trimestre2", rows, summary)
    assert content.startswith(b"%PDF")


def test_annual_bulletin():
    rows = [{"id": "s1", "name": "Fatou Ba", "student_number": "Eleve001", "periods": [12.0, 14.0],
             "average": 13.0, "decision": "promoted", "appreciation": "Fairly Good", "rank": 1}]
    content = annual_bulletin_pdf(SCHOOL, "6e A", "2024/2025", ["semestre1", "semestre2"], rows)
    assert content.startswith(b"%PDF")


def test_payment_receipt():
    payment = {"id": "p1", "amount": 25000, "payment_type": "tuition", "payment_method": "wave",
               "payment_month": "octobre", "payment_date": date(2024, 10, 5).isoformat(), "paid_by": "Awa Ba"}
    content = payment_receipt_pdf(SCHOOL, payment, {"name": "Fatou Ba", "student_number": "Eleve001"})
    assert content.startswith(b"%PDF")
