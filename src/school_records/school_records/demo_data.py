"""Demo data for a fresh installation.

Every seeding step only touches collections that are still empty, so running
``seed_all`` twice is harmless.  Student, staff, bill and payment records are
created through the domain services so their numbering and validation match
records entered by hand.
"""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta

from .container import Container
from .core.constants import (
    ACADEMIC_SETTINGS,
    BILL_ITEMS,
    CLASSES,
    SCHOOL_INFO,
    SUBJECTS,
    SYSTEM_SETTINGS,
)

logger = logging.getLogger(__name__)

SCHOOL_INFO_DATA = [
    {
        "id": "school_001",
        "name": "BrainHub Academy",
        "address": "123 Education Street, Accra, Ghana",
        "phone": "+233 24 123 4567",
        "email": "info@brainhubacademy.edu.gh",
        "motto": "Excellence in Education",
        "establishedYear": "2015",
    }
]

SYSTEM_SETTINGS_DATA = [
    {
        "id": "sys_001",
        "schoolName": "BrainHub Academy",
        "currency": "GHS",
        "dateFormat": "DD/MM/YYYY",
        "enableSMSNotifications": False,
        "enableEmailNotifications": True,
        "emailFrom": "noreply@brainhubacademy.edu.gh",
    }
]

ACADEMIC_SETTINGS_DATA = [
    {
        "id": "acad_001",
        "currentAcademicYear": "2024/2025",
        "currentTerm": "1st Term",
        "terms": ["1st Term", "2nd Term", "3rd Term"],
        "passMark": 50,
        "maxScore": 100,
    }
]

CLASS_NAMES = ["Nursery 1", "Nursery 2", "Basic 1", "Basic 2", "Basic 3", "Basic 4", "Basic 5", "Basic 6", "JHS 1", "JHS 2", "JHS 3"]

SUBJECTS_DATA = [
    ("English Language", "ENG"),
    ("Mathematics", "MATH"),
    ("Science", "SCI"),
    ("Social Studies", "SOC"),
    ("Religious Studies", "RME"),
    ("French", "FRE"),
    ("ICT", "ICT"),
    ("Creative Arts", "CA"),
]

BILL_ITEMS_DATA = [
    ("Tuition Fee", 500.0, "Tuition"),
    ("Registration Fee", 100.0, "Registration"),
    ("Library Fee", 50.0, "Facilities"),
    ("Laboratory Fee", 75.0, "Facilities"),
    ("Sports Fee", 30.0, "Activities"),
    ("PTA Dues", 25.0, "Association"),
    ("Examination Fee", 40.0, "Examination"),
]

FIRST_NAMES = ["Kwame", "Ama", "Kofi", "Akosua", "Yaw", "Efua", "Kojo", "Adwoa", "Kwabena", "Abena"]
SURNAMES = ["Mensah", "Asante", "Osei", "Boateng", "Darko", "Owusu", "Amoah", "Appiah", "Tetteh", "Ofori"]
POSITIONS = [
    ("Headmaster", "Administration", "Administrator"),
    ("Teacher", "Academic", "Teacher"),
    ("Accountant", "Finance", "Support Staff"),
    ("Librarian", "Support", "Support Staff"),
]


def seed_reference_data(container: Container) -> None:
    store = container.store
    store.init_default_data(SCHOOL_INFO, SCHOOL_INFO_DATA)
    store.init_default_data(SYSTEM_SETTINGS, SYSTEM_SETTINGS_DATA)
    store.init_default_data(ACADEMIC_SETTINGS, ACADEMIC_SETTINGS_DATA)
    store.init_default_data(
        CLASSES,
        [{"id": f"class_{i:03d}", "name": name, "code": name.replace(" ", "").upper()} for i, name in enumerate(CLASS_NAMES, 1)],
    )
    store.init_default_data(
        SUBJECTS,
        [{"id": f"subj_{i:03d}", "name": name, "code": code} for i, (name, code) in enumerate(SUBJECTS_DATA, 1)],
    )
    store.init_default_data(
        BILL_ITEMS,
        [
            {"id": f"item_{i:03d}", "name": name, "amount": amount, "category": category}
            for i, (name, amount, category) in enumerate(BILL_ITEMS_DATA, 1)
        ],
    )


def seed_people(container: Container, *, rng: random.Random, students: int = 20, staff: int = 8, today: date | None = None) -> None:
    today = today or date.today()

    if not container.student_service.count():
        for _ in range(students):
            first, last = rng.choice(FIRST_NAMES), rng.choice(SURNAMES)
            container.student_service.create(
                {
                    "firstName": first,
                    "surname": last,
                    "class": rng.choice(CLASS_NAMES),
                    "gender": rng.choice(["Male", "Female"]),
                    "admissionDate": (today - timedelta(days=rng.randint(0, 1200))).isoformat(),
                    "email": f"{first.lower()}.{last.lower()}@example.com",
                }
            )

    if not container.staff_service.count():
        for _ in range(staff):
            first, last = rng.choice(FIRST_NAMES), rng.choice(SURNAMES)
            position, department, category = rng.choice(POSITIONS)
            container.staff_service.create(
                {
                    "firstName": first,
                    "surname": last,
                    "position": position,
                    "department": department,
                    "category": category,
                    "employmentDate": (today - timedelta(days=rng.randint(0, 3000))).isoformat(),
                }
            )


def seed_billing(container: Container, *, rng: random.Random, today: date | None = None) -> None:
    today = today or date.today()
    billing = container.billing_service
    if billing.get_all_bills():
        return

    items = container.setup_service.get_all_bill_items()
    for student in container.student_service.get_active():
        chosen = rng.sample(items, k=min(3, len(items)))
        bill = billing.create_bill(
            {
                "studentId": student["id"],
                "academicYear": "2024/2025",
                "term": "1st Term",
                "items": [{"name": i["name"], "amount": i["amount"]} for i in chosen],
            }
        )
        # Leave roughly a third unpaid, a third part-paid and a third settled.
        share = rng.choice([0.0, 0.5, 1.0])
        if share:
            billing.record_payment(
                {
                    "studentId": student["id"],
                    "billId": bill["id"],
                    "amount": round(bill["total"] * share, 2),
                    "paymentDate": (today - timedelta(days=rng.randint(0, 60))).isoformat(),
                    "method": "cash",
                }
            )


def seed_all(container: Container, *, seed: int = 2024) -> None:
    rng = random.Random(seed)
    logger.info("Seeding demo data...")
    seed_reference_data(container)
    seed_people(container, rng=rng)
    seed_billing(container, rng=rng)
    logger.info("Demo data seeded")
