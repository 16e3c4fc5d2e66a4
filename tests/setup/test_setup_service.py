from __future__ import annotations

import pytest

from src.school_records.school_records.core.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def setup_service(container):
    return container.setup_service


def test_settings_documents_are_upserted(setup_service):
    assert setup_service.get_school_info() is None

    created = setup_service.update_school_info({"name": "BrainHub Academy"})
    updated = setup_service.update_school_info({"motto": "Excellence in Education"})

    assert updated["id"] == created["id"]
    assert setup_service.get_school_info()["name"] == "BrainHub Academy"
    assert setup_service.get_school_info()["motto"] == "Excellence in Education"


def test_each_settings_document_is_separate(setup_service):
    setup_service.update_system_settings({"currency": "GHS"})
    setup_service.update_academic_settings({"currentTerm": "1st Term"})

    assert setup_service.get_system_settings()["currency"] == "GHS"
    assert "currency" not in setup_service.get_academic_settings()


def test_classes_need_name_and_unique_code(setup_service):
    with pytest.raises(ValidationError, match="Class name and code are required"):
        setup_service.create_class({"name": "Basic 1"})

    basic1 = setup_service.create_class({"name": "Basic 1", "code": "B1"})
    with pytest.raises(ConflictError, match="Class with this code already exists"):
        setup_service.create_class({"name": "Basic One", "code": "B1"})

    setup_service.update_class(basic1["id"], {"name": "Basic One"})
    assert setup_service.get_class_by_id(basic1["id"])["name"] == "Basic One"
    setup_service.delete_class(basic1["id"])
    assert setup_service.get_all_classes() == []


def test_subjects_need_unique_code(setup_service):
    maths = setup_service.create_subject({"name": "Mathematics", "code": "MATH"})

    with pytest.raises(ConflictError, match="Subject with this code already exists"):
        setup_service.create_subject({"name": "Maths", "code": "MATH"})

    setup_service.update_subject(maths["id"], {"name": "Maths"})
    assert [s["name"] for s in setup_service.get_all_subjects()] == ["Maths"]
    setup_service.delete_subject(maths["id"])
    with pytest.raises(NotFoundError):
        setup_service.get_subject_by_id(maths["id"])


def test_bill_items_need_name_and_positive_amount(setup_service):
    with pytest.raises(ValidationError, match="Bill item name is required"):
        setup_service.create_bill_item({"amount": 10})
    with pytest.raises(ValidationError, match="greater than zero"):
        setup_service.create_bill_item({"name": "Tuition Fee", "amount": 0})

    item = setup_service.create_bill_item({"name": "Tuition Fee", "amount": 500.0})
    setup_service.update_bill_item(item["id"], {"amount": 550.0})

    assert setup_service.get_bill_item_by_id(item["id"])["amount"] == 550.0
    setup_service.delete_bill_item(item["id"])
    assert setup_service.get_all_bill_items() == []


def test_item_setup(setup_service):
    with pytest.raises(ValidationError, match="Item name is required"):
        setup_service.create_item_setup({})

    item = setup_service.create_item_setup({"name": "Uniform"})
    setup_service.update_item_setup(item["id"], {"price": 80})

    assert setup_service.get_item_setup_by_id(item["id"])["price"] == 80
    setup_service.delete_item_setup(item["id"])
    assert setup_service.get_all_item_setup() == []
