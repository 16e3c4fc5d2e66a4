"""Example: use the service layer directly.

Creates a student, bills them and records a part payment.
"""

from src.school_records.school_records.container import build_container


def main():
    container = build_container(backend="memory")

    student = container.student_service.create({"firstName": "Ama", "surname": "Owusu", "class": "Basic 4"})
    bill = container.billing_service.create_bill(
        {"studentId": student["id"], "items": [{"name": "Tuition Fee", "amount": 500}]}
    )
    container.billing_service.record_payment({"studentId": student["id"], "billId": bill["id"], "amount": 300})

    print(student["studentId"], container.billing_service.get_bill_by_id(bill["id"])["status"])
    for debtor in container.billing_service.get_debtors():
        print(debtor.bill["billNumber"], debtor.balance)


if __name__ == "__main__":
    main()
