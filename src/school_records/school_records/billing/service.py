from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_amount, to_amount
from ..core.constants import BILLS, OTHER_FEES, PAYMENTS
from ..core.enums import BillStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..store.entity_store import EntityStore, Record
from .model import CreditorPayment, DebtorBill

logger = logging.getLogger(__name__)


def _concerns_student(record: Record, student_id: str) -> bool:
    if record.get("studentId") == student_id:
        return True
    return student_id in (record.get("studentIds") or [])


def _require_student_reference(data: Mapping[str, Any]) -> None:
    if not data.get("studentId") and not data.get("studentIds"):
        raise ValidationError("Student ID or IDs are required")


class BillingService:
    """Use case: bills, fee payments and other fees.

    Amounts are kept as plain floats and summed without rounding, so totals
    behave exactly like the numbers callers stored.
    """

    def __init__(self, store: EntityStore):
        self._store = store

    # Bills

    def get_all_bills(self) -> list[Record]:
        return self._store.get_all(BILLS)

    def get_bill_by_id(self, bill_id: str) -> Record:
        return self._store.get_by_id(BILLS, bill_id)

    def create_bill(self, data: Mapping[str, Any]) -> Record:
        _require_student_reference(data)
        bill = dict(data)

        if not bill.get("status"):
            bill["status"] = BillStatus.PENDING.value

        items = bill.get("items")
        if isinstance(items, list):
            bill["total"] = sum(to_amount(item.get("amount")) for item in items)

        with self._store.locked(BILLS):
            if not bill.get("billNumber"):
                bill["billNumber"] = f"BILL{self._store.count(BILLS) + 1:06d}"
            return self._store.create(BILLS, bill)

    def update_bill(self, bill_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(BILLS, bill_id, data)

    def delete_bill(self, bill_id: str) -> None:
        self._store.delete(BILLS, bill_id)

    def get_bills_by_student(self, student_id: str) -> list[Record]:
        return self._store.query(BILLS, lambda b: _concerns_student(b, student_id))

    def get_pending_bills(self) -> list[Record]:
        return self._store.query(BILLS, lambda b: b.get("status") == BillStatus.PENDING.value)

    def get_paid_bills(self) -> list[Record]:
        return self._store.query(BILLS, lambda b: b.get("status") == BillStatus.PAID.value)

    # Payments

    def get_all_payments(self) -> list[Record]:
        return self._store.get_all(PAYMENTS)

    def get_payment_by_id(self, payment_id: str) -> Record:
        return self._store.get_by_id(PAYMENTS, payment_id)

    def record_payment(self, data: Mapping[str, Any]) -> Record:
        """Store a payment, then recompute the status of the bill it settles.

        The two writes are independent: if the bill update fails the payment
        stays recorded and the error propagates to the caller.
        """
        _require_student_reference(data)
        require_positive_amount(data.get("amount"), "Payment amount must be greater than zero")
        payment_data = dict(data)

        with self._store.locked(PAYMENTS):
            if not payment_data.get("receiptNumber"):
                payment_data["receiptNumber"] = f"REC{self._store.count(PAYMENTS) + 1:06d}"
            payment = self._store.create(PAYMENTS, payment_data)

        bill_id = payment_data.get("billId")
        if bill_id:
            self.refresh_bill_status(bill_id)

        return payment

    def refresh_bill_status(self, bill_id: str) -> Record:
        with self._store.locked(BILLS):
            bill = self.get_bill_by_id(bill_id)
            total_paid = self.get_total_paid_for_bill(bill_id)
            status = BillStatus.PAID if total_paid >= to_amount(bill.get("total")) else BillStatus.PARTIAL
            logger.debug("Bill %s: paid %s of %s -> %s", bill_id, total_paid, bill.get("total"), status.value)
            return self.update_bill(bill_id, {"status": status.value})

    def get_payments_by_student(self, student_id: str) -> list[Record]:
        return self._store.query(PAYMENTS, lambda p: _concerns_student(p, student_id))

    def get_payments_by_bill(self, bill_id: str) -> list[Record]:
        return self._store.query(PAYMENTS, lambda p: p.get("billId") == bill_id)

    def get_total_paid_for_bill(self, bill_id: str) -> float:
        return sum(to_amount(p.get("amount")) for p in self.get_payments_by_bill(bill_id))

    # Debtors and creditors

    def get_debtors(self) -> list[DebtorBill]:
        debtors: list[DebtorBill] = []
        for bill in self.get_all_bills():
            if bill.get("status") == BillStatus.PAID.value:
                continue
            total_paid = self.get_total_paid_for_bill(bill["id"])
            balance = to_amount(bill.get("total")) - total_paid
            if balance > 0:
                debtors.append(DebtorBill(bill=bill, total_paid=total_paid, balance=balance))
        return debtors

    def get_creditors(self) -> list[CreditorPayment]:
        creditors: list[CreditorPayment] = []
        for payment in self.get_all_payments():
            bill_id = payment.get("billId")
            if not bill_id:
                continue
            try:
                bill = self.get_bill_by_id(bill_id)
            except NotFoundError:
                continue
            overpayment = self.get_total_paid_for_bill(bill["id"]) - to_amount(bill.get("total"))
            if overpayment > 0:
                creditors.append(CreditorPayment(payment=payment, bill=bill, overpayment=overpayment))
        return creditors

    # Other fees

    def get_all_other_fees(self) -> list[Record]:
        return self._store.get_all(OTHER_FEES)

    def get_other_fee_by_id(self, fee_id: str) -> Record:
        return self._store.get_by_id(OTHER_FEES, fee_id)

    def create_other_fee(self, data: Mapping[str, Any]) -> Record:
        return self._store.create(OTHER_FEES, data)

    def update_other_fee(self, fee_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(OTHER_FEES, fee_id, data)

    def delete_other_fee(self, fee_id: str) -> None:
        self._store.delete(OTHER_FEES, fee_id)

    # Reports

    def get_fee_collection_report(self, start: Optional[date] = None, end: Optional[date] = None) -> list[Record]:
        """Payments whose paymentDate falls in [start, end]; undated payments are left out."""

        def _in_range(p: Record) -> bool:
            paid_on = parse_iso_date(p.get("paymentDate"))
            if paid_on is None:
                return False
            if start and paid_on < start:
                return False
            if end and paid_on > end:
                return False
            return True

        return self._store.query(PAYMENTS, _in_range)
