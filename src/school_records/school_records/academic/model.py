from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class StudentReport:
    student_id: str
    academic_year: Optional[str]
    term: Optional[str]
    courses: list[dict[str, Any]] = field(default_factory=list)
    results: list[dict[str, Any]] = field(default_factory=list)
    remarks: list[dict[str, Any]] = field(default_factory=list)
    total_marks: float = 0.0
    max_marks: int = 0
    # Two decimals, as printed on report cards ("78.50").
    percentage: str = "0.00"
