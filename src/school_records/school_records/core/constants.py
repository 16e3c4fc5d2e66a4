"""Constants and defaults.

Note: Keep collection names here so services and seed scripts agree on them.
"""

DEFAULT_STORAGE_PREFIX = "sms_"
DEFAULT_MYSQL_TABLE = "entity_collections"
DEFAULT_LOCK_TIMEOUT_SECONDS = 10
DEFAULT_FRESH_DAYS = 30
MAX_MARKS_PER_RESULT = 100
DEFAULT_EMAIL_FROM = "noreply@school.com"

# Collection names
STUDENTS = "students"
STAFF = "staff"
BILLS = "bills"
PAYMENTS = "payments"
OTHER_FEES = "otherFees"
ACADEMIC_RESULTS = "academicResults"
STUDENT_PROMOTIONS = "studentPromotions"
END_TERM_REMARKS = "endTermRemarks"
REPORT_FOOTNOTES = "reportFootnotes"
COURSE_CLASS_ASSIGNMENTS = "courseClassAssignments"
COURSE_STUDENT_ASSIGNMENTS = "courseStudentAssignments"
SCHOOL_INFO = "schoolInfo"
SYSTEM_SETTINGS = "systemSettings"
ACADEMIC_SETTINGS = "academicSettings"
CLASSES = "classes"
SUBJECTS = "subjects"
BILL_ITEMS = "billItems"
ITEM_SETUP = "itemSetup"

# Sequence counters live in one reserved collection per data collection: _seq_<name>
SEQUENCE_PREFIX = "_seq_"
