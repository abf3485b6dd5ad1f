"""
Complaint Taxonomy Configuration
Option types, built-in fallback options, priority rules and complaint statuses

Everything here is immutable and built once at import time.
"""
from types import MappingProxyType


class OptionType:
    """Taxonomy option kinds stored in the options table"""
    CATEGORY = "category"
    DEPARTMENT = "department"
    SUB_CATEGORY = "subCategory"

    ALL_TYPES = (CATEGORY, DEPARTMENT, SUB_CATEGORY)


class Priority:
    """Complaint priority levels, lowest first"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    ALL_LEVELS = (LOW, MEDIUM, HIGH, URGENT)
    DEFAULT = MEDIUM


class ComplaintStatus:
    """Lifecycle states a staff member can move a complaint through"""
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

    ALL_STATUSES = (OPEN, IN_PROGRESS, RESOLVED, CLOSED)
    INITIAL = OPEN


# Escape value for a subcategory not in the list; requires free text in subOther
OTHER_SUBCATEGORY = "other"

# Fallback Categories
FALLBACK_CATEGORIES = ("facility", "request", "hostel")

# Fallback Departments (name, code); Information Technology has no code
FALLBACK_DEPARTMENTS = (
    ("Computer Science", "24510"),
    ("Electrical Engineering", "29310"),
    ("Mechanical Engineering", "61210"),
    ("Civil Engineering", "19110"),
    ("Information Technology", None),
)

# Fallback Subcategories keyed by lower-case category, seeded casing preserved
FALLBACK_SUBCATEGORIES = MappingProxyType({
    "facility": ("washroom", "Water-Cooler", "Garbage", "tap", "Fan", "Lights"),
    "request": ("wheelchair", "mat", "Table-Cloth", "Sound-System", "Seminar-Hall"),
    "hostel": ("electricity", "cleaning", "water"),
})

# Canonical department codes, keyed by lower-case department name
DEPARTMENT_CODES = MappingProxyType({
    name.lower(): code or "" for name, code in FALLBACK_DEPARTMENTS
})

# Priority Rules: lower-case category -> lower-case subcategory -> priority
PRIORITY_RULES = MappingProxyType({
    "facility": MappingProxyType({
        "washroom": Priority.HIGH,
        "water-cooler": Priority.HIGH,
        "garbage": Priority.HIGH,
        "tap": Priority.MEDIUM,
        "fan": Priority.MEDIUM,
        "lights": Priority.LOW,
    }),
    "request": MappingProxyType({
        "wheelchair": Priority.URGENT,
        "mat": Priority.LOW,
        "table-cloth": Priority.LOW,
        "sound-system": Priority.MEDIUM,
        "seminar-hall": Priority.MEDIUM,
    }),
    "hostel": MappingProxyType({
        "electricity": Priority.URGENT,
        "cleaning": Priority.HIGH,
        "water": Priority.HIGH,
    }),
})
