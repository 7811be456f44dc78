from .people import Person, PERSON_TYPES, PERSON_TYPE_OWNER, PERSON_TYPE_CLIENT
from .intermediaries import Intermediary
from .vehicles import (
    Vehicle,
    VEHICLE_STATUSES,
    STATUS_AWAITING_PREP,
    STATUS_AVAILABLE,
    STATUS_IN_MAINTENANCE,
    STATUS_RESERVED,
    STATUS_SOLD,
)
from .expenses import Expense, StoreExpense, STORE_EXPENSE_CATEGORIES

__all__ = [
    'Person', 'PERSON_TYPES', 'PERSON_TYPE_OWNER', 'PERSON_TYPE_CLIENT',
    'Intermediary',
    'Vehicle', 'VEHICLE_STATUSES',
    'STATUS_AWAITING_PREP', 'STATUS_AVAILABLE', 'STATUS_IN_MAINTENANCE',
    'STATUS_RESERVED', 'STATUS_SOLD',
    'Expense', 'StoreExpense', 'STORE_EXPENSE_CATEGORIES',
]
