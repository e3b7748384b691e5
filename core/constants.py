"""
Application-wide constants.
Centralized constants following DRY principle.
"""

# User Roles
class UserRole:
    SUPER_ADMIN = 'SUPER_ADMIN'
    ADMIN = 'ADMIN'
    TECHNICIAN = 'TECHNICIAN'
    USER = 'USER'

    CHOICES = [
        (SUPER_ADMIN, 'Super Admin'),
        (ADMIN, 'Admin'),
        (TECHNICIAN, 'Technician'),
        (USER, 'User'),
    ]

    # Roles that may change records
    STAFF = {SUPER_ADMIN, ADMIN, TECHNICIAN}
    ADMINS = {SUPER_ADMIN, ADMIN}


# Audit actions (persisted in audit rows)
class AuditAction:
    INSERT = 'INSERT'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'

    CHOICES = [
        (INSERT, 'Insert'),
        (UPDATE, 'Update'),
        (DELETE, 'Delete'),
    ]


# Actions guarded by step-up authentication
class SensitiveAction:
    EDIT = 'edit'
    DELETE = 'delete'
    VIEW_HISTORY = 'view_history'

    CHOICES = [
        (EDIT, 'Edit'),
        (DELETE, 'Delete'),
        (VIEW_HISTORY, 'View history'),
    ]

    # Actions that change data and therefore need a justification
    REQUIRES_REASON = {EDIT, DELETE}


# Audited tables
class EntityType:
    INK_RECEIPT = 'ink_receipts'
    INK_ISSUE = 'ink_issues'
    IT_ROUND = 'equipment_it_rounds'
    REPAIR = 'equipment_repairs'
    EQUIPMENT = 'equipment'
    USER = 'profiles'

    CHOICES = [
        (EQUIPMENT, 'Equipment'),
        (USER, 'User'),
        (INK_RECEIPT, 'Ink receipt'),
        (INK_ISSUE, 'Ink issue'),
        (IT_ROUND, 'IT round'),
        (REPAIR, 'Repair ticket'),
    ]


# Stock movement direction
class StockDirection:
    IN = 1
    OUT = -1

    VALUES = (IN, OUT)


# Ink types
class InkType:
    INK = 'INK'
    TONER = 'TONER'

    CHOICES = [
        (INK, 'Ink'),
        (TONER, 'Toner'),
    ]


# IT round status
class ITRoundStatus:
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    CHOICES = [
        (SCHEDULED, 'Scheduled'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]


# IT round frequency in months
class ITRoundFrequency:
    MONTHLY = 1
    QUARTERLY = 3
    HALF_YEARLY = 6
    YEARLY = 12

    CHOICES = [
        (MONTHLY, 'Every 1 month'),
        (QUARTERLY, 'Every 3 months'),
        (HALF_YEARLY, 'Every 6 months'),
        (YEARLY, 'Every 12 months'),
    ]


# Tasks that can be ticked off during an IT round
IT_ROUND_TASKS = [
    ('power_check', 'Power / UPS check'),
    ('general_inspection', 'General inspection'),
    ('preventive_maintenance', 'Preventive maintenance'),
    ('dust_cleaning', 'Dust cleaning'),
    ('deep_cleaning', 'Deep cleaning'),
    ('ups_battery_replacement', 'UPS battery replacement'),
    ('virus_scan', 'Virus scan'),
    ('software_installation', 'Software installation'),
    ('os_reinstallation', 'OS reinstallation'),
]


# Equipment status
class EquipmentStatus:
    WORKING = 'working'
    MAINTENANCE = 'maintenance'
    BROKEN = 'broken'
    BORROWED = 'borrowed'
    PENDING_DISPOSAL = 'pending_disposal'
    DISPOSED = 'disposed'
    LOST = 'lost'

    CHOICES = [
        (WORKING, 'Working'),
        (MAINTENANCE, 'Under maintenance'),
        (BROKEN, 'Broken'),
        (BORROWED, 'Borrowed'),
        (PENDING_DISPOSAL, 'Pending disposal'),
        (DISPOSED, 'Disposed'),
        (LOST, 'Lost'),
    ]


# Repair ticket status
class RepairStatus:
    OPEN = 'OPEN'
    IN_PROGRESS = 'IN_PROGRESS'
    WAITING_PARTS = 'WAITING_PARTS'
    RESOLVED = 'RESOLVED'
    CLOSED = 'CLOSED'

    CHOICES = [
        (OPEN, 'Open'),
        (IN_PROGRESS, 'In Progress'),
        (WAITING_PARTS, 'Waiting for parts'),
        (RESOLVED, 'Resolved'),
        (CLOSED, 'Closed'),
    ]


# Defaults
class Defaults:
    UNIT = 'piece'
    STEP_UP_GRANT_TTL = 300
    WARRANTY_WARNING_DAYS = 60
