"""
Data Transfer Objects (DTOs).
Used for passing data between layers without exposing domain models.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict
from decimal import Decimal
from datetime import date


@dataclass
class LineItemDTO:
    """One product line on a receipt or issue"""
    product_id: int = None
    quantity: int = 0
    unit_price: Decimal = Decimal('0')
    unit: str = ""

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.unit_price)


@dataclass
class ReceiptDTO:
    """Data Transfer Object for an ink receipt (stock in)"""
    id: Optional[int] = None
    document_no: str = ""
    supplier_id: int = None
    received_at: date = None
    note: Optional[str] = None
    items: List[LineItemDTO] = field(default_factory=list)


@dataclass
class IssueDTO:
    """Data Transfer Object for an ink issue (stock out)"""
    id: Optional[int] = None
    document_no: str = ""
    department: str = ""
    requested_by: str = ""
    issued_at: date = None
    note: Optional[str] = None
    items: List[LineItemDTO] = field(default_factory=list)


@dataclass
class ITRoundDTO:
    """Data Transfer Object for an IT maintenance round"""
    id: Optional[int] = None
    equipment_code: str = ""
    performed_at: date = None
    next_due_at: Optional[date] = None
    frequency_months: Optional[int] = None
    technician: Optional[str] = None
    notes: Optional[str] = None
    status: str = "completed"
    activities: Dict[str, bool] = field(default_factory=dict)


@dataclass
class RepairDTO:
    """Data Transfer Object for a repair / replacement ticket"""
    id: Optional[int] = None
    equipment_code: str = ""
    reported_at: date = None
    status: str = "OPEN"
    cost: Decimal = Decimal('0')
    description: Optional[str] = None
    parts_replaced: List[Dict[str, object]] = field(default_factory=list)


@dataclass
class EquipmentDTO:
    """Data Transfer Object for a registered piece of equipment"""
    id: Optional[int] = None
    asset_number: str = ""
    name: str = ""
    equipment_type: str = ""
    brand: str = ""
    model: str = ""
    serial_number: str = ""
    location: str = ""
    assigned_to: str = ""
    status: str = "working"
    quantity: int = 1
    purchase_date: Optional[date] = None
    warranty_end: Optional[date] = None
    specs: Dict[str, str] = field(default_factory=dict)
