"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.
"""
from typing import List
from decimal import Decimal, InvalidOperation
from core.constants import SensitiveAction, StockDirection
from core.dto import LineItemDTO
from core.exceptions import ValidationError as AppValidationError


class ReasonValidator:
    """Validates the justification attached to a sensitive action"""

    @staticmethod
    def validate_reason(action: str, reason) -> str:
        """Return the trimmed reason, or raise if the action needs one and it is blank"""
        cleaned = (reason or "").strip()
        if action in SensitiveAction.REQUIRES_REASON and not cleaned:
            raise AppValidationError(
                message="A reason is required for this action",
                code="REASON_REQUIRED",
                details={"action": action}
            )
        return cleaned


class CredentialValidator:
    """Validates that a credential was entered before verification is attempted"""

    @staticmethod
    def validate_secret(secret) -> str:
        if not secret or not str(secret).strip():
            raise AppValidationError(
                message="Password confirmation is required",
                code="CREDENTIAL_REQUIRED"
            )
        return str(secret)


class StockValidator:
    """Validates stock movement parameters"""

    @staticmethod
    def validate_direction(direction: int) -> int:
        if direction not in StockDirection.VALUES:
            raise AppValidationError(
                message=f"Stock direction must be +1 or -1, got {direction!r}",
                code="INVALID_DIRECTION",
                details={"direction": direction}
            )
        return direction

    @staticmethod
    def validate_quantity(quantity) -> int:
        try:
            value = int(quantity)
        except (TypeError, ValueError):
            raise AppValidationError(
                message=f"Quantity must be a whole number, got {quantity!r}",
                code="INVALID_QUANTITY"
            )
        if value < 0:
            raise AppValidationError(
                message="Quantity cannot be negative",
                code="INVALID_QUANTITY",
                details={"quantity": value}
            )
        return value


class LineItemValidator:
    """Validates the product lines of a receipt or issue"""

    @staticmethod
    def clean_items(items: List[LineItemDTO], require_price: bool = True) -> List[LineItemDTO]:
        """
        Drop incomplete lines and require at least one usable line.

        A usable line has a product, a positive quantity and (for receipts)
        a positive unit price.
        """
        cleaned = []
        for item in items:
            if not item.product_id:
                continue
            quantity = StockValidator.validate_quantity(item.quantity or 0)
            try:
                unit_price = Decimal(str(item.unit_price or 0))
            except InvalidOperation:
                raise AppValidationError(
                    message=f"Unit price must be a number, got {item.unit_price!r}",
                    code="INVALID_UNIT_PRICE"
                )
            if unit_price < 0:
                raise AppValidationError(
                    message="Unit price cannot be negative",
                    code="INVALID_UNIT_PRICE"
                )
            if quantity <= 0 or (require_price and unit_price <= 0):
                continue
            cleaned.append(LineItemDTO(
                product_id=item.product_id,
                quantity=quantity,
                unit_price=unit_price,
                unit=item.unit,
            ))

        if not cleaned:
            raise AppValidationError(
                message="At least one line item with a product and quantity is required",
                code="ITEMS_REQUIRED"
            )
        return cleaned


class DocumentValidator:
    """Validates document headers"""

    @staticmethod
    def validate_document_no(document_no) -> str:
        cleaned = (document_no or "").strip()
        if not cleaned:
            raise AppValidationError(
                message="Document number is required",
                code="DOCUMENT_NO_REQUIRED"
            )
        return cleaned
