"""
Inventory repositories - Data access layer for stock rows and stock documents.
"""
from typing import List
from django.db.models import F, QuerySet
from core.dto import LineItemDTO
from core.exceptions import NotFoundError
from core.repositories import BaseRepository
from .models import InkProduct, InkReceipt, InkReceiptItem, InkIssue, InkIssueItem


class StockRepository(BaseRepository[InkProduct]):
    """Repository for the stock counter on InkProduct"""

    def __init__(self):
        super().__init__(InkProduct)

    def get_quantity(self, product_id: int) -> int:
        quantity = self.get_all(id=product_id).values_list('stock_quantity', flat=True).first()
        if quantity is None:
            raise NotFoundError(resource_type="InkProduct", resource_id=product_id)
        return quantity

    def increment(self, product_id: int, delta: int) -> int:
        """
        Atomically add ``delta`` to the stock counter and bump its version.

        The addition runs in the database (UPDATE ... SET x = x + delta), so
        concurrent movements on the same product cannot overwrite each other.

        Returns:
            The stock quantity after the update
        """
        updated = self.get_all(id=product_id).update(
            stock_quantity=F('stock_quantity') + delta,
            version=F('version') + 1,
        )
        if updated == 0:
            raise NotFoundError(resource_type="InkProduct", resource_id=product_id)
        return self.get_quantity(product_id)

    def below_reorder_point(self) -> QuerySet[InkProduct]:
        return self.get_all(stock_quantity__lte=F('reorder_point'))

    def negative_stock(self) -> QuerySet[InkProduct]:
        return self.get_all(stock_quantity__lt=0)


class StockDocumentRepository(BaseRepository):
    """Shared line-item handling for receipts and issues"""

    item_model = None
    parent_field = None

    def get_items(self, document) -> List:
        return list(document.items.select_related('product').order_by('id'))

    def add_items(self, document, items: List[LineItemDTO]) -> List:
        created = []
        for item in items:
            line = self.item_model(
                product_id=item.product_id,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.unit_price,
                **{self.parent_field: document}
            )
            line.save()
            created.append(line)
        return created

    def remove_items(self, document) -> int:
        deleted, _ = self.item_model.objects.filter(**{self.parent_field: document}).delete()
        return deleted

    def replace_items(self, document, items: List[LineItemDTO]) -> List:
        self.remove_items(document)
        return self.add_items(document, items)


class ReceiptRepository(StockDocumentRepository):
    """Repository for InkReceipt"""

    item_model = InkReceiptItem
    parent_field = 'receipt'

    def __init__(self):
        super().__init__(InkReceipt)


class IssueRepository(StockDocumentRepository):
    """Repository for InkIssue"""

    item_model = InkIssueItem
    parent_field = 'issue'

    def __init__(self):
        super().__init__(InkIssue)
