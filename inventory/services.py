"""
Stock document services - Business logic for receipts (stock in) and issues (stock out).

Each mutation runs through MutationService so that the document change and
its stock reconciliation commit together and are then audited.
"""
from decimal import Decimal
from typing import List

from audit.drafts import Draft
from audit.mutations import MutationResult, MutationService
from audit.records import RecordService
from common.utils import get_app_setting
from core.constants import StockDirection
from core.dto import IssueDTO, LineItemDTO, ReceiptDTO
from core.exceptions import ValidationError
from core.validators import DocumentValidator, LineItemValidator
from .models import InkProduct, InkSupplier
from .reconciliation import StockLedger
from .repositories import IssueRepository, ReceiptRepository
from .schemas import ISSUE_SCHEMA, RECEIPT_SCHEMA


class StockDocumentService(RecordService):
    """
    Create / update / delete flow for stock documents.

    Overrides the plain-row mutations so that the lines and the stock they
    moved change together. Subclasses set the schema, repository, stock
    direction and header rules.
    """

    direction = None
    require_price = True

    def __init__(self, ledger: StockLedger = None, mutations: MutationService = None):
        super().__init__(mutations=mutations)
        self.ledger = ledger or StockLedger()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, data, actor, reason: str = None) -> MutationResult:
        """
        Create a document, insert its lines and move stock by +/- quantity.

        Raises:
            ValidationError: incomplete header or no usable line
            ReconciliationError: stock could not be updated (nothing kept)
            AuditWriteError: created, but not audited
        """
        items = self._clean_items(data.items)
        header = self.clean_header(data)
        after = self._draft(header, items)
        metadata = {}

        def mutate():
            document = self.repo.create(
                total_amount=self._total(items),
                created_by=actor,
                **header
            )
            self.repo.add_items(document, items)
            movements = self.ledger.apply_delta(items, self.direction)
            metadata['stock_movements'] = [m.as_dict() for m in movements]
            return document

        return self.mutations.submit_mutation(
            self.entity_type, None, None, after, reason, actor,
            mutate=mutate, metadata=metadata,
        )

    def update(self, record_id, data, actor, reason: str) -> MutationResult:
        """
        Replace header and lines: reverse old lines, store new lines, apply them.

        The old lines and the ``before`` draft are read after the document row
        is locked. If applying the new lines fails, the old quantities are
        restored before the error is raised.
        """
        document = self.get_record(record_id)
        items = self._clean_items(data.items)
        header = self.clean_header(data, instance=document)
        after = self._draft(header, items)
        metadata = {}
        state = {}

        def mutate():
            locked = self.repo.get_by_id_or_raise(document.pk, lock=True)
            state['before'] = self.build_draft(locked)
            old_items = self.repo.get_items(locked)
            movements = self.ledger.replace(
                old_items, items, self.direction,
                swap_items=lambda: self.repo.replace_items(locked, items),
            )
            metadata['stock_movements'] = [m.as_dict() for m in movements]
            return self.repo.update(locked, total_amount=self._total(items), **header)

        return self.mutations.submit_mutation(
            self.entity_type, document.pk, lambda: state['before'], after, reason, actor,
            mutate=mutate, metadata=metadata,
        )

    def delete(self, record_id, actor, reason: str) -> MutationResult:
        """Reverse the document's stock movement, then remove its lines and the document"""
        document = self.get_record(record_id)
        metadata = {}
        state = {}

        def mutate():
            locked = self.repo.get_by_id_or_raise(document.pk, lock=True)
            state['before'] = self.build_draft(locked)
            movements = self.ledger.apply_delta(self.repo.get_items(locked), -self.direction)
            metadata['stock_movements'] = [m.as_dict() for m in movements]
            self.repo.remove_items(locked)
            self.repo.delete(locked)

        return self.mutations.submit_mutation(
            self.entity_type, document.pk, lambda: state['before'], None, reason, actor,
            mutate=mutate, metadata=metadata,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def clean_header(self, data, instance=None) -> dict:
        raise NotImplementedError

    def _clean_items(self, items) -> List[LineItemDTO]:
        default_unit = get_app_setting('DEFAULT_UNIT')
        cleaned = LineItemValidator.clean_items(items, require_price=self.require_price)
        for item in cleaned:
            item.unit = (item.unit or '').strip() or default_unit

        product_ids = {item.product_id for item in cleaned}
        known = set(InkProduct.objects.filter(id__in=product_ids).values_list('id', flat=True))
        missing = sorted(str(pid) for pid in product_ids if pid not in known)
        if missing:
            raise ValidationError(
                message=f"Unknown product(s): {', '.join(missing)}",
                code="UNKNOWN_PRODUCT",
                details={'product_ids': missing}
            )
        return cleaned

    def _draft(self, header: dict, items: List[LineItemDTO]) -> Draft:
        values = dict(header)
        values['items'] = [
            {
                'product_id': item.product_id,
                'quantity': item.quantity,
                'unit_price': item.unit_price,
                'unit': item.unit,
            }
            for item in items
        ]
        return self.schema.build_draft(values)

    @staticmethod
    def _total(items: List[LineItemDTO]) -> Decimal:
        return sum((item.line_total for item in items), Decimal('0'))

    def _clean_document_no(self, document_no, instance=None) -> str:
        document_no = DocumentValidator.validate_document_no(document_no)
        duplicates = self.repo.get_all(document_no=document_no)
        if instance is not None:
            duplicates = duplicates.exclude(pk=instance.pk)
        if duplicates.exists():
            raise ValidationError(
                message=f"Document number {document_no} is already used",
                code="DUPLICATE_DOCUMENT_NO",
                details={'document_no': document_no}
            )
        return document_no


class ReceiptService(StockDocumentService):
    """Receipts add their quantities to stock"""

    schema = RECEIPT_SCHEMA
    repository_class = ReceiptRepository
    direction = StockDirection.IN
    require_price = True

    def clean_header(self, data: ReceiptDTO, instance=None) -> dict:
        supplier_id = self._require(data.supplier_id, 'supplier_id', 'Supplier')
        if not InkSupplier.objects.filter(pk=supplier_id).exists():
            raise ValidationError(
                message=f"Supplier {supplier_id} does not exist",
                code="UNKNOWN_SUPPLIER",
                details={'supplier_id': supplier_id}
            )
        return {
            'document_no': self._clean_document_no(data.document_no, instance),
            'supplier_id': supplier_id,
            'received_at': self._require(data.received_at, 'received_at', 'Received date'),
            'note': (data.note or '').strip() or None,
        }


class IssueService(StockDocumentService):
    """Issues take their quantities out of stock"""

    schema = ISSUE_SCHEMA
    repository_class = IssueRepository
    direction = StockDirection.OUT
    require_price = False

    def clean_header(self, data: IssueDTO, instance=None) -> dict:
        return {
            'document_no': self._clean_document_no(data.document_no, instance),
            'department': self._require(data.department, 'department', 'Department'),
            'requested_by': (data.requested_by or '').strip(),
            'issued_at': self._require(data.issued_at, 'issued_at', 'Issue date'),
            'note': (data.note or '').strip() or None,
        }
