"""
Audit schemas for stock documents.
"""
from audit.schema import EntitySchema, FieldKind, FieldSpec
from core.constants import EntityType

LINE_ITEM_FIELDS = (
    FieldSpec('product_id', FieldKind.INTEGER, 'Product'),
    FieldSpec('quantity', FieldKind.INTEGER, 'Quantity'),
    FieldSpec('unit_price', FieldKind.CURRENCY, 'Unit price'),
    FieldSpec('unit', FieldKind.TEXT, 'Unit', optional_text=True),
)


def line_items(document):
    return [
        {
            'product_id': line.product_id,
            'quantity': line.quantity,
            'unit_price': line.unit_price,
            'unit': line.unit,
        }
        for line in document.items.all()
    ]


def receipt_values(receipt):
    return {
        'document_no': receipt.document_no,
        'supplier_id': receipt.supplier_id,
        'received_at': receipt.received_at,
        'note': receipt.note,
        'items': line_items(receipt),
    }


def issue_values(issue):
    return {
        'document_no': issue.document_no,
        'department': issue.department,
        'requested_by': issue.requested_by,
        'issued_at': issue.issued_at,
        'note': issue.note,
        'items': line_items(issue),
    }


RECEIPT_SCHEMA = EntitySchema(
    EntityType.INK_RECEIPT,
    label='ink receipt',
    reader=receipt_values,
    fields=[
        FieldSpec('document_no', FieldKind.TEXT, 'Document no.'),
        FieldSpec('supplier_id', FieldKind.INTEGER, 'Supplier'),
        FieldSpec('received_at', FieldKind.DATE, 'Received on'),
        FieldSpec('note', FieldKind.TEXT, 'Note', optional_text=True),
        FieldSpec('items', FieldKind.LIST, 'Items', item_fields=LINE_ITEM_FIELDS),
    ],
)

ISSUE_SCHEMA = EntitySchema(
    EntityType.INK_ISSUE,
    label='ink issue',
    reader=issue_values,
    fields=[
        FieldSpec('document_no', FieldKind.TEXT, 'Document no.'),
        FieldSpec('department', FieldKind.TEXT, 'Department'),
        FieldSpec('requested_by', FieldKind.TEXT, 'Requested by', optional_text=True),
        FieldSpec('issued_at', FieldKind.DATE, 'Issued on'),
        FieldSpec('note', FieldKind.TEXT, 'Note', optional_text=True),
        FieldSpec('items', FieldKind.LIST, 'Items', item_fields=LINE_ITEM_FIELDS),
    ],
)
