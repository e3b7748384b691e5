"""
Declared per-entity field schemas.

Each audited entity type declares an ordered list of FieldSpec entries. The
order drives draft construction, diff emission order and whole-record
serialization. Each field kind has one normalizer (form/db value -> draft
value), one comparer (draft value -> canonical string) and one formatter
(stored string -> display text).
"""
import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Optional, Tuple

from django.utils.dateparse import parse_date, parse_datetime

from core.exceptions import ValidationError
from .drafts import Draft, serialize_value, deserialize_value


class FieldKind:
    TEXT = 'text'
    DATE = 'date'
    INTEGER = 'integer'
    DECIMAL = 'decimal'
    CURRENCY = 'currency'
    BOOLEAN = 'boolean'
    ENUM = 'enum'
    LIST = 'list'


EMPTY_DISPLAY = "-"
DISPLAY_DATE_FORMAT = "%d %b %Y"


# ----------------------------------------------------------------------------
# Normalizers: raw input -> canonical draft value
# ----------------------------------------------------------------------------

def _normalize_text(spec, value):
    if value is None:
        return None
    text = str(value).strip()
    if text == "" and spec.optional_text:
        return None
    return text


def _normalize_date(spec, value):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    parsed = parse_date(text)
    if parsed is None:
        parsed_dt = parse_datetime(text)
        parsed = parsed_dt.date() if parsed_dt else None
    if parsed is None:
        raise ValidationError(
            message=f"{spec.label} must be a date (YYYY-MM-DD), got {value!r}",
            code="INVALID_DATE",
            details={"field": spec.name}
        )
    return parsed.isoformat()


def _normalize_integer(spec, value):
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return int(value)
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        number = None
    if number is None or number != number.to_integral_value():
        raise ValidationError(
            message=f"{spec.label} must be a whole number, got {value!r}",
            code="INVALID_NUMBER",
            details={"field": spec.name}
        )
    return int(number)


def _decimal_text(number: Decimal) -> str:
    normalized = number.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal(1)))
    return format(normalized, 'f')


def _normalize_decimal(spec, value):
    if value is None or value == "":
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(
            message=f"{spec.label} must be a number, got {value!r}",
            code="INVALID_NUMBER",
            details={"field": spec.name}
        )
    if not number.is_finite():
        raise ValidationError(
            message=f"{spec.label} must be a finite number",
            code="INVALID_NUMBER",
            details={"field": spec.name}
        )
    return _decimal_text(number)


def _normalize_boolean(spec, value):
    if value is None or value == "":
        return bool(spec.default) if spec.default is not None else False
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _normalize_enum(spec, value):
    if value is None or value == "":
        return None
    return str(value).strip()


def _normalize_list(spec, value):
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        try:
            value = deserialize_value(value)
        except ValueError:
            raise ValidationError(
                message=f"{spec.label} must be a list",
                code="INVALID_LIST",
                details={"field": spec.name}
            )
    projected = []
    for element in value:
        if isinstance(element, (str, int, Decimal)) and spec.item_fields:
            element = {spec.item_fields[0].name: element}
        projected.append({
            item_spec.name: item_spec.normalize(_element_get(element, item_spec.name))
            for item_spec in spec.item_fields
        })
    projected.sort(key=lambda item: _sort_token(item, spec.sort_key))
    return tuple(projected)


def _element_get(element, name):
    if isinstance(element, dict):
        return element.get(name)
    return getattr(element, name, None)


def _sort_token(item: dict, keys: Tuple[str, ...]):
    token = []
    for key in keys:
        value = item.get(key)
        if value is None:
            token.append((2, Decimal(0), ""))
            continue
        try:
            token.append((0, Decimal(str(value)), ""))
        except InvalidOperation:
            token.append((1, Decimal(0), str(value)))
    return tuple(token)


NORMALIZERS: Dict[str, Callable] = {
    FieldKind.TEXT: _normalize_text,
    FieldKind.DATE: _normalize_date,
    FieldKind.INTEGER: _normalize_integer,
    FieldKind.DECIMAL: _normalize_decimal,
    FieldKind.CURRENCY: _normalize_decimal,
    FieldKind.BOOLEAN: _normalize_boolean,
    FieldKind.ENUM: _normalize_enum,
    FieldKind.LIST: _normalize_list,
}


# ----------------------------------------------------------------------------
# Comparers: draft value -> canonical string (None stays None)
# ----------------------------------------------------------------------------

def _compare_scalar(spec, value):
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return _decimal_text(Decimal(str(value)))
    text = str(value)
    if text == "" and spec.optional_text:
        return None
    if spec.kind in (FieldKind.INTEGER, FieldKind.DECIMAL, FieldKind.CURRENCY):
        try:
            return _decimal_text(Decimal(text.strip()))
        except InvalidOperation:
            return text
    return text


def _compare_boolean(spec, value):
    return "true" if _normalize_boolean(spec, value) else "false"


def _compare_list(spec, value):
    return serialize_value([dict(element) for element in _normalize_list(spec, value)])


COMPARERS: Dict[str, Callable] = {
    FieldKind.TEXT: _compare_scalar,
    FieldKind.DATE: _compare_scalar,
    FieldKind.INTEGER: _compare_scalar,
    FieldKind.DECIMAL: _compare_scalar,
    FieldKind.CURRENCY: _compare_scalar,
    FieldKind.BOOLEAN: _compare_boolean,
    FieldKind.ENUM: _compare_scalar,
    FieldKind.LIST: _compare_list,
}


# ----------------------------------------------------------------------------
# Formatters: stored audit text -> display text. Must never raise.
# ----------------------------------------------------------------------------

def _format_text(spec, raw):
    return raw


def _format_date(spec, raw):
    parsed = parse_datetime(raw) if 'T' in raw or ' ' in raw.strip() else None
    if parsed is None:
        parsed = parse_date(raw)
    if parsed is None:
        return raw
    return parsed.strftime(DISPLAY_DATE_FORMAT)


def _format_currency(spec, raw):
    return f"{Decimal(raw):,.2f}"


def _format_choice(spec, raw):
    return dict(spec.choices).get(raw, raw)


def _format_boolean(spec, raw):
    labels = dict(spec.choices) if spec.choices else {'true': 'Yes', 'false': 'No'}
    return labels.get(raw.strip().lower(), raw)


def _format_list(spec, raw):
    elements = deserialize_value(raw)
    if not isinstance(elements, list):
        return raw
    if not elements:
        return EMPTY_DISPLAY
    lines = []
    for element in elements:
        if isinstance(element, dict):
            parts = []
            for item_spec in spec.item_fields:
                if item_spec.name in element:
                    value = element[item_spec.name]
                    shown = item_spec.format(None if value is None else _stringify(value))
                    parts.append(f"{item_spec.label}: {shown}")
            lines.append(", ".join(parts) if parts else json.dumps(element, ensure_ascii=False))
        else:
            lines.append(str(element))
    return "\n".join(lines)


def _stringify(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


FORMATTERS: Dict[str, Callable] = {
    FieldKind.TEXT: _format_text,
    FieldKind.DATE: _format_date,
    FieldKind.INTEGER: _format_choice,
    FieldKind.DECIMAL: _format_text,
    FieldKind.CURRENCY: _format_currency,
    FieldKind.BOOLEAN: _format_boolean,
    FieldKind.ENUM: _format_choice,
    FieldKind.LIST: _format_list,
}


def format_snapshot(raw: Optional[str]) -> str:
    """Pretty-print a serialized whole-record snapshot; falls back to the raw text"""
    if raw is None or raw == "":
        return EMPTY_DISPLAY
    try:
        return json.dumps(deserialize_value(raw), indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return raw


# ----------------------------------------------------------------------------
# Schema declarations
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldSpec:
    """
    One declared field of an audited entity.

    ``optional_text`` marks text fields where an empty string means "no value".
    ``choices`` maps canonical strings to display labels (enums, flags).
    ``item_fields``/``sort_key`` describe the projection of list elements.
    """
    name: str
    kind: str
    label: str = ""
    optional_text: bool = False
    choices: Tuple[Tuple[str, str], ...] = ()
    item_fields: Tuple['FieldSpec', ...] = ()
    sort_key: Tuple[str, ...] = ()
    default: object = None

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, 'label', self.name.replace('_', ' ').capitalize())
        if self.kind == FieldKind.LIST and not self.sort_key:
            object.__setattr__(self, 'sort_key', tuple(f.name for f in self.item_fields))

    def normalize(self, value):
        return NORMALIZERS[self.kind](self, value)

    def canonical(self, value) -> Optional[str]:
        return COMPARERS[self.kind](self, value)

    def format(self, raw: Optional[str]) -> str:
        if raw is None or raw == "":
            return EMPTY_DISPLAY
        try:
            return FORMATTERS[self.kind](self, raw)
        except (ArithmeticError, TypeError, ValueError, AttributeError):
            return raw


class EntitySchema:
    """
    Ordered field declaration for one audited table.

    ``reader`` extracts raw field values from a persisted instance, so the same
    schema builds drafts from database rows and from submitted form data.
    """

    def __init__(self, entity_type: str, fields, label: str = "", reader: Callable = None):
        self.entity_type = entity_type
        self.label = label or entity_type
        self.fields = tuple(fields)
        self.reader = reader
        self._by_name = {spec.name: spec for spec in self.fields}
        if len(self._by_name) != len(self.fields):
            raise ValueError(f"Duplicate field names in schema {entity_type}")

    def __repr__(self):
        return f"EntitySchema({self.entity_type!r}, fields={[f.name for f in self.fields]})"

    def field(self, name: str) -> Optional[FieldSpec]:
        return self._by_name.get(name)

    def build_draft(self, values) -> Draft:
        """Draft from a mapping of raw values; missing fields take their defaults"""
        values = values or {}
        return Draft(self.entity_type, [
            (spec.name, spec.normalize(values.get(spec.name, spec.default)))
            for spec in self.fields
        ])

    def draft_from_instance(self, instance) -> Draft:
        if self.reader is None:
            raise ValueError(f"Schema {self.entity_type} has no instance reader")
        return self.build_draft(self.reader(instance))
