"""Validation of submitted custom profile field values.

Each submitted value passes three gates in order: the field's reputation
requirement, the length limit, then a type check chosen by the field's
``FieldType``. The first failure raises. No storage access happens here.
"""

from typing import Any, Callable, Dict, Mapping, Sequence

from ....core.exceptions import (
    InsufficientReputationError,
    InvalidDateError,
    InvalidLinkError,
    InvalidNumberError,
    InvalidSelectValueError,
    InvalidTextError,
    ValueTooLongError,
)
from ....utils.text import is_calendar_date, is_number, is_url, parse_json_list, utf16_length
from ..entities.custom_field import CustomFieldDefinition, FieldType

MAX_VALUE_LENGTH = 255


def _check_number(definition: CustomFieldDefinition, value: Any) -> None:
    if not is_number(value):
        raise InvalidNumberError(definition.name)


def _check_text(definition: CustomFieldDefinition, value: Any) -> None:
    if value and is_url(str(value), require_protocol=True):
        raise InvalidTextError(definition.name)


def _check_date(definition: CustomFieldDefinition, value: Any) -> None:
    if value and not is_calendar_date(value):
        raise InvalidDateError(definition.name)


def _check_link(definition: CustomFieldDefinition, value: Any) -> None:
    if value and not is_url(str(value)):
        raise InvalidLinkError(definition.name)


def _check_select(definition: CustomFieldDefinition, value: Any) -> None:
    if value != "" and value not in definition.select_options:
        raise InvalidSelectValueError(definition.name)


def _check_select_multi(definition: CustomFieldDefinition, value: Any) -> None:
    values = parse_json_list(value)
    if values is None or not all(v in definition.select_options for v in values):
        raise InvalidSelectValueError(definition.name)


TYPE_CHECKS: Dict[FieldType, Callable[[CustomFieldDefinition, Any], None]] = {
    FieldType.INPUT_NUMBER: _check_number,
    FieldType.INPUT_TEXT: _check_text,
    FieldType.INPUT_DATE: _check_date,
    FieldType.INPUT_LINK: _check_link,
    FieldType.SELECT: _check_select,
    FieldType.SELECT_MULTI: _check_select_multi,
}

_missing = set(FieldType) - set(TYPE_CHECKS)
if _missing:
    raise RuntimeError(f"No value check for field types: {sorted(t.value for t in _missing)}")


def validate_field(
    definition: CustomFieldDefinition,
    value: Any,
    reputation: int,
    reputation_disabled: bool = False,
    max_length: int = MAX_VALUE_LENGTH,
) -> None:
    """Validate one submitted value; ``None`` means not submitted and always passes.

    Raises:
        InsufficientReputationError: ``reputation`` below the field's ``min_rep``
        ValueTooLongError: String longer than ``max_length`` UTF-16 code units
        ValidationError: The type-specific check failed
    """
    if value is None:
        return
    if definition.min_rep > 0 and reputation < definition.min_rep and not reputation_disabled:
        raise InsufficientReputationError(definition.min_rep, definition.name)
    if isinstance(value, str) and utf16_length(value) > max_length:
        raise ValueTooLongError(definition.name)
    TYPE_CHECKS[definition.type](definition, value)


def validate_custom_fields(
    definitions: Sequence[CustomFieldDefinition],
    submitted: Mapping[str, Any],
    reputation: int,
    reputation_disabled: bool = False,
    max_length: int = MAX_VALUE_LENGTH,
) -> None:
    """Validate every defined field present in ``submitted``, in definition order."""
    for definition in definitions:
        validate_field(
            definition, submitted.get(definition.key), reputation, reputation_disabled, max_length
        )
