from __future__ import annotations

import pytest

from folio.typing.enums import BaseType, ErrorCode, IndexFormat


def test_base_type_from_str() -> None:
    assert BaseType.from_str("date") == BaseType.DATE


def test_base_type_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Expected one of: string, number, boolean, date"):
        BaseType.from_str("integer")


def test_index_format_to_str() -> None:
    assert IndexFormat.LIST.to_str() == "list"


def test_error_codes_serialize_as_names() -> None:
    assert ErrorCode.DUPLICATE_UNIQUE == "DuplicateUnique"
    assert ErrorCode.from_str("UnknownField") == ErrorCode.UNKNOWN_FIELD
