"""
core/validation.py -- Explicit, write-time schema validation for documents.

Every document written to MongoDB passes through a SchemaValidator first.
Validation never raises on bad input: it collects FieldViolation entries in a
ValidationResult alongside the normalized document (trimmed, lowercased,
defaults applied, unknown fields dropped). Stores decide what to do with a
failed result -- they raise DocumentValidationError before any write.

Usage:
    v = SchemaValidator(data)
    v.string("name", required=True, trim=True, min_length=1)
    v.number("price", required=True, minimum=0)
    result = v.result()
    if not result.ok:
        raise DocumentValidationError(result.violations)

Partial mode (partial=True) mirrors update semantics: only fields present in
the input are checked, and required-ness is enforced only on the fields the
caller is trying to change (you may not set a required field to null).

Layer rule: core/ is the kernel. No imports from api/, auth/, or catalog/.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FieldViolation:
    """One rule broken by one field."""

    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating one document.

    value holds the normalized document containing only declared fields.
    It is only meaningful when ok is True.
    """

    value: dict[str, Any] = field(default_factory=dict)
    violations: list[FieldViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def summary(self) -> str:
        return "; ".join(f"{v.field}: {v.message}" for v in self.violations)


class DocumentValidationError(ValueError):
    """Raised by stores when a document fails validation at write time."""

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = violations
        super().__init__("Validation failed: " + "; ".join(f"{v.field}: {v.message}" for v in violations))


_MISSING = object()

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class SchemaValidator:
    """Collects normalized values and violations field by field."""

    def __init__(self, data: Mapping[str, Any], partial: bool = False) -> None:
        self._data = data
        self._partial = partial
        self._result = ValidationResult()

    def result(self) -> ValidationResult:
        return self._result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fail(self, name: str, message: str) -> None:
        self._result.violations.append(FieldViolation(name, message))

    def _take(self, name: str, required: bool, default: Any) -> Any:
        """Return the raw value, _MISSING when the field should be skipped.

        A default is applied only on full (insert) validation. Null is treated
        like absence for required-ness.
        """
        raw = self._data.get(name, _MISSING)
        if raw is _MISSING:
            if self._partial:
                return _MISSING
            if default is not None:
                return default
        if raw is _MISSING or raw is None:
            if required:
                self._fail(name, "is required")
            elif raw is None:
                self._result.value[name] = None
            return _MISSING
        return raw

    # ------------------------------------------------------------------
    # Field rules
    # ------------------------------------------------------------------

    def string(
        self,
        name: str,
        *,
        required: bool = False,
        trim: bool = False,
        lowercase: bool = False,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | None = None,
        choices: tuple[str, ...] | None = None,
        default: str | None = None,
    ) -> None:
        raw = self._take(name, required, default)
        if raw is _MISSING:
            return
        if not isinstance(raw, str):
            self._fail(name, "must be a string")
            return
        value = raw.strip() if trim else raw
        if lowercase:
            value = value.lower()
        if required and not value:
            self._fail(name, "is required")
            return
        if min_length is not None and len(value) < min_length:
            self._fail(name, f"must be at least {min_length} characters")
            return
        if max_length is not None and len(value) > max_length:
            self._fail(name, f"must be at most {max_length} characters")
            return
        if pattern is not None and not re.match(pattern, value):
            self._fail(name, "has an invalid format")
            return
        if choices is not None and value not in choices:
            self._fail(name, f"must be one of {', '.join(choices)}")
            return
        self._result.value[name] = value

    def string_list(
        self,
        name: str,
        *,
        trim: bool = False,
        max_item_length: int | None = None,
        max_items: int | None = None,
        max_items_message: str | None = None,
    ) -> None:
        """A list of strings. Missing lists default to [] on insert."""
        raw = self._take(name, False, [])
        if raw is _MISSING:
            return
        if not isinstance(raw, list):
            self._fail(name, "must be a list of strings")
            return
        items: list[str] = []
        for index, item in enumerate(raw):
            if not isinstance(item, str):
                self._fail(f"{name}.{index}", "must be a string")
                return
            item = item.strip() if trim else item
            if max_item_length is not None and len(item) > max_item_length:
                self._fail(f"{name}.{index}", f"must be at most {max_item_length} characters")
                return
            items.append(item)
        if max_items is not None and len(items) > max_items:
            self._fail(name, max_items_message or f"must contain at most {max_items} items")
            return
        self._result.value[name] = items

    def number(
        self,
        name: str,
        *,
        required: bool = False,
        minimum: float | None = None,
        integer: bool = False,
        default: float | None = None,
    ) -> None:
        raw = self._take(name, required, default)
        if raw is _MISSING:
            return
        # bool is an int subclass; True is not a price.
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            self._fail(name, "must be a number")
            return
        if isinstance(raw, float) and not math.isfinite(raw):
            self._fail(name, "must be a number")
            return
        if integer and isinstance(raw, float):
            if not raw.is_integer():
                self._fail(name, "must be an integer")
                return
            raw = int(raw)
        # BSON stores ints in at most 8 bytes.
        if isinstance(raw, int) and not _INT64_MIN <= raw <= _INT64_MAX:
            self._fail(name, "is out of range")
            return
        if minimum is not None and raw < minimum:
            self._fail(name, f"must be greater than or equal to {minimum:g}")
            return
        self._result.value[name] = raw
