"""
Report validator.

Final safety net run after normalization. Walks the full contract and
reports every violation; ``validate_report`` narrows that to the names of
required fields that are absent or null.
"""

import math
from dataclasses import dataclass
from typing import Any

from backend.app.services.report_contract import (
    REPORT_CONTRACT,
    ArrayField,
    BoolField,
    EnumField,
    IntField,
    MapField,
    NumberField,
    ObjectField,
    Rule,
    StringField,
)


@dataclass(frozen=True)
class Violation:
    """One contract violation at a dotted path (array positions as ``[i]``)."""

    path: str
    reason: str

    @property
    def is_missing(self) -> bool:
        return self.reason == "missing"

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _check(rule: Rule, value: Any, path: str, out: list[Violation]) -> None:
    if isinstance(rule, ObjectField):
        if not isinstance(value, dict):
            out.append(Violation(path, "expected object"))
            return
        for name, child in rule.properties.items():
            child_path = _join(path, name)
            if value.get(name) is None:
                if not child.optional:
                    out.append(Violation(child_path, "missing"))
                continue
            _check(child, value[name], child_path, out)

    elif isinstance(rule, MapField):
        if not isinstance(value, dict):
            out.append(Violation(path, "expected object"))
            return
        for key, item in value.items():
            _check(rule.values, item, _join(path, str(key)), out)

    elif isinstance(rule, ArrayField):
        if not isinstance(value, list):
            out.append(Violation(path, "expected array"))
            return
        if rule.labels:
            if len(value) != len(rule.labels):
                out.append(Violation(path, f"expected exactly {len(rule.labels)} items, got {len(value)}"))
            for position, (item, label) in enumerate(zip(value, rule.labels)):
                if isinstance(item, dict) and rule.label_key and item.get(rule.label_key) != label:
                    out.append(Violation(f"{path}[{position}].{rule.label_key}", f"expected label {label!r}"))
        elif len(value) < rule.min_items:
            out.append(Violation(path, f"expected at least {rule.min_items} items, got {len(value)}"))
        for position, item in enumerate(value):
            _check(rule.items, item, f"{path}[{position}]", out)

    elif isinstance(rule, StringField):
        if not isinstance(value, str):
            out.append(Violation(path, "expected string"))
        elif len(value.strip()) < rule.min_length:
            out.append(Violation(path, "empty string"))

    elif isinstance(rule, EnumField):
        if value not in rule.values:
            out.append(Violation(path, f"expected one of {', '.join(rule.values)}"))

    elif isinstance(rule, (IntField, NumberField)):
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not is_number or not math.isfinite(value):
            out.append(Violation(path, "expected number"))
        elif isinstance(rule, IntField) and not isinstance(value, int):
            out.append(Violation(path, "expected integer"))
        elif value < rule.minimum or (rule.maximum is not None and value > rule.maximum):
            bound = f"[{rule.minimum}, {rule.maximum}]" if rule.maximum is not None else f">= {rule.minimum}"
            out.append(Violation(path, f"out of range {bound}"))

    elif isinstance(rule, BoolField):
        if not isinstance(value, bool):
            out.append(Violation(path, "expected boolean"))


def find_violations(obj: Any, contract: ObjectField = REPORT_CONTRACT) -> list[Violation]:
    """
    Check ``obj`` against every rule of ``contract``.

    Args:
        obj: Report dictionary (wire field names)
        contract: Root contract rule

    Returns:
        All violations found, in contract order
    """
    violations: list[Violation] = []
    _check(contract, obj, "", violations)
    return violations


def validate_report(obj: Any, contract: ObjectField = REPORT_CONTRACT) -> list[str]:
    """
    Names of required fields that are absent or null.

    Args:
        obj: Report dictionary (wire field names)
        contract: Root contract rule

    Returns:
        Dotted names of missing required fields (empty when complete)
    """
    if not isinstance(obj, dict):
        return list(contract.required)
    return [violation.path for violation in find_violations(obj, contract) if violation.is_missing]
