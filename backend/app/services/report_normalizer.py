"""
Report normalizer.

Turns an arbitrary parsed generator output into a complete, typed report
artifact. Normalization is total (any input, including ``None``, produces a
valid artifact) and idempotent (normalizing its own output changes nothing).

Passes:
    1. Structural repair driven by the report contract: placeholders for
       missing values, field-by-field repair of array items, enum coercion,
       numeric clamping, fixed-label arrays and padding to minimum cardinality.
    2. Content density enforcement for narrative text and bullet lists.
    3. Contextual defaults that depend on other repaired fields.

Repair is field-local: values that already satisfy their rule are returned
untouched, so valid generator output always survives.
"""

import copy
import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel

from backend.app.schemas.report import ReportArtifact, TabsReportArtifact
from backend.app.services import report_density
from backend.app.services.report_contract import (
    REPORT_CONTRACT,
    TABS_REPORT_CONTRACT,
    ArrayField,
    BoolField,
    DeriveContext,
    EnumField,
    IntField,
    MapField,
    NumberField,
    ObjectField,
    Rule,
    StringField,
)

logger = logging.getLogger(__name__)

DensityPass = Callable[[dict[str, Any]], dict[str, Any]]

_MISSING = object()


@dataclass
class _Deferred:
    container: dict[str, Any]
    key: str
    rule: Rule
    ancestors: tuple[dict[str, Any], ...]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float | None:
    """Numeric value of ``value``, accepting numeric strings; ``None`` if not a finite number."""
    if _is_number(value):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _clamp(number: float, minimum: float, maximum: float | None) -> float:
    number = max(minimum, number)
    if maximum is not None:
        number = min(maximum, number)
    return number


class ReportNormalizer:
    """
    Contract-driven repairer producing a typed artifact.

    Args:
        contract: Root object rule to enforce
        artifact_model: Pydantic model the repaired dictionary is validated into
        density: Optional density pass applied after structural repair
        generated_at: Timestamp used for narrative metadata (defaults to now)
    """

    def __init__(
        self,
        contract: ObjectField,
        artifact_model: type[BaseModel],
        density: DensityPass | None = None,
        generated_at: str | None = None,
    ):
        self.contract = contract
        self.artifact_model = artifact_model
        self.density = density
        self.generated_at = generated_at
        self._deferred: list[_Deferred] = []
        self._repairs = 0

    def repair(self, raw: Any) -> dict[str, Any]:
        """
        Repair ``raw`` into a dictionary satisfying the contract.

        Args:
            raw: Parsed generator output (any value)

        Returns:
            Repaired report dictionary (the input is not mutated)
        """
        self._deferred = []
        self._repairs = 0
        source = copy.deepcopy(raw) if isinstance(raw, dict) else {}

        report: dict[str, Any] = {}
        self._repair_object_into(report, self.contract, source, ())

        if self.density is not None:
            self.density(report)

        generated_at = self.generated_at or datetime.now(timezone.utc).isoformat()
        while self._deferred:
            deferred = self._deferred.pop(0)
            ctx = DeriveContext(report=report, ancestors=deferred.ancestors, generated_at=generated_at)
            rule = replace(deferred.rule, derive=None)
            value = self._repair(rule, deferred.rule.derive(ctx), deferred.ancestors, None)
            deferred.container[deferred.key] = value

        if self._repairs:
            logger.info(f"[NORMALIZE] Repaired {self._repairs} field(s)")
        return report

    def normalize(self, raw: Any) -> BaseModel:
        """Repair ``raw`` and validate it into the typed artifact model."""
        return self.artifact_model.model_validate(self.repair(raw))

    # ------------------------------------------------------------------
    # Structural pass
    # ------------------------------------------------------------------

    def _repair_object_into(
        self,
        target: dict[str, Any],
        rule: ObjectField,
        source: dict[str, Any],
        ancestors: tuple[dict[str, Any], ...],
        index: int | None = None,
    ) -> None:
        inner = ancestors + (target,)
        for name, child in rule.properties.items():
            value = source.get(name, _MISSING)
            if value is _MISSING or value is None:
                if child.derive is not None:
                    target[name] = None
                    self._deferred.append(_Deferred(target, name, child, inner))
                    self._repairs += 1
                    continue
                if not child.fill:
                    continue
            repaired = self._repair(child, None if value is _MISSING else value, inner, index)
            if repaired is _MISSING:
                target[name] = None
                self._deferred.append(_Deferred(target, name, child, inner))
            else:
                target[name] = repaired

    def _repair(
        self,
        rule: Rule,
        value: Any,
        ancestors: tuple[dict[str, Any], ...],
        index: int | None,
    ) -> Any:
        """Repair one value; returns ``_MISSING`` when the value must be derived."""
        if isinstance(rule, ObjectField):
            if not isinstance(value, dict):
                if rule.derive is not None:
                    return self._defer_marker()
                self._count(value)
                value = {}
            target: dict[str, Any] = {}
            self._repair_object_into(target, rule, value, ancestors, index)
            return target

        if isinstance(rule, ArrayField):
            return self._repair_array(rule, value, ancestors)

        if isinstance(rule, MapField):
            if not isinstance(value, dict):
                if rule.derive is not None:
                    return self._defer_marker()
                self._count(value)
                return {}
            return {str(key): self._repair(rule.values, item, ancestors, None) for key, item in value.items()}

        if isinstance(rule, StringField):
            if isinstance(value, str) and len(value.strip()) >= rule.min_length:
                return value
            if _is_number(value):
                self._repairs += 1
                return str(value)
            if rule.derive is not None:
                return self._defer_marker()
            self._count(value)
            return rule.placeholder.format(n=index) if index is not None else rule.placeholder

        if isinstance(rule, EnumField):
            if value in rule.values:
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                for candidate in rule.values:
                    if candidate.lower() == lowered:
                        self._repairs += 1
                        return candidate
            if rule.derive is not None:
                return self._defer_marker()
            self._count(value)
            return rule.default

        if isinstance(rule, (IntField, NumberField)):
            number = _to_number(value)
            if number is None:
                if rule.derive is not None:
                    return self._defer_marker()
                self._count(value)
                return rule.default if isinstance(rule, IntField) else float(rule.default)
            number = _clamp(number, rule.minimum, rule.maximum)
            result: int | float = int(round(number)) if isinstance(rule, IntField) else float(number)
            if result != value or type(result) is not type(value):
                self._repairs += 1
            return result

        if isinstance(rule, BoolField):
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in ("true", "false"):
                self._repairs += 1
                return value.strip().lower() == "true"
            self._count(value)
            return rule.default

        raise TypeError(f"Unknown contract rule: {rule!r}")

    def _repair_array(
        self,
        rule: ArrayField,
        value: Any,
        ancestors: tuple[dict[str, Any], ...],
    ) -> Any:
        if rule.labels:
            if not isinstance(value, list) or len(value) != len(rule.labels):
                if value is not None:
                    logger.debug(
                        f"[NORMALIZE] Replacing labelled array of length "
                        f"{len(value) if isinstance(value, list) else 'n/a'} with {len(rule.labels)} defaults"
                    )
                self._repairs += 1
                value = [{} for _ in rule.labels]
            items = []
            for position, (item, label) in enumerate(zip(value, rule.labels), start=1):
                repaired = self._repair(rule.items, item, ancestors, position)
                if rule.label_key and isinstance(repaired, dict):
                    if repaired.get(rule.label_key) != label:
                        self._repairs += 1
                    repaired[rule.label_key] = label
                items.append(repaired)
            return items

        if not isinstance(value, list):
            if rule.derive is not None:
                return self._defer_marker()
            self._count(value)
            value = copy.deepcopy(list(rule.default))

        items = [self._repair(rule.items, item, ancestors, position) for position, item in enumerate(value, start=1)]

        templates = list(rule.padding)
        if rule.identity_key:
            present = {
                str(item.get(rule.identity_key)).strip().lower() for item in items if isinstance(item, dict)
            }
            templates = [t for t in templates if str(t.get(rule.identity_key)).lower() not in present]

        while len(items) < rule.min_items:
            self._repairs += 1
            template = copy.deepcopy(templates.pop(0)) if templates else None
            items.append(self._repair(rule.items, template, ancestors, len(items) + 1))
        return items

    def _defer_marker(self) -> Any:
        self._repairs += 1
        return _MISSING

    def _count(self, value: Any) -> None:
        self._repairs += 1
        if value is not None and value is not _MISSING:
            logger.debug(f"[NORMALIZE] Discarding invalid value of type {type(value).__name__}")


def normalize_report(raw: Any, generated_at: str | None = None) -> ReportArtifact:
    """
    Normalize parsed generator output into a complete full report.

    Args:
        raw: Parsed generator output (any value, including ``None``)
        generated_at: Optional timestamp for synthesised narrative metadata

    Returns:
        Complete typed report artifact
    """
    normalizer = ReportNormalizer(
        REPORT_CONTRACT,
        ReportArtifact,
        density=report_density.enforce_density,
        generated_at=generated_at,
    )
    return normalizer.normalize(raw)


def normalize_tabs_report(raw: Any, generated_at: str | None = None) -> TabsReportArtifact:
    """Normalize parsed generator output into a complete three-tab report."""
    normalizer = ReportNormalizer(TABS_REPORT_CONTRACT, TabsReportArtifact, generated_at=generated_at)
    return normalizer.normalize(raw)
