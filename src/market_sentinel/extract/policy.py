"""Field-level defaulting rules applied to decoded records."""

import json
from dataclasses import dataclass, field

from market_sentinel.data import ImpactType, Severity


@dataclass(frozen=True)
class FieldPolicy:
    """Default value and, for enum fields, the accepted labels.

    Free-text fields (``choices is None``) keep any non-empty string verbatim;
    objects and arrays are rendered as JSON text.
    Enum fields accept a label after trimming and upper-casing it; anything
    else resolves to the default.
    """

    default: str
    choices: frozenset[str] | None = None

    def resolve(self, value: object) -> str:
        if value is None:
            return self.default
        if self.choices is None:
            if isinstance(value, str):
                text = value
            elif isinstance(value, (dict, list)):
                text = json.dumps(value, ensure_ascii=False)
            else:
                text = str(value)
            return text or self.default
        if not isinstance(value, str):
            return self.default
        label = value.strip().upper()
        return label if label in self.choices else self.default


def _text(default: str = "") -> FieldPolicy:
    return FieldPolicy(default=default)


def _enum(default: str, labels: list[str]) -> FieldPolicy:
    return FieldPolicy(default=default, choices=frozenset(labels))


@dataclass(frozen=True)
class DefaultPolicy:
    """Per-field defaults for event and stock records, plus the source cap."""

    fields: dict[str, FieldPolicy] = field(default_factory=dict)
    max_sources: int = 3

    def resolve(self, name: str, value: object) -> str:
        policy = self.fields.get(name)
        if policy is None:
            return _text().resolve(value)
        return policy.resolve(value)


def default_policy(
    *,
    region: str = "Global",
    severity: Severity = Severity.MEDIUM,
    impact: ImpactType = ImpactType.NEUTRAL,
    max_sources: int = 3,
) -> DefaultPolicy:
    """Build the standard defaulting policy."""
    return DefaultPolicy(
        fields={
            "title": _text(),
            "summary": _text(),
            "region": _text(region),
            "severity": _enum(severity.value, [s.value for s in Severity]),
            "symbol": _text(),
            "name": _text(),
            "impact": _enum(impact.value, [i.value for i in ImpactType]),
            "reasoning": _text(),
        },
        max_sources=max_sources,
    )
