# workshop_scheduler/core/capacity.py
"""Política de capacidade diária (unidades de trabalho por dia da semana)."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .calendar import DateLike, as_date, is_weekend

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

WEEKDAY_NAMES = {
    "monday": MONDAY,
    "tuesday": TUESDAY,
    "wednesday": WEDNESDAY,
    "thursday": THURSDAY,
    "friday": FRIDAY,
}

BASE_CAPACITY = 10
HIGH_CAPACITY = 13
HIGH_CAPACITY_WEEKDAYS = (THURSDAY, FRIDAY)


@dataclass(frozen=True)
class CapacityPolicy:
    """
    Limite de unidades de trabalho por dia.

    `overrides` mapeia weekday() -> limite; os demais dias úteis usam
    `base_capacity`. Fim de semana sempre tem capacidade zero.
    """

    base_capacity: int = BASE_CAPACITY
    overrides: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.base_capacity < 0:
            raise ValueError("base_capacity não pode ser negativa.")
        for weekday, limit in self.overrides.items():
            if weekday not in WEEKDAY_NAMES.values():
                raise ValueError(f"Dia da semana inválido na política: {weekday}")
            if limit < 0:
                raise ValueError("Limite de capacidade não pode ser negativo.")
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))

    def limit_for(self, day: DateLike) -> int:
        if is_weekend(day):
            return 0
        return self.overrides.get(as_date(day).weekday(), self.base_capacity)

    @classmethod
    def tiered(cls, base: int, high: int, high_weekdays: Iterable[int]) -> "CapacityPolicy":
        return cls(base_capacity=base, overrides={weekday: high for weekday in high_weekdays})

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CapacityPolicy":
        """Monta a política a partir das chaves WORKLOAD_* do app.config."""
        base = int(config.get("WORKLOAD_BASE_CAPACITY", BASE_CAPACITY))
        high = int(config.get("WORKLOAD_HIGH_CAPACITY", HIGH_CAPACITY))
        raw_days = config.get("WORKLOAD_HIGH_CAPACITY_WEEKDAYS", "thursday,friday")
        return cls.tiered(base, high, parse_weekdays(raw_days))


def parse_weekdays(raw: str) -> tuple:
    names = [part.strip().lower() for part in raw.split(",")]
    weekdays = []
    for name in names:
        if not name:
            continue
        if name not in WEEKDAY_NAMES:
            raise ValueError(f"Dia da semana inválido: {name!r}")
        weekdays.append(WEEKDAY_NAMES[name])
    return tuple(weekdays)


DEFAULT_POLICY = CapacityPolicy.tiered(BASE_CAPACITY, HIGH_CAPACITY, HIGH_CAPACITY_WEEKDAYS)
