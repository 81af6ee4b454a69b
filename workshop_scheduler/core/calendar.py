# workshop_scheduler/core/calendar.py
"""Cálculo de dias úteis (segunda a sexta, sem feriados)."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import List, Union

SATURDAY = 5
SUNDAY = 6

# Quantos dias úteis à frente vai a janela padrão de consulta
NEXT_VALID_DAY_OFFSET = 5
LOOKAHEAD_WORKDAYS = 6

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Trunca datetime para date; date passa direto."""
    if isinstance(value, datetime):
        return value.date()
    return value


def is_weekend(day: DateLike) -> bool:
    return as_date(day).weekday() in (SATURDAY, SUNDAY)


def end_of_day(day: DateLike) -> datetime:
    return datetime.combine(as_date(day), time.max)


def start_of_day(day: DateLike) -> datetime:
    return datetime.combine(as_date(day), time.min)


def next_valid_day(today: DateLike, workdays: int = NEXT_VALID_DAY_OFFSET) -> date:
    """
    Retorna a data que fica exatamente `workdays` dias úteis depois de `today`.

    O próprio `today` nunca entra na contagem, mesmo sendo dia útil.
    Ex.: segunda 2024-01-01 -> segunda 2024-01-08.
    """
    if workdays < 1:
        raise ValueError("workdays deve ser positivo.")

    current = as_date(today)
    count = 0
    while count != workdays:
        current += timedelta(days=1)
        if not is_weekend(current):
            count += 1
    return current


def workday_window(today: DateLike, count: int) -> List[date]:
    """Os próximos `count` dias úteis estritamente depois de `today`, em ordem."""
    if count < 0:
        raise ValueError("count não pode ser negativo.")

    days = []
    current = as_date(today)
    while len(days) < count:
        current += timedelta(days=1)
        if not is_weekend(current):
            days.append(current)
    return days


def lookahead_days(today: DateLike, count: int = LOOKAHEAD_WORKDAYS) -> List[date]:
    """
    Janela de disponibilidade: `today` (se for dia útil) seguido dos próximos
    dias úteis até completar `count` dias.
    """
    start = as_date(today)
    if is_weekend(start):
        return workday_window(start, count)
    if count == 0:
        return []
    return [start] + workday_window(start, count - 1)
