"""Regras de negócio para agendamentos: capacidade diária por unidades de trabalho."""
from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from .calendar import (
    DateLike,
    as_date,
    end_of_day,
    is_weekend,
    lookahead_days,
    next_valid_day,
    start_of_day,
)
from .capacity import DEFAULT_POLICY, CapacityPolicy
from .errors import (
    DateNotInWindowError,
    InvalidDayError,
    ServiceNotFoundError,
    WorkloadExceededError,
)
from .locks import DayLockRegistry

logger = logging.getLogger(__name__)


class ScheduleRepository(Protocol):
    """Colaborador de persistência usado pelo ScheduleService."""

    def select_period(self, workshop_id: int, start: datetime, end: datetime) -> List[Any]:
        ...

    def select_services(self) -> List[Any]:
        ...

    def insert(self, workshop_id: int, service_id: int, when: datetime) -> Any:
        ...

    def delete(self, workshop_id: int, schedule_id: int) -> bool:
        ...

    def lock_day(self, workshop_id: int, day: date) -> AbstractContextManager:
        ...


@dataclass(frozen=True)
class ScheduleView:
    id: int
    workshop_id: int
    service_id: int
    service_name: str
    date: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "workshop_id": self.workshop_id,
            "service_id": self.service_id,
            "service_name": self.service_name,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class AvailableWorkload:
    date: date
    available_workload: int

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "available_workload": self.available_workload}


class ScheduleService:
    """
    Aloca agendamentos respeitando a capacidade diária da oficina.

    Todas as operações recebem o `workshop_id` explicitamente; quem resolve
    a oficina do usuário logado é a camada HTTP.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        policy: CapacityPolicy = DEFAULT_POLICY,
        locks: Optional[DayLockRegistry] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.policy = policy
        self.locks = locks if locks is not None else DayLockRegistry()
        self.clock = clock

    def today(self) -> date:
        return as_date(self.clock())

    # --- Consultas ---

    def get_today(self, workshop_id: int) -> List[ScheduleView]:
        today = self.today()
        schedules = self.repository.select_period(workshop_id, start_of_day(today), end_of_day(today))
        return self._map_schedules(schedules)

    def get_period(
        self,
        workshop_id: int,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> List[ScheduleView]:
        """
        Sem datas: de hoje até o fim do dia útil que fica 5 dias úteis à frente.
        Com datas: de `start` até o fim do dia `end`, inclusive.
        """
        if (start is None) != (end is None):
            raise ValueError("Informe start e end juntos, ou nenhum dos dois.")

        if start is None:
            today = self.today()
            range_start, range_end = start_of_day(today), end_of_day(next_valid_day(today))
        else:
            if as_date(start) > as_date(end):
                raise ValueError("A data inicial não pode ser posterior à data final.")
            range_start = start if isinstance(start, datetime) else start_of_day(start)
            range_end = end_of_day(end)

        schedules = self.repository.select_period(workshop_id, range_start, range_end)
        views = self._map_schedules(schedules)
        return sorted(views, key=lambda view: view.date)

    def get_available_workload(self, workshop_id: int) -> List[AvailableWorkload]:
        today = self.today()
        remaining = {day: self.policy.limit_for(day) for day in lookahead_days(today)}
        services = self._services_by_id()

        # O intervalo cobre a janela inteira; em fim de semana ela vai além do next_valid_day
        schedules = self.repository.select_period(
            workshop_id, start_of_day(today), end_of_day(max(remaining))
        )
        for schedule in schedules:
            day = as_date(schedule.date)
            if day not in remaining:
                if is_weekend(day):
                    logger.warning(
                        "Agendamento %s em fim de semana (%s) ignorado no cálculo de disponibilidade.",
                        schedule.id, day.isoformat(),
                    )
                    continue
                raise DateNotInWindowError(day)
            remaining[day] -= self._units_for(services, schedule.service_id)

        return [AvailableWorkload(day, remaining[day]) for day in sorted(remaining)]

    # --- Criação e remoção ---

    def validate_to_create(self, workshop_id: int, proposed_date: DateLike, service_id: int) -> int:
        """Valida o novo agendamento e retorna a carga total do dia com ele incluído."""
        day = as_date(proposed_date)
        if is_weekend(day):
            raise InvalidDayError(day)

        schedules_today = self.repository.select_period(workshop_id, start_of_day(day), end_of_day(day))
        services = self._services_by_id()
        service_units = self._units_for(services, service_id)
        work_load = sum(self._units_for(services, s.service_id) for s in schedules_today) + service_units

        limit = self.policy.limit_for(day)
        if work_load > limit:
            logger.warning(
                "Agendamento recusado para oficina %s em %s: carga %s > limite %s",
                workshop_id, day.isoformat(), work_load, limit,
            )
            raise WorkloadExceededError(day, work_load, limit)
        return work_load

    def create(self, workshop_id: int, proposed_date: DateLike, service_id: int) -> Any:
        day = as_date(proposed_date)
        if not isinstance(proposed_date, datetime):
            proposed_date = start_of_day(day)
        with self.locks.hold(workshop_id, day):
            with self.repository.lock_day(workshop_id, day):
                work_load = self.validate_to_create(workshop_id, proposed_date, service_id)
                schedule = self.repository.insert(workshop_id, service_id, proposed_date)

        logger.info(
            "Agendamento %s criado: oficina %s, serviço %s, %s (carga do dia %s)",
            schedule.id, workshop_id, service_id, day.isoformat(), work_load,
        )
        return schedule

    def remove(self, workshop_id: int, schedule_id: int) -> bool:
        removed = self.repository.delete(workshop_id, schedule_id)
        if removed:
            logger.info("Agendamento %s removido da oficina %s", schedule_id, workshop_id)
        return removed

    # --- Auxiliares ---

    def _services_by_id(self) -> Dict[int, Any]:
        return {service.id: service for service in self.repository.select_services()}

    @staticmethod
    def _units_for(services: Dict[int, Any], service_id: int) -> int:
        service = services.get(service_id)
        if service is None:
            raise ServiceNotFoundError(service_id)
        return service.work_units

    def _map_schedules(self, schedules: Iterable[Any]) -> List[ScheduleView]:
        services = self._services_by_id()
        views = []
        for schedule in schedules:
            service = services.get(schedule.service_id)
            if service is None:
                raise ServiceNotFoundError(schedule.service_id)
            views.append(
                ScheduleView(
                    id=schedule.id,
                    workshop_id=schedule.workshop_id,
                    service_id=schedule.service_id,
                    service_name=service.name,
                    date=schedule.date,
                )
            )
        return views
