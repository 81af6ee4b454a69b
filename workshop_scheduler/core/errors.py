# workshop_scheduler/core/errors.py
"""Erros de regra de negócio do agendamento.

Cada erro carrega o status HTTP e um código curto, para que a camada de
rotas consiga responder sem conhecer os detalhes de cada validação.
"""
from __future__ import annotations

from datetime import date


class SchedulingError(Exception):
    http_status: int = 400
    code: str = "scheduling_error"


class InvalidDayError(SchedulingError):
    """Agendamento proposto para sábado ou domingo."""

    http_status = 422
    code = "invalid_day"

    def __init__(self, day: date):
        self.day = day
        super().__init__(f"Dia inválido para agendamento: {day.isoformat()} cai no fim de semana.")


class WorkloadExceededError(SchedulingError):
    """O novo agendamento ultrapassa a capacidade de trabalho do dia."""

    http_status = 409
    code = "workload_exceeded"

    def __init__(self, day: date, work_load: int, limit: int):
        self.day = day
        self.work_load = work_load
        self.limit = limit
        super().__init__(
            f"Carga de trabalho excedida em {day.isoformat()}: {work_load} de {limit} unidades."
        )


class ServiceNotFoundError(SchedulingError):
    http_status = 404
    code = "service_not_found"

    def __init__(self, service_id: int):
        self.service_id = service_id
        super().__init__(f"Serviço {service_id} não encontrado.")


class DateNotInWindowError(SchedulingError):
    """Um agendamento caiu fora da janela de dias úteis calculada."""

    http_status = 500
    code = "date_not_in_window"

    def __init__(self, day: date):
        self.day = day
        super().__init__(f"Data {day.isoformat()} fora da janela de disponibilidade.")
