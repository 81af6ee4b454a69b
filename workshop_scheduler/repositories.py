# workshop_scheduler/repositories.py
"""Persistência dos agendamentos com Flask-SQLAlchemy."""
import logging
from collections import namedtuple
from contextlib import contextmanager
from datetime import date, datetime

from workshop_scheduler.extensions import db, cache
from workshop_scheduler.models.tables import Schedule, Service, Workshop

SERVICES_CACHE_KEY = 'services:all'

# Cópia leve do serviço para poder ir ao cache (Redis) sem levar a sessão junto
ServiceRecord = namedtuple('ServiceRecord', ['id', 'name', 'work_units'])

logger = logging.getLogger(__name__)


class SqlAlchemyScheduleRepository:

    def select_period(self, workshop_id: int, start: datetime, end: datetime):
        return (
            Schedule.query
            .filter(
                Schedule.workshop_id == workshop_id,
                Schedule.date >= start,
                Schedule.date <= end,
            )
            .order_by(Schedule.date.asc())
            .all()
        )

    def select_services(self):
        services = cache.get(SERVICES_CACHE_KEY)
        if services is None:
            services = [
                ServiceRecord(s.id, s.name, s.work_units)
                for s in Service.query.order_by(Service.id).all()
            ]
            cache.set(SERVICES_CACHE_KEY, services)
        return services

    def insert(self, workshop_id: int, service_id: int, when: datetime) -> Schedule:
        schedule = Schedule(workshop_id=workshop_id, service_id=service_id, date=when)
        db.session.add(schedule)
        db.session.commit()
        return schedule

    def delete(self, workshop_id: int, schedule_id: int) -> bool:
        schedule = Schedule.query.filter_by(id=schedule_id, workshop_id=workshop_id).first()
        if not schedule:
            return False
        db.session.delete(schedule)
        db.session.commit()
        return True

    @contextmanager
    def lock_day(self, workshop_id: int, day: date):
        """
        Trava a linha da oficina (SELECT ... FOR UPDATE) até o commit do insert.
        No SQLite o FOR UPDATE não existe; lá vale só o lock em processo.
        """
        db.session.query(Workshop).filter_by(id=workshop_id).with_for_update().first()
        try:
            yield
        except Exception:
            # Libera a linha travada; o insert bem-sucedido já fez o commit
            db.session.rollback()
            raise


def add_service(name: str, work_units: int) -> Service:
    service = Service(name=name, work_units=work_units)
    db.session.add(service)
    db.session.commit()
    invalidate_services_cache()
    logger.info("Serviço '%s' cadastrado com %s unidades de trabalho.", name, work_units)
    return service


def invalidate_services_cache():
    cache.delete(SERVICES_CACHE_KEY)
