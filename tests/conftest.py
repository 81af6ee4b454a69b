from __future__ import annotations

import itertools
import time
from collections import namedtuple
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime

import pytest

from config import TestingConfig
from workshop_scheduler import create_app
from workshop_scheduler.core import ScheduleService
from workshop_scheduler.extensions import db
from workshop_scheduler.models.tables import Service, User, Workshop

MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)
WEDNESDAY = date(2024, 1, 3)
THURSDAY = date(2024, 1, 4)
FRIDAY = date(2024, 1, 5)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)
NEXT_MONDAY = date(2024, 1, 8)

FakeService = namedtuple("FakeService", ["id", "name", "work_units"])


@dataclass
class FakeSchedule:
    id: int
    workshop_id: int
    service_id: int
    date: datetime


class InMemoryScheduleRepository:
    """Repositório em memória com a mesma interface do SqlAlchemyScheduleRepository."""

    def __init__(self, services=()):
        self.services = list(services)
        self.schedules = []
        self._ids = itertools.count(1)
        # Atraso artificial nas leituras para abrir a janela de corrida nos testes
        self.select_delay = 0.0

    def add(self, workshop_id, service_id, when):
        schedule = FakeSchedule(next(self._ids), workshop_id, service_id, when)
        self.schedules.append(schedule)
        return schedule

    def select_period(self, workshop_id, start, end):
        found = [s for s in self.schedules if s.workshop_id == workshop_id and start <= s.date <= end]
        if self.select_delay:
            time.sleep(self.select_delay)
        return sorted(found, key=lambda s: s.date)

    def select_services(self):
        return list(self.services)

    def insert(self, workshop_id, service_id, when):
        return self.add(workshop_id, service_id, when)

    def delete(self, workshop_id, schedule_id):
        for schedule in self.schedules:
            if schedule.id == schedule_id and schedule.workshop_id == workshop_id:
                self.schedules.remove(schedule)
                return True
        return False

    @contextmanager
    def lock_day(self, workshop_id, day):
        yield


@pytest.fixture
def repository():
    return InMemoryScheduleRepository(
        services=[
            FakeService(1, "Troca de óleo", 1),
            FakeService(2, "Revisão de freios", 3),
            FakeService(3, "Troca de embreagem", 5),
            FakeService(4, "Revisão completa", 6),
            FakeService(5, "Retífica de motor", 10),
            FakeService(6, "Motor e câmbio", 13),
        ]
    )


@pytest.fixture
def today():
    return WEDNESDAY


@pytest.fixture
def service(repository, today):
    return ScheduleService(repository, clock=lambda: today)


# --- Aplicação Flask com SQLite em memória ---

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def seed(app):
    workshop = Workshop(name="Oficina Teste")
    other = Workshop(name="Outra Oficina")
    db.session.add_all([workshop, other])
    db.session.flush()

    user = User(email="admin@oficina.com", name="Admin", workshop_id=workshop.id)
    user.set_password("segredo")
    db.session.add(user)

    half_day = Service(name="Troca de embreagem", work_units=5)
    big = Service(name="Revisão completa", work_units=6)
    db.session.add_all([half_day, big])
    db.session.commit()

    return {
        "workshop_id": workshop.id,
        "other_workshop_id": other.id,
        "half_day_id": half_day.id,
        "big_id": big.id,
    }


@pytest.fixture
def client(app, seed):
    client = app.test_client()
    response = client.post("/auth/login", json={"email": "admin@oficina.com", "password": "segredo"})
    assert response.status_code == 200
    return client


@pytest.fixture
def fixed_today(app):
    app.extensions["schedule_service"].clock = lambda: MONDAY
    return MONDAY
