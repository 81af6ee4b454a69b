from __future__ import annotations

from datetime import date, datetime

import pytest

from workshop_scheduler.core import ScheduleService, WorkloadExceededError
from workshop_scheduler.models.tables import Schedule
from workshop_scheduler.repositories import SqlAlchemyScheduleRepository, add_service

MONDAY = date(2024, 1, 1)


def test_insert_then_select_period_round_trip(app, seed) -> None:
    repo = SqlAlchemyScheduleRepository()
    created = repo.insert(seed["workshop_id"], seed["half_day_id"], datetime(2024, 1, 3, 10))

    found = repo.select_period(seed["workshop_id"], datetime(2024, 1, 3), datetime(2024, 1, 3, 23, 59, 59))

    assert [s.id for s in found] == [created.id]
    assert repo.select_period(seed["other_workshop_id"], datetime(2024, 1, 3), datetime(2024, 1, 4)) == []


def test_select_period_orders_by_date(app, seed) -> None:
    repo = SqlAlchemyScheduleRepository()
    late = repo.insert(seed["workshop_id"], seed["half_day_id"], datetime(2024, 1, 5, 16))
    early = repo.insert(seed["workshop_id"], seed["half_day_id"], datetime(2024, 1, 2, 8))

    found = repo.select_period(seed["workshop_id"], datetime(2024, 1, 1), datetime(2024, 1, 8))

    assert [s.id for s in found] == [early.id, late.id]


def test_created_schedule_comes_back_with_service_name(app, seed) -> None:
    service = ScheduleService(SqlAlchemyScheduleRepository(), clock=lambda: MONDAY)
    created = service.create(seed["workshop_id"], datetime(2024, 1, 3, 14, 30), seed["big_id"])

    views = service.get_period(seed["workshop_id"], date(2024, 1, 3), date(2024, 1, 3))

    assert len(views) == 1
    assert views[0].id == created.id
    assert views[0].service_name == "Revisão completa"
    assert views[0].date == datetime(2024, 1, 3, 14, 30)


def test_rejected_creation_leaves_no_row(app, seed) -> None:
    service = ScheduleService(SqlAlchemyScheduleRepository(), clock=lambda: MONDAY)
    service.create(seed["workshop_id"], datetime(2024, 1, 3, 8), seed["big_id"])

    with pytest.raises(WorkloadExceededError):
        service.create(seed["workshop_id"], datetime(2024, 1, 3, 13), seed["big_id"])

    assert Schedule.query.count() == 1


def test_delete_is_scoped_to_workshop(app, seed) -> None:
    repo = SqlAlchemyScheduleRepository()
    created = repo.insert(seed["workshop_id"], seed["half_day_id"], datetime(2024, 1, 3, 10))

    assert repo.delete(seed["other_workshop_id"], created.id) is False
    assert repo.delete(seed["workshop_id"], created.id) is True
    assert repo.delete(seed["workshop_id"], created.id) is False


def test_services_cache_is_refreshed_after_adding_a_service(app, seed) -> None:
    repo = SqlAlchemyScheduleRepository()
    assert {s.name for s in repo.select_services()} == {"Troca de embreagem", "Revisão completa"}

    add_service("Troca de óleo", 1)

    services = {s.name: s.work_units for s in repo.select_services()}
    assert services["Troca de óleo"] == 1
