# workshop_scheduler/blueprints/schedules/routes.py
from datetime import datetime
from flask import Blueprint, request, jsonify, current_app, abort
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from workshop_scheduler.extensions import db

bp = Blueprint('schedules', __name__, url_prefix='/schedules')


def _service():
    return current_app.extensions['schedule_service']


def _current_workshop_id() -> int:
    # A oficina vem sempre do usuário logado, nunca do corpo do pedido
    workshop_id = getattr(current_user, 'workshop_id', None)
    if not workshop_id:
        abort(403, description="Usuário não associado a uma oficina.")
    return workshop_id


def _parse_date(raw, field):
    try:
        return datetime.strptime(raw, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        abort(400, description=f"Campo '{field}' deve estar no formato AAAA-MM-DD.")


def _parse_datetime(raw, field):
    if not isinstance(raw, str):
        abort(400, description=f"Campo '{field}' é obrigatório.")
    try:
        # Aceita '2024-01-03' ou '2024-01-03T09:30'; guardamos sempre naive
        return datetime.fromisoformat(raw).replace(tzinfo=None)
    except ValueError:
        abort(400, description=f"Campo '{field}' deve ser uma data ISO 8601.")


@bp.errorhandler(400)
@bp.errorhandler(403)
@bp.errorhandler(404)
def _json_error(error):
    return jsonify({"error": error.name.lower().replace(' ', '_'), "message": error.description}), error.code


@bp.errorhandler(ValueError)
def _invalid_value(error):
    # Intervalo inválido rejeitado pelo ScheduleService (ex.: start > end)
    return jsonify({"error": "bad_request", "message": str(error)}), 400


@bp.get('/today')
@login_required
def today():
    schedules = _service().get_today(_current_workshop_id())
    return jsonify([s.to_dict() for s in schedules])


@bp.get('/period')
@login_required
def period():
    """Sem parâmetros usa a janela padrão de 6 dias úteis; com start/end usa o intervalo."""
    start_raw = request.args.get('start')
    end_raw = request.args.get('end')
    workshop_id = _current_workshop_id()

    if start_raw is None and end_raw is None:
        schedules = _service().get_period(workshop_id)
    else:
        start = _parse_date(start_raw, 'start')
        end = _parse_date(end_raw, 'end')
        schedules = _service().get_period(workshop_id, start, end)

    return jsonify([s.to_dict() for s in schedules])


@bp.get('/available-workload')
@login_required
def available_workload():
    days = _service().get_available_workload(_current_workshop_id())
    return jsonify([d.to_dict() for d in days])


@bp.post('')
@login_required
def create():
    data = request.get_json(silent=True) or {}
    service_id = data.get('service_id')
    if not isinstance(service_id, int) or isinstance(service_id, bool):
        abort(400, description="Campo 'service_id' deve ser um inteiro.")
    when = _parse_datetime(data.get('date'), 'date')

    try:
        schedule = _service().create(_current_workshop_id(), when, service_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Erro ao gravar agendamento: {e}", exc_info=True)
        raise

    return jsonify(schedule.to_dict()), 201


@bp.delete('/<int:schedule_id>')
@login_required
def remove(schedule_id):
    try:
        removed = _service().remove(_current_workshop_id(), schedule_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Erro ao apagar agendamento ID {schedule_id}: {e}", exc_info=True)
        raise

    if not removed:
        abort(404, description="Agendamento não encontrado.")
    return jsonify({"removed": True})
