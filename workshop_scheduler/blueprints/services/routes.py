# workshop_scheduler/blueprints/services/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError

from workshop_scheduler.extensions import db
from workshop_scheduler.models.tables import Service
from workshop_scheduler.repositories import add_service

bp = Blueprint('services', __name__, url_prefix='/services')


@bp.get('')
@login_required
def index():
    """Lista o catálogo de serviços."""
    services = Service.query.order_by(Service.name).all()
    return jsonify([s.to_dict() for s in services])


@bp.post('')
@login_required
def new_service():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    work_units = data.get('work_units')

    # Validação simples dos campos
    errors = []
    if not name:
        errors.append("O nome do serviço é obrigatório.")
    if not isinstance(work_units, int) or isinstance(work_units, bool) or work_units <= 0:
        errors.append("As unidades de trabalho devem ser um inteiro positivo.")

    if errors:
        return jsonify({"error": "invalid_service", "message": " ".join(errors)}), 400

    try:
        service = add_service(name, work_units)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Erro ao adicionar serviço: {e}", exc_info=True)
        raise

    return jsonify(service.to_dict()), 201
