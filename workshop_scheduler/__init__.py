# workshop_scheduler/__init__.py
from __future__ import annotations

import logging
from datetime import datetime

import pytz
from flask import Flask, current_app, jsonify
from flask_login import LoginManager
from flask_migrate import Migrate

from config import Config
from workshop_scheduler.extensions import db, cache
from workshop_scheduler.core import CapacityPolicy, DayLockRegistry, ScheduleService, SchedulingError
from workshop_scheduler.repositories import SqlAlchemyScheduleRepository

login_manager = LoginManager()
migrate = Migrate()


@login_manager.user_loader
def load_user(user_id):
    try:
        user_id_int = int(user_id)
    except ValueError:
        current_app.logger.error(f"ID do usuário na sessão não é um inteiro válido: {user_id}")
        return None

    from workshop_scheduler.models.tables import User
    user = db.session.get(User, user_id_int)
    if not user:
        current_app.logger.warning(f"Usuário ID {user_id_int} NÃO encontrado no banco de dados.")
    return user


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "unauthorized", "message": "Faça login para acessar este recurso."}), 401


def _workshop_clock(tz_name: str):
    """'Hoje' no fuso da oficina, não no fuso do servidor."""
    # Fuso inválido derruba a inicialização (pytz.UnknownTimeZoneError)
    tz = pytz.timezone(tz_name)

    def today():
        return datetime.now(tz).date()

    return today


def _handle_scheduling_error(error: SchedulingError):
    current_app.logger.info(f"Regra de agendamento violada ({error.code}): {error}")
    return jsonify({"error": error.code, "message": str(error)}), error.http_status


def create_app(config_class=Config) -> Flask:
    config_class.init_app()
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)

    app.extensions['schedule_service'] = ScheduleService(
        SqlAlchemyScheduleRepository(),
        policy=CapacityPolicy.from_config(app.config),
        locks=DayLockRegistry(),
        clock=_workshop_clock(app.config['WORKSHOP_TIMEZONE']),
    )

    from workshop_scheduler.blueprints.auth.routes import bp as auth_bp
    from workshop_scheduler.blueprints.schedules.routes import bp as schedules_bp
    from workshop_scheduler.blueprints.services.routes import bp as services_bp

    for blueprint in (auth_bp, schedules_bp, services_bp):
        app.register_blueprint(blueprint)
        logging.info(f"Blueprint '{blueprint.name}' registrado.")

    app.register_error_handler(SchedulingError, _handle_scheduling_error)

    from workshop_scheduler.commands import register_commands
    register_commands(app)

    # Healthcheck
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    with app.app_context():
        from workshop_scheduler.models import tables  # noqa: F401

    return app
