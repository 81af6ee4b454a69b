# workshop_scheduler/blueprints/auth/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user

from workshop_scheduler.models.tables import User

bp = Blueprint('auth', __name__, url_prefix='/auth')


@bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        current_app.logger.warning(f"Tentativa de login inválida para '{email}'.")
        return jsonify({"error": "invalid_credentials", "message": "Email ou senha inválidos."}), 401

    login_user(user)
    current_app.logger.info(f"Usuário {user.email} logado (oficina {user.workshop_id}).")
    return jsonify({"id": user.id, "email": user.email, "workshop_id": user.workshop_id})


@bp.post('/logout')
@login_required
def logout():
    current_app.logger.info(f"Usuário {current_user.email} saiu.")
    logout_user()
    return jsonify({"logged_out": True})
