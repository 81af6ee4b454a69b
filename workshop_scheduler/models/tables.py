# workshop_scheduler/models/tables.py
from workshop_scheduler.extensions import db
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

# ---------------------------------------------------------------------
# O "DONO" DOS DADOS
# ---------------------------------------------------------------------
# Cada agendamento e cada usuário pertencem a uma oficina.
class Workshop(db.Model):
    __tablename__ = 'workshops'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Se a oficina for apagada, usuários e agendamentos vão junto
    users = db.relationship('User', backref='workshop', lazy=True, cascade="all, delete-orphan")
    schedules = db.relationship('Schedule', backref='workshop', lazy=True, cascade="all, delete-orphan")


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), index=True, unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=True)
    password_hash = db.Column(db.String(256))

    # A oficina que este usuário opera (resolve o "workshop atual" das rotas)
    workshop_id = db.Column(db.Integer, db.ForeignKey('workshops.id'), nullable=False)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)


class Service(db.Model):
    """Catálogo de serviços. `work_units` é o custo de esforço de um agendamento."""
    __tablename__ = 'services'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    work_units = db.Column(db.Integer, nullable=False)

    schedules = db.relationship('Schedule', backref='service', lazy=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "work_units": self.work_units}


class Schedule(db.Model):
    """Um agendamento. Só o dia de `date` conta para a capacidade."""
    __tablename__ = 'schedules'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=False)
    workshop_id = db.Column(db.Integer, db.ForeignKey('workshops.id'), nullable=False, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "workshop_id": self.workshop_id,
            "service_id": self.service_id,
            "date": self.date.isoformat(),
        }
