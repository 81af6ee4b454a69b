# workshop_scheduler/commands.py
import logging
import os
from workshop_scheduler.extensions import db
from workshop_scheduler.models.tables import Workshop, User, Service
from workshop_scheduler.repositories import invalidate_services_cache

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# Catálogo inicial: (nome, unidades de trabalho)
DEFAULT_SERVICES = [
    ("Troca de óleo", 1),
    ("Alinhamento e balanceamento", 2),
    ("Revisão de freios", 3),
    ("Troca de embreagem", 5),
    ("Revisão completa", 6),
    ("Retífica de motor", 10),
]


def reset_database_logic():
    """
    Apaga todas as tabelas, recria a estrutura e popula com uma oficina,
    o usuário admin dela e o catálogo de serviços.
    """
    try:
        logging.info("Iniciando reset do banco de dados...")

        db.drop_all()
        logging.info("Tabelas antigas apagadas.")

        db.create_all()
        logging.info("Tabelas recriadas com a estrutura atual.")

        # 1. Oficina
        workshop = Workshop(name=os.getenv("SEED_WORKSHOP_NAME", "Oficina Central"))
        db.session.add(workshop)
        db.session.flush()  # Garante o ID

        if workshop.id is None:
            raise RuntimeError("Falha crítica: oficina não recebeu um ID após o flush.")

        logging.info(f"Oficina '{workshop.name}' pré-criada com ID {workshop.id}.")

        # 2. Usuário admin da oficina
        admin_user = User(
            email=os.getenv("SEED_ADMIN_EMAIL", "admin@email.com"),
            name="Admin",
            workshop_id=workshop.id,
        )
        admin_user.set_password(os.getenv("SEED_ADMIN_PASSWORD", "admin123"))
        db.session.add(admin_user)
        logging.info(f"Usuário admin '{admin_user.email}' preparado.")

        # 3. Serviços
        db.session.add_all([Service(name=name, work_units=units) for name, units in DEFAULT_SERVICES])
        logging.info(f"{len(DEFAULT_SERVICES)} serviços preparados.")

        db.session.commit()
        invalidate_services_cache()
        logging.info("População inicial concluída com sucesso.")
        return workshop

    except Exception as e:
        db.session.rollback()
        logging.error(f"ERRO CRÍTICO durante o reset e população: {e}", exc_info=True)
        raise


def register_commands(app):
    @app.cli.command("reset-db")
    def reset_db():
        """Recria o banco e popula com os dados iniciais."""
        reset_database_logic()
