# app/commands.py

from flask.cli import with_appcontext
from app import mongo
from app.auth.accounts import create_account
from app.exceptions import BaseAppException
from app.repositories import MongoUserRepository, ensure_indexes
import click
import pymongo


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Crea los índices de las colecciones (folio y username únicos)."""
    try:
        ensure_indexes(mongo.db)
        click.echo("Índices creados.")
    except pymongo.errors.PyMongoError as e:
        raise click.ClickException(f"Error de base de datos durante la inicialización: {e}")


@click.command("create-admin")
@click.argument("username")
@click.password_option()
@with_appcontext
def create_admin_command(username, password):
    """Crea el primer administrador. Solo con la colección de usuarios vacía."""
    repo = MongoUserRepository()
    if repo.count() > 0:
        raise click.ClickException("Ya existe al menos un usuario.")
    try:
        user = create_account(repo, username, password, role="admin")
    except BaseAppException as e:
        raise click.ClickException(e.message)
    click.echo(f"Administrador '{user.username}' creado.")
