from academy import create_app
from academy.models import UserRole
from academy.services import centers as center_service
from academy.services import users as user_service
from academy.seed import seed_data
from flask.cli import with_appcontext
from flask_migrate import upgrade, migrate, init
from utils.errors import AcademyError
import click

app = create_app()

@app.cli.command("db-init")
@with_appcontext
def db_init():
    """Initializes migrations directory"""
    init()

@app.cli.command("db-migrate")
@with_appcontext
def db_migrate():
    """Creates a new migration"""
    migrate()

@app.cli.command("db-upgrade")
@with_appcontext
def db_upgrade():
    """Applies migrations"""
    upgrade()

@app.cli.command("create-user")
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--full-name", default="")
@click.option("--role", type=click.Choice([r.value for r in UserRole]), default=UserRole.FACULTY.value)
@click.option("--center-id", type=int, default=None)
@with_appcontext
def create_user(email, password, full_name, role, center_id):
    """Provisions a login (users are never created through the API)"""
    try:
        user = user_service.create_user(email, password, full_name, UserRole(role), center_id)
    except AcademyError as e:
        raise click.ClickException(e.message)
    click.echo(f"Created {user.role.value} {user.email} (id {user.id})")

@app.cli.command("create-center")
@click.argument("name")
@with_appcontext
def create_center(name):
    """Adds a center"""
    try:
        center = center_service.create_center(name)
    except AcademyError as e:
        raise click.ClickException(e.message)
    click.echo(f"Created center {center.name} (id {center.id})")

@app.cli.command("seed")
@with_appcontext
def seed():
    """Loads demo centers, users, batches and attendance"""
    seed_data()
    click.echo("Seed data inserted successfully.")
