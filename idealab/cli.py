import click
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash
from idealab.services import storage

@click.group()
def sessions():
    """Admin session housekeeping."""

@sessions.command("purge")
@with_appcontext
def sessions_purge():
    deleted = storage.delete_expired_admin_sessions()
    click.echo(f"Deleted {deleted} expired admin session(s)")

@click.group()
def admin():
    """Admin panel helpers."""

@admin.command("hash-password")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def admin_hash_password(password):
    """Print a hash suitable for ADMIN_PASSWORD_HASH."""
    if len(password) < 8:
        raise click.ClickException("Password must be at least 8 characters")
    click.echo(generate_password_hash(password))

def register_cli(app):
    app.cli.add_command(sessions)
    app.cli.add_command(admin)
