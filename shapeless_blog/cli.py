import click

from .errors import DuplicateUsernameError
from .models import db
from .services.accounts import register_user
from .services.cleanup import cleanup_expired_tokens


def register_cli_commands(app):
    @app.cli.command("cleanup-tokens")
    def cleanup_tokens():
        """Manually remove expired bearer tokens."""
        removed = cleanup_expired_tokens(db.session)
        click.echo("Expired tokens removed." if removed else "No expired tokens.")

    @app.cli.command("create-user")
    @click.argument("username")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user(username, password):
        """Create a user, e.g. the first account that can then add others."""
        try:
            user = register_user(db.session, username, password)
        except DuplicateUsernameError as e:
            raise click.ClickException(f"User {e.username} already exists")
        click.echo(f"User {user.username} created\nid: {user.id}")
