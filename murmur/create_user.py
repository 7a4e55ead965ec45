"""
Script for creating a new user.

Accounts cannot be created through the API. Creates the database tables
first, if they do not already exist.
"""

import click

from .app_logging import setup_logger
from .factory import create_web_app
from .services import datastore


@click.command()
@click.option('--username', prompt='Username')
@click.option('--email', prompt='E-mail address')
@click.option('--password', prompt='Password', hide_input=True,
              confirmation_prompt=True)
def create_user(username: str, email: str, password: str) -> None:
    """Create a new user."""
    app = create_web_app()
    if app.config['LOG_JSON']:
        setup_logger(app.config['LOGLEVEL'])
    with app.app_context():
        datastore.create_all()
        try:
            user = datastore.create_user(username, email, password)
        except datastore.UserExists as e:
            raise click.ClickException(
                f'A user with username {username} or e-mail {email}'
                ' already exists'
            ) from e
    click.echo(f'Created user {user.username} with id {user.user_id}')


if __name__ == '__main__':
    create_user()
