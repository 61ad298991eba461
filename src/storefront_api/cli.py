"""Storefront auth CLI application using Typer.

This module provides command-line utilities for deployment, including
secret generation and administrator account provisioning.
"""

import asyncio
import secrets

import typer
from rich.console import Console

from storefront_api.dependencies import get_engine, get_session_maker
from storefront_auth import (
    CredentialData,
    IdentifierAlreadyExistsError,
    PasswordHashingService,
    WeakPasswordError,
)
from storefront_auth.persistence.sqlalchemy import (
    AdminCredentialRepositorySQLAlchemy,
    AuthBase,
)
from storefront_config.settings import Settings, get_settings

app = typer.Typer(
    name="storefront",
    help="Storefront auth administration CLI",
    no_args_is_help=True,
)
console = Console()

SECRET_NAMES = (
    "CUSTOMER_SESSION_SECRET",
    "ADMIN_SESSION_SECRET",
    "PASSWORD_RESET_SECRET",
)


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

admins_app = typer.Typer(
    name="admins",
    help="Administrator account management",
    no_args_is_help=True,
)
app.add_typer(admins_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate signing secrets for the storefront configuration.

    Generates one independent secret per token class: customer sessions,
    admin sessions and password reset links.

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Storefront Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    for name in SECRET_NAMES:
        # No wrapping, the values must stay copyable
        console.print(f"[cyan]{name}[/cyan]={secrets.token_urlsafe(64)}", soft_wrap=True)

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Rotating a session secret signs out every session of that "
        "realm.[/dim]\n"
    )


async def create_admin_account(
    username: str,
    password: str,
    settings: Settings,
) -> CredentialData:
    """Create administrator credentials in the configured database.

    Raises
    ------
    WeakPasswordError
        If the password does not meet the strength requirements
    IdentifierAlreadyExistsError
        If the username is taken
    """
    password_service = PasswordHashingService(rounds=settings.password_hash_rounds)
    password_service.validate_strength(password)

    engine = get_engine(settings.database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(AuthBase.metadata.create_all)

        async with get_session_maker(settings.database_url)() as session:
            repository = AdminCredentialRepositorySQLAlchemy(session)
            credential = await repository.create(
                username,
                password_service.hash(password),
            )
            await session.commit()
    finally:
        await engine.dispose()

    return credential


@admins_app.command("create")
def create_admin(
    username: str = typer.Argument(..., help="Administrator username"),
    password: str = typer.Option(
        ...,
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Administrator password",
    ),
) -> None:
    """Create an administrator account."""
    settings = get_settings()

    try:
        credential = asyncio.run(
            create_admin_account(username.strip(), password, settings)
        )
    except WeakPasswordError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e
    except IdentifierAlreadyExistsError as e:
        console.print(f"[red]Error:[/red] Administrator '{e.identifier}' already exists")
        raise typer.Exit(1) from e

    console.print(
        f"[green]Created administrator[/green] {credential.identifier} "
        f"[dim]({credential.subject_id})[/dim]"
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
