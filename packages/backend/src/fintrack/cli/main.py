"""fintrack CLI — run the server, generate secrets.

Usage:
    fintrack serve                    # Run the API with uvicorn
    fintrack serve --port 9000 --reload
    fintrack gen-secret               # Print a random signing secret
    fintrack check-config             # Validate FINTRACK_* settings and exit
"""

import secrets
import sys

import click

from fintrack.config import get_settings
from fintrack.errors import TokenConfigError


@click.group()
def cli():
    """fintrack — personal finance tracker backend."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: FINTRACK_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: FINTRACK_PORT).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host, port, reload):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "fintrack.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("gen-secret")
@click.option("--bytes", "nbytes", default=32, show_default=True, type=int)
def gen_secret(nbytes):
    """Print a random URL-safe secret for FINTRACK_*_TOKEN_SECRET."""
    click.echo(secrets.token_urlsafe(nbytes))


@cli.command("check-config")
def check_config():
    """Load settings and build the token config; exit non-zero if unusable."""
    try:
        settings = get_settings()
        config = settings.token_config()
    except (ValueError, TokenConfigError) as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"environment: {settings.environment}")
    click.echo(f"access token TTL: {config.access_ttl}")
    click.echo(f"refresh token TTL: {config.refresh_ttl}")


def main():
    cli()


if __name__ == "__main__":
    main()
