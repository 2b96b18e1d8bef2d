"""Serve the HTTP API."""

import click
import uvicorn

from venueledger.api.app import create_app


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", type=int, default=8000, show_default=True, help="Port to listen on")
@click.pass_context
def serve(ctx, host: str, port: int):
    """Run the REST API over the configured database.

    Examples:
        venueledger serve
        venueledger --db-path ./ledger.db serve --port 8080
    """
    app = create_app(services=ctx.obj["services"])
    click.echo(f"Serving venueledger API on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=ctx.obj["settings"].log_level.lower())


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
