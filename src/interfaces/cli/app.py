"""
Typer ベースの CLI。
"""

from __future__ import annotations

import typer

from .commands import config, diagnostics, resources


def create_cli() -> typer.Typer:
    app = typer.Typer(help="resource-proxy CLI")
    app.add_typer(resources.app, name="resources")
    app.add_typer(config.app, name="config")
    app.add_typer(diagnostics.app, name="diagnostics")
    return app


def main() -> None:
    create_cli()()
