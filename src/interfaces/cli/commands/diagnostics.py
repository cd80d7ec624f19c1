"""
診断用 CLI コマンド。
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from runtime import bootstrap_application

from .options import EnvironmentOption, ProjectRootOption, resolve_environment, resolve_project_root

app = typer.Typer(help="診断・ヘルスチェックコマンド")


@app.command("ping")
def ping() -> None:
    typer.echo("システム診断: OK")


@app.command("check-config")
def check_config(
    project_root: Optional[Path] = ProjectRootOption,
    environment: Optional[str] = EnvironmentOption,
) -> None:
    """
    ブートストラップ設定（logging / metrics / resource_management）を検証する。
    """

    context = bootstrap_application(resolve_project_root(project_root), resolve_environment(environment))
    management = context.config.require_section("resource_management")
    typer.echo(
        f"env={context.environment} storages={len(management['storages'])} "
        f"collections={len(management['collections'])}"
    )
