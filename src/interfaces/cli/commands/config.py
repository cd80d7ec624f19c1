"""
設定確認用 CLI コマンド。
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from infrastructure.configs import PROXY_CONFIG_NAME, load_proxy_configuration
from runtime import build_config_repository

from .options import EnvironmentOption, ProjectRootOption, resolve_environment, resolve_project_root

app = typer.Typer(help="設定の確認")


@app.command("storages")
def storages(
    project_root: Optional[Path] = ProjectRootOption,
    environment: Optional[str] = EnvironmentOption,
) -> None:
    """
    プロキシ対象のストレージとリモートのベース URI を一覧表示する。
    """

    repository = build_config_repository(resolve_project_root(project_root))
    proxy_settings, _ = load_proxy_configuration(repository, environment=resolve_environment(environment))
    if not proxy_settings.storages:
        typer.echo("No storages are configured for proxying.")
        return
    for storage_name, settings in proxy_settings.storages.items():
        subdivide = "subdivided" if settings.subdivide_hash_path_segment else "flat"
        typer.echo(f"{storage_name}\t{settings.remote_source_base_uri}\t{subdivide}")


@app.command("show")
def show(
    project_root: Optional[Path] = ProjectRootOption,
    environment: Optional[str] = EnvironmentOption,
) -> None:
    """
    マージ済みの resource_proxy 設定を JSON で表示する。
    """

    repository = build_config_repository(resolve_project_root(project_root))
    typer.echo(repository.dump(PROXY_CONFIG_NAME, environment=resolve_environment(environment)))
