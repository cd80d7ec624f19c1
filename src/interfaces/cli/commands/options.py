"""
CLI コマンド共通のオプション定義。
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from runtime import default_environment, default_project_root

ProjectRootOption = typer.Option(
    None,
    "--project-root",
    help="configs/ を含むディレクトリ。未指定時は RESOURCE_PROXY_ROOT またはリポジトリルート。",
)
EnvironmentOption = typer.Option(None, "--env", help="環境名。未指定時は SERVICE_ENV（既定 dev）。")


def resolve_project_root(project_root: Optional[Path]) -> Path:
    return project_root or default_project_root()


def resolve_environment(environment: Optional[str]) -> str:
    return environment or default_environment()
