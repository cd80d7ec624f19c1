"""
リソース取得・公開 URI 関連の CLI コマンド。
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

import typer

from application.services import CollectionNotFoundError
from domain import PersistentResource
from runtime import build_runtime

from .options import EnvironmentOption, ProjectRootOption, resolve_environment, resolve_project_root

app = typer.Typer(help="リソースの取得と公開 URI の算出")


def _resource(collection: str, sha1: str, filename: str, relative_publication_path: str) -> PersistentResource:
    try:
        return PersistentResource(
            content_hash=sha1.lower(),
            filename=filename,
            collection_name=collection,
            relative_publication_path=relative_publication_path,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("fetch")
def fetch(
    collection: str = typer.Argument(..., help="コレクション名"),
    sha1: str = typer.Argument(..., help="リソースの SHA1"),
    filename: str = typer.Argument(..., help="ファイル名"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="書き出し先。未指定時はサイズのみ表示"),
    relative_publication_path: str = typer.Option("", "--relative-publication-path", help="静的リソースの相対公開パス"),
    project_root: Optional[Path] = ProjectRootOption,
    environment: Optional[str] = EnvironmentOption,
) -> None:
    """
    プロキシ済みストレージ経由でリソースを読み出す（未取得ならリモートから取り込む）。
    """

    resource = _resource(collection, sha1, filename, relative_publication_path)
    _, manager = build_runtime(resolve_project_root(project_root), resolve_environment(environment))
    try:
        stream = manager.get_stream(resource)
        if stream is None:
            typer.echo(f"Resource {resource.content_hash} is not available in collection '{collection}'.", err=True)
            raise typer.Exit(code=1)
        with stream:
            if output is None:
                size = len(stream.read())
                typer.echo(f"{resource.content_hash} {size} bytes")
            else:
                output.parent.mkdir(parents=True, exist_ok=True)
                with output.open("wb") as handle:
                    shutil.copyfileobj(stream, handle)
                typer.echo(f"Wrote {resource.content_hash} to {output}")
    except CollectionNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    finally:
        manager.close()


@app.command("uri")
def uri(
    collection: str = typer.Argument(..., help="コレクション名"),
    sha1: str = typer.Argument(..., help="リソースの SHA1"),
    filename: str = typer.Argument(..., help="ファイル名"),
    relative_publication_path: str = typer.Option("", "--relative-publication-path", help="静的リソースの相対公開パス"),
    project_root: Optional[Path] = ProjectRootOption,
    environment: Optional[str] = EnvironmentOption,
) -> None:
    """
    リソースの公開 URI を表示する。
    """

    resource = _resource(collection, sha1, filename, relative_publication_path)
    _, manager = build_runtime(resolve_project_root(project_root), resolve_environment(environment))
    try:
        typer.echo(manager.get_public_uri(resource))
    except CollectionNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    finally:
        manager.close()
