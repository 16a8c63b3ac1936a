from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml

from ..core.config import FilterConfig
from ..core.config_loader import ConfigLoader
from ..core.types import MaxDepthExceededError, VALID_SUCCESSOR_POLICIES
from ..processors import configure_logging

app = typer.Typer(help="Keysieve CLI")


def _load_document(path: str) -> Any:
    if path == "-":
        try:
            return json.load(sys.stdin)
        except json.JSONDecodeError as e:
            typer.echo(f"Invalid JSON on stdin: {e}", err=True)
            raise typer.Exit(1)
    p = Path(path)
    if not p.exists():
        typer.echo(f"No such file: {path}", err=True)
        raise typer.Exit(1)
    try:
        with open(p, "r", encoding="utf-8") as f:
            if p.suffix in (".yaml", ".yml"):
                return yaml.safe_load(f)
            return json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        typer.echo(f"Invalid document {path}: {e}", err=True)
        raise typer.Exit(1)


def _profile_config(profile: Optional[str], config: Optional[Path]) -> FilterConfig:
    if profile is None:
        return FilterConfig()
    loader = ConfigLoader(config)
    try:
        cfg = loader.get_filter_config(profile)
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    if cfg is None:
        typer.echo(f"Unknown profile: {profile}", err=True)
        raise typer.Exit(1)
    return cfg


@app.command("filter")
def filter_(
    path: str = typer.Argument(..., help="JSON or YAML document, '-' for JSON on stdin"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="Key to match"),
    regex_filters: Optional[List[str]] = typer.Option(None, "--regex", "-r", help="Pattern to match"),
    include: Optional[bool] = typer.Option(None, "--include/--exclude"),
    recursive: Optional[bool] = typer.Option(None, "--recursive/--flat"),
    policy: Optional[str] = typer.Option(None, "--policy", help="matched or all"),
    profile: Optional[str] = typer.Option(None, "--profile"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to keysieve.yaml"),
    indent: int = typer.Option(2, "--indent"),
    log_level: str = typer.Option("WARNING", "--log-level"),
):
    configure_logging(log_level)
    if policy is not None and policy not in VALID_SUCCESSOR_POLICIES:
        typer.echo(f"Invalid policy: {policy}", err=True)
        raise typer.Exit(1)

    cfg = _profile_config(profile, config)
    overrides: dict = {
        "filters": cfg.filters + tuple(filters or ()),
        "regex_filters": cfg.regex_filters + tuple(regex_filters or ()),
    }
    if include is not None:
        overrides["filter_type"] = "include" if include else "exclude"
    if recursive is not None:
        overrides["recursive"] = recursive
    if policy is not None:
        overrides["successor_policy"] = policy
    cfg = replace(cfg, **overrides)

    document = _load_document(path)
    try:
        result = cfg.apply(document)
    except MaxDepthExceededError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(result, indent=indent, default=str))


@app.command()
def profiles(config: Optional[Path] = typer.Option(None, "--config")):
    loader = ConfigLoader(config)
    try:
        names = loader.profile_names()
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(names, indent=2))


if __name__ == "__main__":
    app()
