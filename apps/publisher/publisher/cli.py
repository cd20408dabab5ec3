"""Command line entry point: ``artifact-publisher``.

Commands:
  publish    resolve, name, and upload the bundles for one matrix entry
  plan       show what publish would upload, without uploading
  short-sha  print (and optionally export) the abbreviated commit SHA

Exit codes: 0 success, 1 a bundle failed to publish, 2 invalid input.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Optional

import click
from pydantic import ValidationError

from publisher import __version__
from publisher.bundles import load_bundle_manifest, select_bundles
from publisher.bundles.types import ArtifactBundle
from publisher.context import (
    BuildContext,
    Profile,
    compute_short_sha,
    export_short_sha,
    resolve_host,
    shorten_sha,
)
from publisher.core.config import Settings
from publisher.core.logging import configure_structlog
from publisher.errors import PublishError
from publisher.packaging import create_store_client, publish_all, resolve_files

EXIT_SUCCESS = 0
EXIT_PUBLISH_FAILED = 1
EXIT_INPUT_ERROR = 2


class InputError(click.ClickException):
    """Invalid input: bad reference, unknown host, bad manifest or settings."""

    exit_code = EXIT_INPUT_ERROR


def _context_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by publish and plan."""
    options = [
        click.option("--target", required=True, help="Target triple of the build, e.g. x86_64-pc-windows-msvc."),
        click.option(
            "--profile",
            type=click.Choice([p.value for p in Profile]),
            default=Profile.RELEASE.value,
            show_default=True,
            help="Build profile directory under the target triple.",
        ),
        click.option("--sha", envvar="GITHUB_SHA", required=True, help="Commit SHA being published [env: GITHUB_SHA]."),
        click.option(
            "--host",
            envvar=["MATRIX_HOST", "RUNNER_OS"],
            required=True,
            help="Matrix host label, e.g. ubuntu-20.04 [env: MATRIX_HOST, RUNNER_OS].",
        ),
        click.option(
            "--root",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help="Artifact root that bundle patterns are relative to [default: target].",
        ),
        click.option(
            "--manifest",
            type=click.Path(dir_okay=False, exists=True, path_type=Path),
            default=None,
            help="YAML manifest replacing the built-in bundle table.",
        ),
        click.option("--include-deb/--no-include-deb", default=None, help="Also publish the Debian package on Linux."),
        click.option("--app-name", default=None, help="Prefix of every artifact name."),
        click.option(
            "--repo-dir",
            type=click.Path(file_okay=False, exists=True, path_type=Path),
            default=None,
            help="Repository used to resolve the commit [default: cwd].",
        ),
        click.option(
            "--resolve/--no-resolve",
            default=True,
            show_default=True,
            help="Resolve the SHA with git; --no-resolve truncates it instead.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_settings(**overrides: Any) -> Settings:
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise InputError(f"Invalid settings: {exc}") from exc


def _short_sha(sha: str, settings: Settings, repo_dir: Optional[Path], resolve: bool) -> str:
    try:
        if resolve:
            return compute_short_sha(sha, repo_dir, settings.short_sha_length)
        return shorten_sha(sha, settings.short_sha_length)
    except PublishError as exc:
        raise InputError(str(exc)) from exc


def _plan_bundles(
    settings: Settings,
    target: str,
    profile: str,
    sha: str,
    host: str,
    repo_dir: Optional[Path],
    resolve: bool,
) -> tuple[str, list[ArtifactBundle]]:
    try:
        ctx = BuildContext(
            target=target,
            profile=Profile(profile),
            commit_sha=sha,
            host=resolve_host(host),
        )
        specs = (
            load_bundle_manifest(Path(settings.manifest_path))
            if settings.manifest_path
            else None
        )
    except (ValueError, PublishError) as exc:
        raise InputError(str(exc)) from exc

    short_sha = _short_sha(sha, settings, repo_dir, resolve)

    try:
        bundles = select_bundles(
            ctx,
            short_sha,
            app_name=settings.app_name,
            retention_days=settings.retention_days,
            include_deb=settings.include_deb,
            specs=specs,
        )
    except ValueError as exc:
        raise InputError(str(exc)) from exc
    return short_sha, bundles


@click.group()
@click.version_option(version=__version__, prog_name="artifact-publisher")
@click.option("--debug/--no-debug", default=None, help="Human-readable debug logging [env: PUBLISHER_DEBUG].")
def cli(debug: Optional[bool]) -> None:
    """Publish desktop installers and updater bundles after a CI build."""
    settings = _load_settings(debug=debug)
    configure_structlog(debug=settings.debug)


@cli.command()
@_context_options
@click.option("--store-url", default=None, help="Artifact store base URL [env: PUBLISHER_STORE_URL].")
@click.option("--retention-days", type=int, default=None, help="Days the store keeps the artifacts [default: 1].")
@click.option(
    "--github-env",
    envvar="GITHUB_ENV",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Workflow env file to export GITHUB_SHA_SHORT into [env: GITHUB_ENV].",
)
@click.pass_context
def publish(
    ctx: click.Context,
    target: str,
    profile: str,
    sha: str,
    host: str,
    root: Optional[Path],
    manifest: Optional[Path],
    include_deb: Optional[bool],
    app_name: Optional[str],
    repo_dir: Optional[Path],
    resolve: bool,
    store_url: Optional[str],
    retention_days: Optional[int],
    github_env: Optional[Path],
) -> None:
    """Upload every bundle for this build; fail if a required one is empty."""
    settings = _load_settings(
        artifact_root=str(root) if root else None,
        manifest_path=str(manifest) if manifest else None,
        include_deb=include_deb,
        app_name=app_name,
        store_url=store_url,
        retention_days=retention_days,
    )
    short_sha, bundles = _plan_bundles(settings, target, profile, sha, host, repo_dir, resolve)
    export_short_sha(short_sha, github_env)

    artifact_root = Path(settings.artifact_root)

    async def _run():
        async with create_store_client(
            settings.store_url, settings.store_token, settings.upload_timeout
        ) as client:
            return await publish_all(bundles, artifact_root, client)

    outcomes = asyncio.run(_run())

    for outcome in outcomes:
        if outcome.ok and outcome.receipt:
            click.secho(f"published {outcome.bundle.name} ({outcome.receipt.file_count} files)", fg="green")
        elif outcome.ok:
            click.secho(f"skipped   {outcome.bundle.name} (no files)", fg="yellow")
        else:
            click.secho(f"failed    {outcome.bundle.name}: {outcome.error}", fg="red", err=True)

    if not all(o.ok for o in outcomes):
        ctx.exit(EXIT_PUBLISH_FAILED)


@cli.command()
@_context_options
def plan(
    target: str,
    profile: str,
    sha: str,
    host: str,
    root: Optional[Path],
    manifest: Optional[Path],
    include_deb: Optional[bool],
    app_name: Optional[str],
    repo_dir: Optional[Path],
    resolve: bool,
) -> None:
    """Print the bundles and matched files as JSON, without uploading."""
    settings = _load_settings(
        artifact_root=str(root) if root else None,
        manifest_path=str(manifest) if manifest else None,
        include_deb=include_deb,
        app_name=app_name,
    )
    short_sha, bundles = _plan_bundles(settings, target, profile, sha, host, repo_dir, resolve)
    artifact_root = Path(settings.artifact_root)

    report = {
        "short_sha": short_sha,
        "artifact_root": str(artifact_root),
        "bundles": [
            {
                **bundle.to_dict(),
                "files": [
                    p.relative_to(artifact_root).as_posix()
                    for p in resolve_files(bundle, artifact_root)
                ],
            }
            for bundle in bundles
        ],
    }
    click.echo(json.dumps(report, indent=2))


@cli.command("short-sha")
@click.option("--sha", envvar="GITHUB_SHA", required=True, help="Commit SHA [env: GITHUB_SHA].")
@click.option("--length", type=int, default=None, help="Abbreviation length [default: 7].")
@click.option(
    "--repo-dir",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=None,
    help="Repository used to resolve the commit [default: cwd].",
)
@click.option("--resolve/--no-resolve", default=True, show_default=True)
@click.option(
    "--github-env",
    envvar="GITHUB_ENV",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Workflow env file to export GITHUB_SHA_SHORT into [env: GITHUB_ENV].",
)
def short_sha_cmd(
    sha: str,
    length: Optional[int],
    repo_dir: Optional[Path],
    resolve: bool,
    github_env: Optional[Path],
) -> None:
    """Print the abbreviated commit SHA."""
    settings = _load_settings(short_sha_length=length)
    short = _short_sha(sha, settings, repo_dir, resolve)
    export_short_sha(short, github_env)
    click.echo(short)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
