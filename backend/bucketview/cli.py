"""
Terminal front end for the bucket proxy.

Stores the pasted credential block locally, then browses, uploads and
presigns through the proxy exactly like the browser page does.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from bucketview.client import ProxyClient
from bucketview.config import get_settings
from bucketview.errors import BucketViewError
from bucketview.services.credentials import CredentialStore, missing_fields
from bucketview.services.listing import human_size
from bucketview.services.navigator import Navigator
from bucketview.services.paths import breadcrumbs, normalize

console = Console()

BROWSE_HELP = "ls | cd <folder> or cd /<path from bucket root> | up | link <name> | provider <r2|aws> | refresh | help | quit"


def _message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


def _store(ctx: click.Context) -> CredentialStore:
    return ctx.obj["store"]


def _client(ctx: click.Context) -> ProxyClient:
    provider, record = _store(ctx).record()
    missing = missing_fields(record, provider)
    if missing:
        raise click.ClickException(
            f"{provider} config incomplete, missing: {', '.join(missing)} (see `bucketview config set`)"
        )
    return ProxyClient(provider, record, base_url=ctx.obj["proxy_url"])


def _render(nav: Navigator) -> None:
    st = nav.state
    trail = " / ".join(label for label, _ in breadcrumbs(st.current_prefix)[1:]) or "(root)"
    if st.error:
        console.print(f"[red]⚠ {st.error}[/red]")
        return
    table = Table(title=trail, title_justify="left", show_edge=False)
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for e in st.entries:
        if e.is_folder:
            table.add_row(f"[cyan]{e.display_name}/[/cyan]", "", "")
        else:
            modified = e.last_modified.strftime("%Y-%m-%d %H:%M") if e.last_modified else ""
            table.add_row(e.display_name, human_size(e.size), modified)
    if not st.entries:
        console.print(f"[dim]{trail}: empty[/dim]")
        return
    console.print(table)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--state-file", type=click.Path(dir_okay=False, path_type=Path), envvar="BUCKETVIEW_STATE_FILE", default=None)
@click.option("--proxy-url", envvar="BUCKETVIEW_PROXY_URL", default=None, help="Base URL of the proxy service")
@click.pass_context
def cli(ctx: click.Context, state_file: Path | None, proxy_url: str | None):
    """Browse, upload to and share from an R2 or S3 bucket."""
    ctx.ensure_object(dict)
    ctx.obj["store"] = CredentialStore(state_file)
    ctx.obj["proxy_url"] = proxy_url or get_settings().proxy_url


@cli.command()
@click.option("--host", default="127.0.0.1")
@click.option("--port", default=8000, type=int)
@click.option("--reload", is_flag=True)
def serve(host: str, port: int, reload: bool):
    """Run the proxy service."""
    import uvicorn

    uvicorn.run("bucketview.main:app", host=host, port=port, reload=reload)


@cli.group()
def config():
    """Manage the saved credential block."""


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    provider, record = _store(ctx).record()
    table = Table(show_header=False, show_edge=False)
    table.add_row("provider", provider)
    for name, value in record.as_wire().items():
        shown = value if name not in ("secretAccessKey",) else value[:4] + "…"
        table.add_row(name, shown)
    console.print(table)
    missing = missing_fields(record, provider)
    if missing:
        console.print(f"[yellow]missing: {', '.join(missing)}[/yellow]")
    else:
        console.print(f"[green]{provider.upper()} config loaded[/green] bucket: {record.bucket_name}")


@config.command("set")
@click.option("--provider", type=click.Choice(["r2", "aws"]), default=None)
@click.option("--from-file", "source", type=click.File("r"), default=None, help="Read KEY=value lines from a file (default: stdin)")
@click.pass_context
def config_set(ctx: click.Context, provider: str | None, source):
    """Save a KEY=value block (R2_* or AWS_* names)."""
    store = _store(ctx)
    text, saved_provider = store.load()
    if source is not None:
        text = source.read()
    elif provider is None or not sys.stdin.isatty():
        text = sys.stdin.read()
    store.save(text, provider or saved_provider)
    ctx.invoke(config_show)


@config.command("clear")
@click.confirmation_option(prompt="Clear saved credentials?")
@click.pass_context
def config_clear(ctx: click.Context):
    _store(ctx).clear()
    console.print("cleared")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--content-type", default=None)
@click.pass_context
def upload(ctx: click.Context, file: Path, content_type: str | None):
    """Upload FILE and print its URL."""

    async def run() -> str:
        async with _client(ctx) as client:
            return await client.upload(file, content_type)

    try:
        url = asyncio.run(run())
    except (BucketViewError, httpx.HTTPError) as e:
        raise click.ClickException(_message(e)) from e
    console.print(url, soft_wrap=True)


@cli.command()
@click.argument("key")
@click.option("--ttl", type=int, default=None, help="Seconds the link stays valid")
@click.pass_context
def presign(ctx: click.Context, key: str, ttl: int | None):
    """Print a temporary download link for KEY."""

    async def run() -> str:
        async with _client(ctx) as client:
            return await client.presign(key, ttl)

    try:
        url = asyncio.run(run())
    except (BucketViewError, httpx.HTTPError) as e:
        raise click.ClickException(_message(e)) from e
    console.print(url, soft_wrap=True)


@cli.command("ls")
@click.argument("path", default="")
@click.pass_context
def ls(ctx: click.Context, path: str):
    """List one folder (a pasted file key lists the folder holding it)."""

    async def run() -> Navigator:
        async with _client(ctx) as client:
            nav = Navigator(client.list_objects)
            await nav.commit(normalize(path))
            return nav

    nav = asyncio.run(run())
    _render(nav)
    if nav.state.error:
        ctx.exit(1)


@cli.command()
@click.pass_context
def browse(ctx: click.Context):
    """Interactive folder browser."""
    asyncio.run(_browse(ctx))


async def change_dir(nav: Navigator, arg: str) -> str | None:
    """Open a folder of the current listing, or jump to a typed path (always from the root)."""
    entry = nav.find(arg)
    if entry is not None:
        if not entry.is_folder:
            return f"{entry.display_name} is not a folder"
        await nav.open(entry)
        return None
    nav.set_input(arg)
    await nav.submit_input()
    return None


async def _browse(ctx: click.Context) -> None:
    store = _store(ctx)
    client = _client(ctx)
    nav = Navigator(client.list_objects)
    seen = store.fingerprint
    console.print(f"[dim]{BROWSE_HELP}[/dim]")
    try:
        await nav.start()
        _render(nav)
        while True:
            line = (await asyncio.to_thread(Prompt.ask, f"[bold]/{nav.current_prefix}[/bold]", default="")).strip()
            cmd, _, arg = line.partition(" ")
            arg = arg.strip()
            if cmd in ("quit", "exit", "q"):
                break
            if cmd in ("", "help", "?"):
                console.print(f"[dim]{BROWSE_HELP}[/dim]")
                continue
            if cmd == "provider":
                if arg not in ("r2", "aws"):
                    console.print("[red]provider must be r2 or aws[/red]")
                    continue
                text, _ = store.load()
                store.save(text, arg)
            elif cmd == "ls":
                pass
            elif cmd == "refresh":
                await nav.refresh()
            elif cmd == "up":
                await nav.ascend()
            elif cmd == "cd":
                problem = await change_dir(nav, arg)
                if problem:
                    console.print(f"[red]{problem}[/red]")
                    continue
            elif cmd == "link":
                entry = nav.find(arg)
                key = await nav.open(entry) if entry is not None and not entry.is_folder else None
                if key is None:
                    console.print(f"[red]no file named {arg!r} here[/red]")
                    continue
                try:
                    console.print(await client.presign(key), soft_wrap=True)
                except (BucketViewError, httpx.HTTPError) as e:
                    console.print(f"[red]⚠ {_message(e)}[/red]")
                continue
            else:
                console.print(f"[red]unknown command {cmd!r}[/red]")
                continue

            if store.fingerprint != seen:
                seen = store.fingerprint
                provider, record = store.record()
                await client.aclose()
                client = ProxyClient(provider, record, base_url=ctx.obj["proxy_url"])
                nav.rebind(client.list_objects)
                await nav.start()
            _render(nav)
    finally:
        await client.aclose()


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
