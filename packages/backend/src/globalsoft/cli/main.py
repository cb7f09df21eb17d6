"""GlobalSoft CLI — run the server and peek at a running marketplace.

Usage:
    globalsoft serve --port 3000                 # Run the API + realtime relay
    globalsoft init-db                           # Create tables
    globalsoft products --category tools         # List active products
    globalsoft sellers                           # Seller directory
    globalsoft stats --token $TOKEN              # Seller dashboard totals
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3000"


def _api_url() -> str:
    return os.environ.get("GLOBALSOFT_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the GlobalSoft backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Inside an existing event loop (e.g. CliRunner under an async test)
    the coroutine is offloaded to a worker thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


async def _request(path: str, token: Optional[str], params: dict) -> httpx.Response:
    async with _client(token) as client:
        return await client.get(path, params={k: v for k, v in params.items() if v})


def _get(path: str, token: Optional[str] = None, **params) -> dict | list:
    """GET a JSON resource; print the error and exit 1 on 4xx/5xx."""
    resp = _run(_request(path, token, params))
    if resp.status_code >= 400:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        click.secho(f"Error {resp.status_code}: {detail}", fg="red", err=True)
        sys.exit(1)
    return resp.json()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="globalsoft")
def cli():
    """GlobalSoft marketplace backend."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default from settings).")
@click.option("--port", default=None, type=int, help="Port (default from settings).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP API and realtime relay with uvicorn."""
    import uvicorn

    from globalsoft.config import settings

    uvicorn.run(
        "globalsoft.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create any missing tables."""
    from globalsoft.config import settings
    from globalsoft.db.engine import engine, init_models

    async def _init():
        await init_models(engine)
        await engine.dispose()

    _run(_init())
    click.secho(f"Tables ready at {settings.database_url}", fg="green")


@cli.command()
@click.option("--category", default=None)
@click.option("--search", default=None)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
def products(category: Optional[str], search: Optional[str], as_json: bool):
    """List active products on a running server."""
    items = _get("/api/products", category=category, search=search)
    if as_json:
        click.echo(_pretty_json(items))
        return
    if not items:
        click.echo("No products.")
        return
    for p in items:
        click.echo(
            f"#{p['id']:<5} {p['name'][:40]:<40} "
            f"${p['price']:>8.2f}  {p.get('category') or '-':<12} "
            f"by {p.get('seller_name') or '?'}"
        )


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
def sellers(as_json: bool):
    """List sellers and how many products each has."""
    items = _get("/api/sellers")
    if as_json:
        click.echo(_pretty_json(items))
        return
    if not items:
        click.echo("No sellers.")
        return
    for s in items:
        click.echo(f"#{s['id']:<5} {s['name']:<30} {s['product_count']} product(s)")


@cli.command()
@click.option("--token", envvar="GLOBALSOFT_TOKEN", required=True, help="Seller bearer token.")
def stats(token: str):
    """Show the seller dashboard totals for a token."""
    click.echo(_pretty_json(_get("/api/seller/stats", token=token)))


if __name__ == "__main__":
    cli()
