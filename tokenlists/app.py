"""Typer CLI entrypoint for tokenlists."""

from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Optional, Sequence

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from typer import BadParameter

from .config import ConfigRepository, TokenListsSettings, build_config
from .errors import ConfigError
from .infra import InMemoryPrivacyGuard, SQLiteManager
from .logging_conf import configure_logging, tail_log
from .manager import TokensList
from .types import Token, TokenList, format_rfc3339, parse_address

app = typer.Typer(
    help="Token list aggregation command line tool",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Log inspection commands",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()

DEFAULT_REFRESH_TIMEOUT = 60.0


@dataclass
class AppState:
    repository: ConfigRepository
    settings: TokenListsSettings
    storage: SQLiteManager


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    configure_logging(verbose=verbose, log_dir=repository.locator.logs_dir)
    settings = repository.load_settings()
    return AppState(repository=repository, settings=settings, storage=SQLiteManager())


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _open_tokens_list(state: AppState, offline: bool) -> TokensList:
    """Build a facade over the configured cache; ``offline`` keeps it off the network."""

    privacy_guard = InMemoryPrivacyGuard(True) if offline else None
    try:
        config = build_config(
            state.settings, state.repository, manager=state.storage, privacy_guard=privacy_guard
        )
        return TokensList(config)
    except (ConfigError, OSError) as exc:
        console.print(f"Invalid configuration: {exc}", style="red")
        raise typer.Exit(code=1) from exc


def _load_snapshot(state: AppState) -> TokensList:
    tokens_list = _open_tokens_list(state, offline=True)
    tokens_list.start(queue.Queue())
    tokens_list.stop()
    return tokens_list


def _render_tokens_table(tokens: Sequence[Token], title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Chain", style="magenta", justify="right")
    table.add_column("Symbol", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Address", style="green", no_wrap=True)
    table.add_column("Decimals", justify="right")
    table.add_column("Custom", style="yellow")
    for token in tokens:
        table.add_row(
            str(token.chain_id),
            token.symbol,
            token.name,
            token.checksum_address,
            str(token.decimals),
            "yes" if token.custom_token else "",
        )
    return table


def _render_lists_table(lists: Sequence[tuple[str, TokenList]]) -> Table:
    table = Table(title=f"Token lists · {len(lists)}", box=box.SIMPLE_HEAD)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Version", style="magenta")
    table.add_column("Tokens", justify="right")
    table.add_column("Source", style="green", overflow="fold")
    table.add_column("Fetched", style="yellow")
    for list_id, token_list in lists:
        table.add_row(
            list_id,
            token_list.name,
            str(token_list.version),
            str(len(token_list.tokens)),
            token_list.source or "-",
            token_list.fetched_timestamp or "-",
        )
    return table


app.add_typer(log_app, name="log", help="Show log files")


@app.callback()
def main(
    ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging", is_flag=True)
) -> None:
    ctx.obj = build_state(verbose)


@app.command("tokens", help="List the unique tokens of the current snapshot.")
def tokens_command(
    ctx: typer.Context,
    chain: Optional[int] = typer.Option(None, "--chain", help="Only show tokens on this chain ID."),
) -> None:
    tokens_list = _load_snapshot(_get_state(ctx))
    if chain is None:
        tokens = tokens_list.unique_tokens()
    else:
        tokens = tokens_list.get_tokens_by_chain(chain)
    tokens = sorted(tokens, key=lambda token: (token.chain_id, token.symbol.lower(), token.address))
    console.print(_render_tokens_table(tokens, title=f"Tokens · {len(tokens)}"))


@app.command("lists", help="List the token lists of the current snapshot.")
def lists_command(ctx: typer.Context) -> None:
    tokens_list = _load_snapshot(_get_state(ctx))
    lists = [(list_id, tokens_list.token_list(list_id)) for list_id in tokens_list.token_list_ids()]
    console.print(_render_lists_table(lists))


@app.command("token", help="Look up a single token by chain ID and address.")
def token_command(
    ctx: typer.Context,
    chain: int = typer.Argument(..., help="Chain ID."),
    address: str = typer.Argument(..., help="Token contract address (0x...)."),
) -> None:
    parsed = parse_address(address)
    if parsed is None:
        raise BadParameter(f"not a hex address: {address}", param_hint="ADDRESS")
    tokens_list = _load_snapshot(_get_state(ctx))
    token = tokens_list.get_token_by_chain_address(chain, parsed)
    if token is None:
        console.print(f"No token {address} on chain {chain}.", style="yellow")
        raise typer.Exit(code=1)
    console.print(_render_tokens_table([token], title=token.key))
    if token.cross_chain_id:
        console.print(f"Cross-chain ID: {token.cross_chain_id}", style="dim")


@app.command("refresh", help="Fetch remote lists now and rebuild the snapshot.")
def refresh_command(
    ctx: typer.Context,
    timeout: float = typer.Option(
        DEFAULT_REFRESH_TIMEOUT, "--timeout", help="Seconds to wait for the refresh."
    ),
) -> None:
    state = _get_state(ctx)
    tokens_list = _open_tokens_list(state, offline=False)
    notify: queue.Queue = queue.Queue()
    tokens_list.start(notify)
    try:
        tokens_list.refresh_now()
        try:
            notify.get(timeout=timeout)
        except queue.Empty:
            console.print(f"Refresh did not finish within {timeout:g}s.", style="red")
            raise typer.Exit(code=1)
    finally:
        tokens_list.stop()
    last_refresh = tokens_list.last_refresh_time()
    console.print(
        f"Snapshot rebuilt: {len(tokens_list.unique_tokens())} tokens "
        f"from {len(tokens_list.token_lists())} lists.",
        style="green",
    )
    if last_refresh is not None:
        console.print(f"Last refresh: {format_rfc3339(last_refresh)}", style="dim")


@log_app.command("show", help="Show the most recent lines of the application log.")
def log_show(
    ctx: typer.Context,
    tail: int = typer.Option(100, "--tail", help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Show error.log instead.", is_flag=True),
) -> None:
    logs_dir = _get_state(ctx).repository.locator.logs_dir
    path = logs_dir / ("error.log" if errors else "tokenlists.log")
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(lines)} lines", style="cyan")
    console.print("".join(lines), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
