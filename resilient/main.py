"""Main entry point for the resilient CLI.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
and runs one request per command through the ResilientClient.

Example:
    resilient --base-url https://jsonplaceholder.typicode.com --retries 2 --delay 0.1 \\
        get /posts -q userId=1
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Coroutine, Dict, List, Optional

import httpx
import typer
from typing_extensions import Annotated

from resilient.core.services.resilient_client import ResilientClient
from resilient.domain.exceptions import ConfigurationError, ResilientError
from resilient.domain.interfaces.logger import LeveledLogger
from resilient.domain.interfaces.transport import Transport
from resilient.domain.models.common import HttpMethod, LogLevel, RetryOutcome, RetryPolicy
from resilient.infrastructure.cli.display import ConsoleDisplay
from resilient.infrastructure.config.settings import (
    get_base_url,
    get_call_timeout,
    get_config,
    get_log_level,
    get_logger_kind,
    get_request_timeout,
    get_retry_delay,
    get_retry_policy,
    load_configuration,
)
from resilient.infrastructure.monitoring.logger_setup import level_from_name, setup_logging
from resilient.infrastructure.monitoring.loggers import build_logger
from resilient.infrastructure.transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)

display = ConsoleDisplay()


@dataclass
class CliOptions:
    """Global options collected by the app callback; None means 'use configuration'."""
    base_url: Optional[str] = None
    retries: Optional[int] = None
    delay: Optional[float] = None
    timeout: Optional[float] = None
    log_level: Optional[str] = None


# --- Composition Root ---

def resolve_retry_policy(options: CliOptions) -> Optional[RetryPolicy]:
    """Command line retry options win over configuration; None means no retry."""
    if options.retries is None:
        return get_retry_policy()
    delay = options.delay if options.delay is not None else get_retry_delay()
    return RetryPolicy.from_options(options.retries, delay)


def resolve_log_level(options: CliOptions) -> LogLevel:
    if options.log_level:
        return LogLevel[options.log_level.upper()]
    return get_log_level()


def create_transport(options: CliOptions) -> HttpxTransport:
    """Creates the HTTP transport. Patched in tests."""
    base_url = options.base_url or get_base_url() or ""
    return HttpxTransport(base_url=base_url, timeout=get_request_timeout())


def create_logger(options: CliOptions) -> LeveledLogger:
    level = resolve_log_level(options)
    # Also route module loggers (config, transport) at the same threshold
    setup_logging(
        log_level=level_from_name(level.name),
        log_file=get_config('logging.file'),
    )
    kind = get_logger_kind()
    try:
        return build_logger(kind, level)
    except ValueError as e:
        raise ConfigurationError('logging.sink', kind, str(e)) from e


def create_client(options: CliOptions, transport: Transport) -> ResilientClient:
    """Wires configuration, logger sink and transport into a ResilientClient."""
    load_configuration()
    request_logger = create_logger(options)
    policy = resolve_retry_policy(options)
    timeout = options.timeout if options.timeout is not None else get_call_timeout()
    logger.debug(f"Creating client: policy={policy}, timeout={timeout}")
    return ResilientClient(transport, request_logger, retry_policy=policy, timeout=timeout)


async def perform_request(
    options: CliOptions,
    method: HttpMethod,
    url: str,
    body: Any = None,
    query_params: Optional[Dict[str, Any]] = None,
) -> RetryOutcome:
    load_configuration()
    async with create_transport(options) as transport:
        client = create_client(options, transport)
        return await client.request(method, url, body, query_params)


# --- Argument parsing helpers ---

def parse_query(values: Optional[List[str]]) -> Optional[Dict[str, str]]:
    """Turns repeated `key=value` options into a dict."""
    if not values:
        return None
    params: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--query")
        params[key] = value
    return params


def parse_body(text: Optional[str]) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Body is not valid JSON: {e}", param_hint="--body") from e


# --- Helper for Running Async Commands ---

def run_async(coro: Coroutine[Any, Any, RetryOutcome]) -> RetryOutcome:
    """Runs a request coroutine, mapping failures to a non-zero exit code."""
    try:
        return asyncio.run(coro)
    except httpx.HTTPStatusError as e:
        display.display_error(f"{e.response.status_code} {e.response.reason_phrase} for {e.request.url}")
    except httpx.HTTPError as e:
        display.display_error(f"Request failed: {type(e).__name__}: {e}")
    except asyncio.TimeoutError:
        display.display_error("Request timed out")
    except ResilientError as e:
        display.display_error(str(e))
    raise typer.Exit(code=1)


def _run(ctx: typer.Context, method: HttpMethod, url: str, body: Any = None, query: Optional[List[str]] = None) -> None:
    options: CliOptions = ctx.obj or CliOptions()
    query_params = parse_query(query)
    outcome = run_async(perform_request(options, method, url, body, query_params))
    display.display_result(outcome.result, title=f"{method.value} {url}")
    if outcome.retries_used:
        display.display_info(f"Succeeded after {outcome.retries_used} retries")


def _positive_timeout(value: Optional[float]) -> Optional[float]:
    if value is not None and value <= 0:
        raise typer.BadParameter("must be greater than zero")
    return value


# --- Typer App Definition ---
app = typer.Typer(
    name="resilient",
    help="Send HTTP requests with a fixed-delay retry policy and correlated logging.",
    add_completion=False,
)

UrlArgument = Annotated[str, typer.Argument(help="URL to call, relative to the base URL.")]
QueryOption = Annotated[
    Optional[List[str]],
    typer.Option("--query", "-q", help="Query parameter as key=value. Repeatable.")
]
BodyOption = Annotated[Optional[str], typer.Option("--body", "-b", help="JSON payload.")]


@app.callback()
def main_callback(
    ctx: typer.Context,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Base URL for all requests.")] = None,
    retries: Annotated[
        Optional[int], typer.Option("--retries", "-r", min=1, help="Maximum attempts, first one included.")
    ] = None,
    delay: Annotated[
        Optional[float], typer.Option("--delay", "-d", min=0.0, help="Seconds to wait between attempts.")
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", callback=_positive_timeout, help="Deadline in seconds for the whole call."),
    ] = None,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", "-l", help="trace, debug, info, warn or error.")
    ] = None,
):
    """Global options shared by every command."""
    if log_level and log_level.upper() not in LogLevel.__members__:
        raise typer.BadParameter(f"Unknown level '{log_level}'", param_hint="--log-level")
    ctx.obj = CliOptions(base_url=base_url, retries=retries, delay=delay, timeout=timeout, log_level=log_level)


@app.command()
def get(ctx: typer.Context, url: UrlArgument, query: QueryOption = None):
    """Fetch a resource."""
    _run(ctx, HttpMethod.GET, url, query=query)


@app.command()
def post(ctx: typer.Context, url: UrlArgument, body: BodyOption = None, query: QueryOption = None):
    """Create a resource."""
    _run(ctx, HttpMethod.POST, url, parse_body(body), query)


@app.command()
def put(ctx: typer.Context, url: UrlArgument, body: BodyOption = None, query: QueryOption = None):
    """Replace a resource."""
    _run(ctx, HttpMethod.PUT, url, parse_body(body), query)


@app.command()
def patch(ctx: typer.Context, url: UrlArgument, body: BodyOption = None, query: QueryOption = None):
    """Partially update a resource."""
    _run(ctx, HttpMethod.PATCH, url, parse_body(body), query)


@app.command()
def delete(ctx: typer.Context, url: UrlArgument, query: QueryOption = None):
    """Remove a resource."""
    _run(ctx, HttpMethod.DELETE, url, query=query)


def cli_entry_point():
    """Function called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
