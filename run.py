#!/usr/bin/env python3
"""
NoteKeep entry script.

    python run.py                                 # project info
    python run.py --action server --reload -v     # dev server
    python run.py --action health                 # config, secret, app
    python run.py --action config                 # YAML settings (no secrets)
    python run.py --action test --test-type unit
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notekeep.backend.core.logging import get_logger, setup_logging

TEST_SUITES = {
    "all": "tests/",
    "unit": "tests/unit",
    "integration": "tests/integration",
}


def validate_project_root() -> Path:
    """Exit with status 1 unless the .project_root marker sits beside this script."""
    if (PROJECT_ROOT / ".project_root").exists():
        return PROJECT_ROOT
    click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
    sys.exit(1)


def _log_level(verbose: bool, debug: bool) -> str:
    if debug:
        return "DEBUG"
    return "INFO" if verbose else "WARNING"


# ---------------------------------------------------------------------------
# server
# ---------------------------------------------------------------------------


def run_server(logger: Any, host: str | None, port: int | None, reload: bool) -> None:
    """Run uvicorn on notekeep.backend.main:app in a child process."""
    from notekeep.backend.core.config import get_app_config

    configured = get_app_config().application.server
    host = host or configured.host
    port = port or configured.port

    cmd = [
        sys.executable, "-m", "uvicorn", "notekeep.backend.main:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"NoteKeep API on http://{host}:{port} (Ctrl+C to stop)")
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


# ---------------------------------------------------------------------------
# health
# ---------------------------------------------------------------------------


def _check_yaml() -> str:
    from notekeep.backend.core.config import get_app_config, get_server_base_url

    return f"{get_app_config().application.name} at {get_server_base_url()}"


def _check_secret() -> str:
    from notekeep.backend.core.config import get_settings

    get_settings()
    return "SESSION_SECRET set"


def _check_app() -> str:
    from notekeep.backend.main import get_app

    return f"routes: {len(get_app().routes)}"


HEALTH_CHECKS: list[tuple[str, Callable[[], str]]] = [
    ("YAML configuration", _check_yaml),
    ("Session secret", _check_secret),
    ("FastAPI application", _check_app),
]


def check_health(logger: Any) -> None:
    """Run each startup check and exit 1 if any fails."""
    failures = 0
    click.echo("Health checks")
    click.echo("-" * 50)
    for name, check in HEALTH_CHECKS:
        try:
            detail = check()
        except Exception as e:
            failures += 1
            logger.error("Health check failed", extra={"check": name, "error": str(e)})
            click.echo(f"  {click.style('FAIL', fg='red')}  {name}: {e}")
        else:
            click.echo(f"  {click.style('PASS', fg='green')}  {name} ({detail})")
    click.echo("-" * 50)

    if failures:
        click.secho(f"{failures} check(s) failed.", fg="yellow")
        click.echo("The session secret is read from config/.env; see config/.env.example.")
        sys.exit(1)
    click.secho("All checks passed.", fg="green")


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


def _print_tree(values: dict[str, Any], depth: int = 1) -> None:
    pad = "  " * depth
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _print_tree(value, depth + 1)
        else:
            click.echo(f"{pad}{key}: {value}")


def show_config(logger: Any) -> None:
    """Print every YAML section. Secrets live in .env and are never shown."""
    from notekeep.backend.core.config import get_app_config

    try:
        config = get_app_config()
    except (ValueError, FileNotFoundError) as e:
        logger.error("Configuration invalid", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    for section in ("application", "logging", "security"):
        click.echo(f"\n{section}.yaml")
        click.echo("-" * 40)
        _print_tree(getattr(config, section).model_dump())


# ---------------------------------------------------------------------------
# test / info
# ---------------------------------------------------------------------------


def run_tests(logger: Any, test_type: str) -> None:
    """Run pytest on the chosen suite and exit with its status."""
    cmd = [sys.executable, "-m", "pytest", TEST_SUITES[test_type], "-v"]
    logger.info("Running tests", extra={"suite": test_type})
    click.echo(f"Running: {' '.join(cmd)}\n")
    sys.exit(subprocess.run(cmd).returncode)


def show_info(logger: Any) -> None:
    from notekeep.backend.core.config import get_app_config

    application = get_app_config().application
    click.echo(f"{application.name} {application.version}")
    click.echo(application.description)
    click.echo()
    click.echo("Actions:")
    click.echo("  --action server   Start the API server (--host, --port, --reload)")
    click.echo("  --action health   Check configuration, session secret and app wiring")
    click.echo("  --action config   Print YAML settings")
    click.echo("  --action test     Run pytest (--test-type all|unit|integration)")
    click.echo("  --action info     Show this text")
    click.echo()
    click.echo("Logging: --verbose/-v for INFO, --debug/-d for DEBUG")
    logger.debug("Info displayed")


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "health", "config", "test", "info"]),
    default="info",
    show_default=True,
    help="What to do.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Bind address for the server action.")
@click.option("--port", default=None, type=int, help="Port for the server action.")
@click.option("--reload", is_flag=True, help="Auto-reload for the server action.")
@click.option(
    "--test-type",
    type=click.Choice(list(TEST_SUITES)),
    default="all",
    show_default=True,
    help="Suite for the test action.",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
) -> None:
    """NoteKeep backend: run the server, check health, show config, run tests."""
    validate_project_root()

    level = _log_level(verbose, debug)
    setup_logging(level=level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("run.py invoked", extra={"action": action, "log_level": level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type)
    else:
        show_info(logger)


if __name__ == "__main__":
    main()
