# src/serversetup/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from serversetup.bootstrap.executor import RemoteExecutor
from serversetup.bootstrap.identity import LocalIdentityManager
from serversetup.bootstrap.models import Reachability
from serversetup.bootstrap.orchestrator import HostBootstrapper
from serversetup.bootstrap.precheck import check_dependencies
from serversetup.bootstrap.probe import ReachabilityProbe
from serversetup.config.defaults import default_settings_path
from serversetup.config.loader import ensure_settings_file, load_and_validate
from serversetup.errors import ExecError, ServerSetupError
from serversetup.logging.log import init_logging
from serversetup.observers.dispatcher import EventBus
from serversetup.observers.logger import LoggerObserver


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Server Setup: bootstrap SSH access to a fresh host")

PROBE_EXIT_CODES = {
    Reachability.READY: 0,
    Reachability.UNREACHABLE: 1,
    Reachability.AUTH_FAILED: 2,
}

# exit code when the remote command never ran (same as ssh)
EXEC_ERROR_EXIT_CODE = 255

SettingsOption = typer.Option(
    None, "--settings", "-s", help="Settings file (default: $SERVERSETUP_SETTINGS or conf/settings.json)",
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug output on the console"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
):
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=verbose)
    ctx.obj = {"logger": logger, "run_id": run_id, "log_path": log_path}


def _settings_path(settings: Optional[Path]) -> Path:
    path = settings or default_settings_path()
    if not ensure_settings_file(path):
        typer.secho(
            f"Created {path} from the example settings. Edit it and run again.",
            fg=typer.colors.YELLOW,
            err=True,
        )
        raise typer.Exit(code=1)
    return path


def _fail(exc: Exception) -> None:
    typer.secho(f"❌ {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def precheck():
    """Check that required local tools are installed."""
    report = check_dependencies()
    if not report.ok:
        typer.secho(report.message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo("✅ All dependencies installed")


@app.command()
def validate(settings: Optional[Path] = SettingsOption):
    """Validate the settings file."""
    path = _settings_path(settings)
    try:
        cred = load_and_validate(path)
    except ServerSetupError as exc:
        _fail(exc)
    typer.echo(f"✅ {path} OK: {cred.host}:{cred.ssh_port}")


@app.command()
def probe(
    settings: Optional[Path] = SettingsOption,
    timeout: float = typer.Option(3.0, help="TCP connect timeout in seconds"),
    auth_timeout: float = typer.Option(10.0, help="SSH login timeout in seconds"),
):
    """Check that the host is reachable and accepts the root password."""
    path = _settings_path(settings)
    try:
        cred = load_and_validate(path)
    except ServerSetupError as exc:
        _fail(exc)

    result = ReachabilityProbe(transport_timeout=timeout, auth_timeout=auth_timeout).probe(
        cred.host, cred.ssh_port, cred.root_password,
    )
    typer.echo(f"{cred.host}:{cred.ssh_port} {result.value}")
    raise typer.Exit(code=PROBE_EXIT_CODES[result])


@app.command()
def bootstrap(
    ctx: typer.Context,
    settings: Optional[Path] = SettingsOption,
    key: Optional[Path] = typer.Option(None, "--key", help="Private key path (default: ~/.ssh/id_rsa)"),
    retries: int = typer.Option(1, "--retries", min=1, help="Probe attempts while the host is unreachable"),
    retry_delay: float = typer.Option(10.0, "--retry-delay", min=0, help="Seconds between probe attempts"),
):
    """Run the full bootstrap: precheck, settings, key, probe, key upload."""
    path = _settings_path(settings)
    bus = EventBus(observers=[LoggerObserver(ctx.obj["logger"])])
    bootstrapper = HostBootstrapper(
        identity=LocalIdentityManager(private_key_path=key),
        bus=bus,
        run_id=ctx.obj["run_id"],
        unreachable_retries=retries,
        retry_delay=retry_delay,
    )
    try:
        result = bootstrapper.bootstrap(path)
    except ServerSetupError as exc:
        _fail(exc)
    cred = result.credential
    typer.echo(f"✅ {cred.admin_user_name}@{cred.host} now accepts {result.key_pair.public_key_path}")


@app.command()
def run(
    command: str = typer.Argument(..., help="Command to run as root on the host"),
    settings: Optional[Path] = SettingsOption,
    timeout: float = typer.Option(20.0, help="SSH connect timeout in seconds"),
):
    """Run a command on the host as root and exit with its exit code."""
    path = _settings_path(settings)
    try:
        cred = load_and_validate(path)
    except ServerSetupError as exc:
        _fail(exc)

    try:
        outcome = RemoteExecutor(connect_timeout=timeout).run_as_root(
            cred.host, cred.ssh_port, cred.root_password, command,
        )
    except ExecError as exc:
        typer.secho(f"❌ {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXEC_ERROR_EXIT_CODE)

    if outcome.stdout:
        typer.echo(outcome.stdout, nl=False)
    if outcome.stderr:
        typer.echo(outcome.stderr, nl=False, err=True)
    raise typer.Exit(code=outcome.exit_code)


if __name__ == "__main__":
    app()
