# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from firstboot.config.loader import dump_yaml, load_config
from firstboot.errors import ConfigError, ProvisionError
from firstboot.execution.runner import CommandRunner
from firstboot.logging.log import DEFAULT_LOG_DIR, init_logging
from firstboot.observers.sinks import JsonFileObserver, LoggerObserver
from firstboot.provision.engine import ProvisionOptions, Provisioner
from firstboot.provision.gate import DEFAULT_MARKER_DIR, IdempotencyGate
from firstboot.provision.hostname import DEFAULT_HOSTNAME_FILE
from firstboot.system.local import LocalSystem


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="First-boot machine provisioner", no_args_is_help=True)

DEFAULT_CONFIG = Path("./var/config.yaml")

ConfigOpt = typer.Option(
    DEFAULT_CONFIG, "--config", "-c",
    envvar="FIRSTBOOT_CONFIG",
    help="Provisioning YAML to load",
)
MarkerDirOpt = typer.Option(
    DEFAULT_MARKER_DIR, "--marker-dir",
    envvar="FIRSTBOOT_MARKER_DIR",
    help="Directory holding one marker file per provisioned instance id",
)


@app.command()
def apply(
    config: Path = ConfigOpt,
    marker_dir: str = MarkerDirOpt,
    hostname_file: str = typer.Option(DEFAULT_HOSTNAME_FILE, "--hostname-file"),
    command_timeout: Optional[float] = typer.Option(
        None, "--command-timeout", help="Kill any single command after this many seconds"
    ),
    log_dir: Path = typer.Option(DEFAULT_LOG_DIR, "--log-dir", envvar="FIRSTBOOT_LOG_DIR"),
    events_file: Optional[Path] = typer.Option(
        None, "--events-file", help="Append lifecycle events as JSON lines"
    ),
    debug: bool = typer.Option(False, "--debug"),
):
    """Provision this machine from CONFIG, once per instance id."""
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=debug)
    logger.info("starting up config=%s run_id=%s", config, run_id)

    try:
        cfg = load_config(config)
    except ConfigError as e:
        logger.error("%s", e)
        raise typer.Exit(code=1)

    observers = [LoggerObserver(logger)]
    if events_file is not None:
        observers.append(JsonFileObserver(events_file))

    options = ProvisionOptions(
        marker_dir=marker_dir,
        hostname_file=hostname_file,
        command_timeout=command_timeout,
    )
    system = LocalSystem(CommandRunner(timeout=command_timeout))

    try:
        result = Provisioner(system, options, observers, run_id).apply(cfg)
    except ProvisionError as e:
        logger.error("provisioning failed: %s", e)
        if log_path:
            logger.error("full trace in %s", log_path)
        raise typer.Exit(code=1)

    typer.echo(result.summary())


@app.command()
def validate(
    config: Path = ConfigOpt,
    show: bool = typer.Option(False, "--show", help="Print the normalized config"),
):
    """Parse and validate CONFIG without touching the machine."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"OK {cfg.summary()}")
    if show:
        typer.echo(dump_yaml(cfg), nl=False)


@app.command()
def status(
    config: Path = ConfigOpt,
    marker_dir: str = MarkerDirOpt,
):
    """Report whether the instance id in CONFIG has already been provisioned."""
    try:
        cfg = load_config(config)
        done = IdempotencyGate(LocalSystem(), marker_dir).exists(cfg.instance_id)
    except ProvisionError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    state = "provisioned" if done else "pending"
    typer.echo(f"{cfg.instance_id}: {state}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
