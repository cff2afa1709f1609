"""Main CLI application for templatepub."""

import logging
import sys
from typing import Annotated

import typer

from templatepub import __version__
from templatepub.cli.decorators.error_handling import print_stack_trace_if_verbose
from templatepub.config.models import PublishConfig
from templatepub.core.logging import setup_logging


__all__ = ["app", "main", "AppContext"]

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
    ):
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self._config: PublishConfig | None = None

    @property
    def config(self) -> PublishConfig:
        """Publish configuration, loaded on first use."""
        if self._config is None:
            from templatepub.config.user_config import load_config

            self._config = load_config(self.config_file)
        return self._config


app = typer.Typer(
    name="templatepub",
    help=f"""templatepub v{__version__}

Publish packaged template projects to the template validation service.

Archives are staged in S3, submitted to the service, polled until the
service validates or rejects them, and removed from staging afterwards.

Common workflows:
  • Publish:       templatepub publish dist/*.zip --revision $(git rev-parse HEAD)
  • Check status:  templatepub status <template-id>""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    if value:
        print(f"templatepub v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """templatepub - template publishing tool."""
    app_context = AppContext(
        verbose=verbose, log_file=log_file, config_file=config_file
    )
    ctx.obj = app_context

    if debug or verbose >= 2:
        log_level_name = "DEBUG"
    elif verbose == 1:
        log_level_name = "INFO"
    else:
        log_level_name = _configured_log_level(app_context)

    setup_logging(log_level_name=log_level_name, log_file=log_file)


def _configured_log_level(app_context: AppContext) -> str:
    """Log level from the config file, WARNING if it cannot be loaded yet."""
    from templatepub.core.errors import ConfigError

    try:
        return app_context.config.log_level
    except ConfigError:
        # Reported again by the command that actually needs the config
        return "WARNING"


def main() -> int:
    """Main CLI entry point."""
    exit_code = 0

    try:
        app()
    except SystemExit as e:
        # Capture SystemExit code (normal CLI exit)
        exit_code = e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print_stack_trace_if_verbose()
        exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
