"""Template publish commands."""

from pathlib import Path
from typing import Annotated

import typer

from templatepub.cli.decorators import handle_errors
from templatepub.cli.helpers.output import (
    get_console,
    print_batch_result,
    print_error_message,
    print_success_message,
    print_template_status,
)
from templatepub.core.errors import TemplatePublishFailedError
from templatepub.core.structlog_logger import get_struct_logger
from templatepub.publish.models import TrackingHandle
from templatepub.publish.poller import StatusPoller
from templatepub.publish.scheduler import DelayScheduler
from templatepub.publish.workflow import upload_and_publish
from templatepub.service.client import create_template_service_client
from templatepub.storage.staging import create_staging_store


logger = get_struct_logger(__name__)


@handle_errors
def publish(
    ctx: typer.Context,
    archives: Annotated[
        list[Path],
        typer.Argument(
            help="Template zip archives to publish",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    revision: Annotated[
        str,
        typer.Option(
            "--revision",
            "-r",
            help="Source revision (e.g. git hash) used to namespace staged archives",
        ),
    ],
    no_upload: Annotated[
        bool,
        typer.Option(
            "--no-upload",
            help="Archives are already staged for this revision; skip the upload",
        ),
    ] = False,
) -> None:
    """Stage, publish and clean up template archives."""
    config = ctx.obj.config
    store = create_staging_store(config.storage)
    console = get_console()

    try:
        result = upload_and_publish(
            archives, revision, config, store, upload=not no_upload
        )
    except TemplatePublishFailedError as e:
        if e.result is not None:
            print_batch_result(e.result, console)
        print_error_message(str(e), console)
        raise

    print_batch_result(result, console)
    print_success_message(f"Published {len(result.outcomes)} template(s)", console)


@handle_errors
def status(
    ctx: typer.Context,
    template_id: Annotated[
        str, typer.Argument(help="Template id returned on publish")
    ],
    status_url: Annotated[
        str | None,
        typer.Option("--url", help="Status URL, if the service returned one"),
    ] = None,
) -> None:
    """Check the current status of a published template once."""
    config = ctx.obj.config
    with (
        create_template_service_client(config) as client,
        DelayScheduler() as scheduler,
    ):
        poller = StatusPoller(client, scheduler, interval=config.poll_interval)
        handle = TrackingHandle(
            id=template_id,
            status_url=status_url or client.status_url_for(template_id),
        )
        template_status = poller.check(handle)

    logger.debug(
        "template_status", template_id=template_id, state=template_status.state
    )
    print_template_status(template_status)


def register_commands(app: typer.Typer) -> None:
    """Register publish commands with the main app."""
    app.command(name="publish")(publish)
    app.command(name="status")(status)
