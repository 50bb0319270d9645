"""Offline sync CLI commands."""
import asyncio
import sys
from pathlib import Path

import click

from synclab.config import SyncConfig
from synclab.core.constants import QUEUE_PEEK_DEFAULT
from synclab.offline import FileStorage, init_session

from .output import print_error, print_json, print_submissions, print_success


def _open_session(ctx: click.Context, online: bool = False):
    config: SyncConfig = ctx.obj["config"]
    return init_session(FileStorage(config.storage_dir), config, online=online)


def _fail(message: str):
    print_error(message)
    sys.exit(1)


@click.group()
@click.option('--storage-dir', type=click.Path(file_okay=False), default=None,
              help='Directory holding the persisted queue and server state')
@click.option('--quiet', '-q', is_flag=True, help='Do not print receipts')
@click.pass_context
def offline(ctx: click.Context, storage_dir: str | None, quiet: bool):
    """Offline submission queue commands."""
    config = SyncConfig.from_env()
    if storage_dir:
        config.storage_dir = Path(storage_dir)
    if quiet:
        config.emit_receipts = False
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@offline.command()
@click.pass_context
def status(ctx: click.Context):
    """Show rehydrated queue, sync state and server state."""
    try:
        session = _open_session(ctx)
        print_json(session.status())
    except Exception as e:
        _fail(f"Status check failed: {e}")


@offline.command('queue')
@click.option('--limit', '-n', default=QUEUE_PEEK_DEFAULT, help='Number of submissions to show')
@click.pass_context
def show_queue(ctx: click.Context, limit: int):
    """List pending submissions, oldest first."""
    try:
        session = _open_session(ctx)
        pending = session.queue.peek(limit)

        if not pending:
            click.echo("Queue is empty")
            return

        click.echo(f"Showing {len(pending)} of {len(session.queue)} pending submissions:\n")
        print_submissions(pending)
    except Exception as e:
        _fail(f"Queue list failed: {e}")


@offline.command()
@click.argument('answer')
@click.option('--online', is_flag=True, help='Treat connectivity as available and sync immediately')
@click.pass_context
def submit(ctx: click.Context, answer: str, online: bool):
    """Queue ANSWER as a submission."""
    async def _submit():
        session = _open_session(ctx, online=online)
        submission = await session.submit(answer)
        return session, submission

    try:
        session, submission = asyncio.run(_submit())
        print_success(f"Submitted {submission.answer!r} at {submission.submitted_at}")
        print_json({
            "sync_state": session.sync_state,
            "pending_count": len(session.queue),
            "remote_count": len(session.remote),
        })
    except Exception as e:
        _fail(f"Submit failed: {e}")


@offline.command('flush')
@click.pass_context
def do_flush(ctx: click.Context):
    """Replay the pending queue to the simulated server."""
    async def _flush():
        session = _open_session(ctx, online=True)
        result = await session.flush()
        return session, result

    try:
        session, result = asyncio.run(_flush())
        print_success(f"Synced {result.synced_count} submissions")
        print_json({
            "status": result.status,
            "synced_count": result.synced_count,
            "cycles": result.cycles,
            "remote_count": result.remote_count,
            "sync_history": session.sync_history,
        })
    except Exception as e:
        _fail(f"Flush failed: {e}")


@offline.command()
@click.pass_context
def server(ctx: click.Context):
    """Show submissions accepted by the simulated server."""
    try:
        print_json(_open_session(ctx).server_state())
    except Exception as e:
        _fail(f"Server read failed: {e}")


@offline.command()
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_context
def clear(ctx: click.Context, yes: bool):
    """Drop pending submissions without syncing them."""
    try:
        session = _open_session(ctx)
        size = len(session.queue)
        if size == 0:
            click.echo("Queue already empty")
            return

        if yes or click.confirm(f"Clear {size} pending submissions?"):
            session.queue.clear()
            print_success("Queue cleared")
    except Exception as e:
        _fail(f"Clear failed: {e}")
