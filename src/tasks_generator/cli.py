"""CLI interface for the Tasks Generator."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .export import ExportFormat, export_filename, render_export
from .formatting import format_event_list, format_spec_list, format_task_table
from .generation import generate_all_tasks
from .models import AppConfig, GeneratorInput, Spec, TaskCategory, TemplateType
from .store import BacklogStore, StoreError, TaskNotFoundError
from .event_log import EventLogger

console = Console()

# Windows-compatible symbols (cp1252 doesn't support Unicode checkmarks)
if sys.platform == "win32":
    SYM_OK = "[OK]"
else:
    SYM_OK = "✓"

TEMPLATE_CHOICES = [t.value for t in TemplateType]


def _store(ctx: click.Context) -> BacklogStore:
    return ctx.obj["store"]


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def _resolve_task_ids(spec: Spec, refs: tuple[str, ...]) -> list[str]:
    """Expand full ids or unique id prefixes to full task ids.

    Raises:
        TaskNotFoundError: If a reference matches no task.
        click.BadParameter: If a prefix matches more than one task.
    """
    resolved = []
    for ref in refs:
        matches = [t.id for t in spec.tasks if t.id and t.id.startswith(ref)]
        if not matches:
            raise TaskNotFoundError(ref)
        if len(matches) > 1 and ref not in matches:
            raise click.BadParameter(f"Task id prefix '{ref}' is ambiguous")
        resolved.append(ref if ref in matches else matches[0])
    return resolved


@click.group()
@click.version_option(version=__version__)
@click.option('--data-dir', type=click.Path(file_okay=False), envvar='TASKSGEN_DATA_DIR',
              help='Directory for stored specs (default: .tasksgen)')
@click.pass_context
def main(ctx: click.Context, data_dir: Optional[str]):
    """Tasks Generator - turn a project description into a backlog."""
    config = AppConfig.load(data_dir)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["store"] = BacklogStore.from_config(config)


@main.command()
@click.option('--goal', prompt='Project goal', help='What the project should achieve')
@click.option('--users', prompt='Target users', help='Comma-separated user roles')
@click.option('--constraints', default='', help='Constraints (budget, deadline, compliance, ...)')
@click.option('--template', 'template_type', type=click.Choice(TEMPLATE_CHOICES), default='web',
              help='Platform type')
@click.option('--dry-run', is_flag=True, help='Preview without saving')
@click.pass_context
def generate(
    ctx: click.Context,
    goal: str,
    users: str,
    constraints: str,
    template_type: str,
    dry_run: bool
):
    """Generate a backlog from a project description and save it.

    \b
    Examples:
        tasksgen generate --goal "Track attendance" --users "students, teachers"
        tasksgen generate --goal "Ship app" --users admins --template mobile --dry-run
    """
    if dry_run:
        items = generate_all_tasks(GeneratorInput(
            spec_id="preview",
            goal=goal,
            users=users,
            constraints=constraints,
            template_type=TemplateType(template_type),
        ))
        console.print(format_task_table(items, title="Backlog preview"))
        console.print("\n[yellow]Dry run complete - nothing saved[/yellow]")
        return

    try:
        spec = _store(ctx).create_spec(
            goal=goal,
            users=users,
            constraints=constraints,
            template_type=template_type,
        )
    except StoreError as e:
        _fail(f"Failed to save spec: {e}")

    console.print(format_task_table(spec.tasks, title=spec.goal))
    console.print(f"\n[green]{SYM_OK}[/green] Saved spec {spec.id} with {len(spec.tasks)} items")


@main.command('list')
@click.option('--limit', default=None, type=int, help='Number of specs to show')
@click.pass_context
def list_specs(ctx: click.Context, limit: Optional[int]):
    """List recently created specs."""
    config: AppConfig = ctx.obj["config"]
    limit = min(max(limit or config.default_list_limit, 1), config.max_list_limit)

    try:
        specs = _store(ctx).list_specs(limit=limit)
    except StoreError as e:
        _fail(str(e))

    if not specs:
        console.print("[yellow]No specs yet. Run 'tasksgen generate' to create one.[/yellow]")
        return
    console.print(format_spec_list(specs))


@main.command()
@click.argument('spec_id')
@click.pass_context
def show(ctx: click.Context, spec_id: str):
    """Show a spec's backlog in sort order."""
    try:
        spec = _store(ctx).get_spec(spec_id)
    except StoreError as e:
        _fail(str(e))

    console.print(f"[bold]Goal:[/bold] {spec.goal}")
    console.print(f"[bold]Users:[/bold] {spec.users}")
    console.print(f"[bold]Constraints:[/bold] {spec.constraints or 'None'}")
    console.print(f"[bold]Template:[/bold] {spec.template_type.value}")
    console.print(format_task_table(spec.tasks))

    counts = {c: len(spec.tasks_by_category(c)) for c in TaskCategory}
    console.print(f"\n[green]Stories:[/green] {counts[TaskCategory.USER_STORY]}  "
                  f"[blue]Engineering:[/blue] {counts[TaskCategory.ENGINEERING_TASK]}  "
                  f"[red]Risks:[/red] {counts[TaskCategory.RISK]}")


@main.command()
@click.argument('spec_id')
@click.option('--format', 'fmt', type=click.Choice([f.value for f in ExportFormat]), default='markdown',
              help='Export format')
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Output file (default: spec-<id>.<ext>); use - for stdout')
@click.pass_context
def export(ctx: click.Context, spec_id: str, fmt: str, output: Optional[str]):
    """Export a spec's backlog as Markdown or plain text."""
    try:
        spec = _store(ctx).get_spec(spec_id)
    except StoreError as e:
        _fail(str(e))

    content = render_export(spec, fmt)
    if output == "-":
        click.echo(content)
        return

    output_path = Path(output or export_filename(spec, fmt))
    output_path.write_text(content, encoding="utf-8")
    console.print(f"[green]{SYM_OK}[/green] Exported to {output_path}")


@main.command()
@click.argument('spec_id')
@click.argument('task_ids', nargs=-1)
@click.option('--move', 'move_id', help='Task id to move (instead of giving the full order)')
@click.option('--to', 'position', type=int, help='New 0-based position for --move')
@click.pass_context
def reorder(
    ctx: click.Context,
    spec_id: str,
    task_ids: tuple[str, ...],
    move_id: Optional[str],
    position: Optional[int]
):
    """Reorder a spec's tasks.

    Either pass every task id in the new order, or move one task with
    --move ID --to POSITION. Ids may be shortened to a unique prefix.
    """
    store = _store(ctx)
    try:
        spec = store.get_spec(spec_id)
        if move_id:
            if position is None:
                raise click.BadParameter("--move requires --to")
            order = [t.id for t in spec.tasks]
            (moved,) = _resolve_task_ids(spec, (move_id,))
            order.remove(moved)
            order.insert(max(0, min(position, len(order))), moved)
        else:
            order = _resolve_task_ids(spec, task_ids)
        tasks = store.reorder_items(spec.id, order)
    except StoreError as e:
        _fail(str(e))

    console.print(format_task_table(tasks))
    console.print(f"[green]{SYM_OK}[/green] Reordered {len(tasks)} tasks")


@main.command()
@click.argument('spec_id')
@click.argument('group_name')
@click.argument('task_ids', nargs=-1, required=True)
@click.pass_context
def group(ctx: click.Context, spec_id: str, group_name: str, task_ids: tuple[str, ...]):
    """Put tasks into a named group."""
    store = _store(ctx)
    try:
        spec = store.get_spec(spec_id)
        tasks = store.group_items(spec.id, _resolve_task_ids(spec, task_ids), group_name)
    except StoreError as e:
        _fail(str(e))

    console.print(format_task_table(tasks))
    console.print(f"[green]{SYM_OK}[/green] Grouped {len(task_ids)} task(s) as '{group_name}'")


@main.command()
@click.argument('spec_id')
@click.argument('task_id')
@click.option('--title', help='New title')
@click.option('--description', help='New description')
@click.option('--group', 'group_name', help='New group name')
@click.pass_context
def edit(
    ctx: click.Context,
    spec_id: str,
    task_id: str,
    title: Optional[str],
    description: Optional[str],
    group_name: Optional[str]
):
    """Edit a task's title, description or group."""
    store = _store(ctx)
    try:
        spec = store.get_spec(spec_id)
        (full_id,) = _resolve_task_ids(spec, (task_id,))
        task = store.update_item(full_id, title=title, description=description, group_name=group_name)
    except StoreError as e:
        _fail(str(e))

    console.print(f"[green]{SYM_OK}[/green] Updated task {task.id}: {task.title}")


@main.command()
@click.argument('spec_id')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_context
def delete(ctx: click.Context, spec_id: str, yes: bool):
    """Delete a spec and its backlog."""
    if not yes and not click.confirm(f"Delete spec {spec_id}?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    try:
        _store(ctx).delete_spec(spec_id)
    except StoreError as e:
        _fail(str(e))

    console.print(f"[green]{SYM_OK}[/green] Deleted spec {spec_id}")


@main.command()
@click.option('--spec', 'spec_id', help='Only events for this spec')
@click.option('--lines', default=20, help='Number of recent events to show')
@click.pass_context
def events(ctx: click.Context, spec_id: Optional[str], lines: int):
    """Show recent store events."""
    logger: EventLogger = _store(ctx).events
    entries = logger.tail(lines, spec_id=spec_id)

    if not entries:
        console.print("[yellow]No events recorded yet.[/yellow]")
        return
    console.print(format_event_list(entries))


@main.command()
@click.option('--host', default='127.0.0.1', help='Host to bind to')
@click.option('--port', default=8000, help='Port to listen on')
@click.pass_context
def serve(ctx: click.Context, host: str, port: int):
    """Run the HTTP API server."""
    from .api import run_server

    config: AppConfig = ctx.obj["config"]
    console.print(f"[bold]Serving Tasks Generator API[/bold] on http://{host}:{port}")
    console.print(f"  Data dir: {config.data_path.resolve()}")
    run_server(config, host=host, port=port)


if __name__ == "__main__":
    main()
