"""Command Line Interface for DroidKeep."""

import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .adb import ADBDevice, ADBError, RootAccess, check_adb_available, list_devices, probe_root
from .backup import BackupSession, InsufficientSpaceError, RunReport, TaskRunner, check_disk_space, write_reports
from .config import get_config, load_config, set_config
from .tasks import BackupTask, SelectionError, TaskContext, TaskRegistry, TaskResult, TaskStatus, parse_selection
from .util import format_duration, format_size, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

MARKS = {
    TaskStatus.SUCCESS: "[green]✓[/green]",
    TaskStatus.FAILED: "[red]✗[/red]",
    TaskStatus.SKIPPED: "[yellow]![/yellow]",
}


def setup_cli_logging(verbose: bool = False):
    """Setup logging for CLI."""
    level = "DEBUG" if verbose else get_config().log_level
    setup_logging(level=level, console=console)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Configuration file path")
def cli(verbose: bool, config: Optional[Path]):
    """DroidKeep - back up an Android device over ADB."""
    if config:
        set_config(load_config(config))

    setup_cli_logging(verbose)

    if not check_adb_available(get_config().adb_path):
        console.print("[red]Error: ADB is not available or not in PATH[/red]")
        console.print("Please ensure Android Debug Bridge (ADB) is installed and accessible.")
        sys.exit(1)


@cli.command("devices")
def devices_command():
    """List connected devices."""
    try:
        devices = list_devices(get_config().adb_path)
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    _list_devices(devices)


def _list_devices(devices: List[ADBDevice]):
    """Helper to display device list."""
    if not devices:
        console.print("[yellow]No devices found[/yellow]")
        return

    table = Table(title="Connected Devices")
    table.add_column("Serial", style="cyan")
    table.add_column("Model", style="white")
    table.add_column("Brand", style="white")
    table.add_column("Android", style="white")

    for device in devices:
        try:
            info = device.get_device_info()
            table.add_row(info.serial, info.model, info.brand, info.android_version)
        except ADBError:
            table.add_row(device.serial, "Unknown", "Unknown", "Unknown")

    console.print(table)


def _get_target_device(serial: Optional[str]) -> Optional[ADBDevice]:
    """Get target device for operations."""
    config = get_config()
    try:
        devices = list_devices(config.adb_path)
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        return None

    for device in devices:
        device.timeout = config.command_timeout

    if not devices:
        console.print("[red]No devices found. Connect the phone and enable USB debugging.[/red]")
        return None

    if serial:
        device = next((d for d in devices if d.serial == serial), None)
        if not device:
            console.print(f"[red]Device with serial {serial} not found[/red]")
        return device

    if len(devices) == 1:
        return devices[0]

    console.print("[yellow]Multiple devices found. Please specify --serial[/yellow]")
    _list_devices(devices)
    return None


@cli.command("probe")
@click.option("--serial", "-s", help="Device serial number")
def probe_command(serial: Optional[str]):
    """Show device information and root access."""
    device = _get_target_device(serial)
    if not device:
        sys.exit(1)

    try:
        info = device.get_device_info()
        storage = device.get_storage_info()
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    root = probe_root(device)

    table = Table(title=f"Device Information - {info.display_name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Serial", info.serial)
    table.add_row("Brand", info.brand)
    table.add_row("Model", info.model)
    table.add_row("Android Version", info.android_version)
    table.add_row("SDK Version", info.sdk_version)
    table.add_row("Root Access", root.label)

    if storage.get("total", 0) > 0:
        table.add_row("Storage Used", f"{format_size(storage['used'])} / {format_size(storage['total'])}")

    console.print(table)


def _render_menu(registry: TaskRegistry, root: RootAccess):
    table = Table(title=f"Backup Tasks ({root.label})")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Task", style="white")
    table.add_column("Description", style="white")
    table.add_column("Available", style="white")

    for task in registry:
        available = "[green]yes[/green]" if task.is_available(root) else "[red]requires root[/red]"
        table.add_row(str(registry.number_of(task)), task.task_id, task.title, task.description, available)

    console.print(table)


@cli.command("tasks")
@click.option("--serial", "-s", help="Device serial number (probe root to show availability)")
def tasks_command(serial: Optional[str]):
    """List the backup task catalog."""
    root = RootAccess()
    if serial:
        device = _get_target_device(serial)
        if not device:
            sys.exit(1)
        root = probe_root(device)

    _render_menu(TaskRegistry(), root)


def _prompt_selection(registry: TaskRegistry, root: RootAccess) -> List[BackupTask]:
    """Interactive menu; loops until the input parses."""
    _render_menu(registry, root)

    while True:
        answer = Prompt.ask(
            "Select tasks ([cyan]1,3-5[/cyan], task ids, [cyan]all[/cyan] or [cyan]q[/cyan] to quit)",
            console=console,
        )
        try:
            return parse_selection(answer, registry, root)
        except SelectionError as e:
            console.print(f"[red]{e}[/red]")


def _print_start(task: BackupTask):
    console.print(f"[blue]*[/blue] {task.title}...")


def _print_result(result: TaskResult):
    line = f"{MARKS[result.status]} {result.title or result.task_id}: {result.message}"
    if result.used_fallback:
        line += " [yellow](unprivileged fallback)[/yellow]"
    console.print(line)


def _print_report(report: RunReport, session: BackupSession):
    table = Table(title="Backup Summary")
    table.add_column("Task", style="cyan")
    table.add_column("Status", style="white")
    table.add_column("Time", style="white", justify="right")
    table.add_column("Details", style="white")

    for result in report.results:
        table.add_row(
            result.task_id,
            f"{MARKS[result.status]} {result.status.value}",
            format_duration(result.duration),
            result.message,
        )

    console.print(table)
    console.print(f"Location: {session.path}")
    console.print(f"Restore guide: {session.restore_guide_path}")


@cli.command("run")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--tasks", "-t", "task_spec", help="Tasks to run, e.g. 'contacts,sms' or '1,3-5'")
@click.option("--all", "all_tasks", is_flag=True, help="Run every task available for the device")
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), help="Directory for backup sessions")
@click.option("--compress", is_flag=True, help="Archive the session as .tar.gz when done")
@click.option("--skip-space-check", is_flag=True, help="Do not check free disk space first")
def run_command(serial: Optional[str], task_spec: Optional[str], all_tasks: bool,
                output: Optional[Path], compress: bool, skip_space_check: bool):
    """Run a backup (interactive task menu unless --tasks or --all is given)."""
    if task_spec and all_tasks:
        raise click.UsageError("--tasks and --all are mutually exclusive")

    config = get_config()
    backup_root = output or config.backup_root
    compress = compress or config.compress_backup

    device = _get_target_device(serial)
    if not device:
        sys.exit(1)

    try:
        info = device.get_device_info()
    except ADBError as e:
        console.print(f"[red]ADB Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[bold cyan]Backing up {info.display_name}[/bold cyan]")
    logger.info(f"Starting backup for device: {device.serial}")

    root = probe_root(device)
    console.print(f"Root access: [bold]{root.label}[/bold]")

    registry = TaskRegistry()
    if all_tasks:
        selected = registry.available(root)
    elif task_spec:
        try:
            selected = parse_selection(task_spec, registry, root)
        except SelectionError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(2)
    else:
        selected = _prompt_selection(registry, root)

    if not selected:
        console.print("[yellow]No tasks selected, nothing to do[/yellow]")
        return

    if not skip_space_check:
        try:
            check_disk_space(backup_root, config.min_disk_space_mb)
        except InsufficientSpaceError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

    session = BackupSession(backup_root)
    with session:
        context = TaskContext.create(device, root, session.path, config)
        runner = TaskRunner(context, on_start=_print_start, on_result=_print_result)
        report = runner.run(selected)
        write_reports(session, report, registry, info, root)

    _print_report(report, session)

    if compress:
        archive = session.compress()
        console.print(f"Compressed archive: {archive} ({format_size(archive.stat().st_size)})")

    if report.ok:
        console.print("[bold green]Backup completed successfully![/bold green]")
    else:
        failed = ", ".join(r.task_id for r in report.failed)
        console.print(f"[bold red]Backup finished with failures: {failed}[/bold red]")
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
