"""ClusterScore CLI.

Lists compliance specs, pre-creates summary report records, and generates
compliance reports from scanner results.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_spec(spec_ref: str, config: dict):
    """Load a spec from a file path or by name from the configured specs dir."""
    from ..compliance.loader import get_spec_by_name, load_spec
    from ..core.errors import ConfigurationError

    path = Path(spec_ref)
    if path.suffix in (".yaml", ".yml") and path.exists():
        return load_spec(path)
    spec = get_spec_by_name(spec_ref, Path(config["specs"]["dir"]))
    if spec is None:
        raise ConfigurationError(f"Spec not found: {spec_ref}")
    return spec


def _close(store) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        close()


@click.group()
@click.pass_context
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), default=".", help="Project path")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Config file")
@click.option("--store", type=click.Choice(["files", "kubernetes", "memory"]), help="Store backend override")
@click.option("--store-path", type=str, help="Directory for the files backend")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def cli(
    ctx: click.Context,
    project: str,
    config_file: str | None,
    store: str | None,
    store_path: str | None,
    log_level: str | None,
) -> None:
    """ClusterScore - compliance control aggregation for scanner reports."""
    from ..core.config import get_effective_config
    from ..core.errors import ConfigurationError

    overrides: dict = {}
    if store:
        overrides.setdefault("store", {})["backend"] = store
    if store_path:
        overrides.setdefault("store", {})["path"] = store_path
    if log_level:
        overrides["logging"] = {"level": log_level}

    try:
        config = get_effective_config(
            Path(project),
            config_file=Path(config_file) if config_file else None,
            cli_overrides=overrides,
        )
    except ConfigurationError as e:
        err_console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        ctx.exit(1)
        return

    _configure_logging(config["logging"]["level"])
    ctx.obj = config


@cli.command()
@click.pass_obj
def specs(config: dict) -> None:
    """List available compliance specs."""
    from ..compliance.loader import get_available_specs

    available = get_available_specs(Path(config["specs"]["dir"]))
    if not available:
        console.print(f"  No specs found in {config['specs']['dir']}")
        return

    table = Table(title="Compliance specs")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Controls", justify="right")
    table.add_column("Description")
    for spec in available:
        table.add_row(spec["name"], spec["version"], str(spec["controls"]), spec["description"])
    console.print(table)


@cli.command()
@click.pass_context
@click.argument("spec_ref")
def init(ctx: click.Context, spec_ref: str) -> None:
    """Create the summary report record for a spec.

    Example: clusterscore init cis-1.5
    """
    from ..compliance.reports import report_labels, summary_report_name
    from ..core.errors import ClusterScoreError, NotFoundError
    from ..models.report import ClusterComplianceReport, ObjectMeta
    from ..storage.base import get_store

    config = ctx.obj
    store = None
    try:
        spec = _resolve_spec(spec_ref, config)
        store = get_store(config)
        name = summary_report_name(spec)
        try:
            store.get(ClusterComplianceReport, name)
            console.print(f"  {ClusterComplianceReport.KIND} {name} already exists")
            return
        except NotFoundError:
            pass
        store.create(ClusterComplianceReport(
            metadata=ObjectMeta(name=name, labels=report_labels(spec)),
            spec=spec,
        ))
        console.print(f"  [green]Created[/green] {ClusterComplianceReport.KIND} {name}")
    except ClusterScoreError as e:
        err_console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        ctx.exit(1)
    finally:
        if store is not None:
            _close(store)


@cli.command()
@click.pass_context
@click.argument("spec_ref")
def generate(ctx: click.Context, spec_ref: str) -> None:
    """Generate the summary and detail reports for a spec.

    Example: clusterscore generate cis-1.5
    """
    from ..compliance.engine import ComplianceManager
    from ..core.errors import ClusterScoreError
    from ..storage.base import get_store

    config = ctx.obj
    store = None
    try:
        spec = _resolve_spec(spec_ref, config)
        store = get_store(config)
        report = ComplianceManager(store, store).generate_compliance_report(spec)
    except ClusterScoreError as e:
        err_console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        ctx.exit(1)
        return
    finally:
        if store is not None:
            _close(store)

    summary = report.status.summary
    console.print()
    console.print(f"  [bold cyan]{report.metadata.name}[/bold cyan]")
    console.print(
        f"  Pass: [green]{summary.pass_count}[/green]  "
        f"Fail: [red]{summary.fail_count}[/red]"
    )

    if report.status.control_checks:
        table = Table()
        table.add_column("ID")
        table.add_column("Name")
        table.add_column("Severity")
        table.add_column("Pass", justify="right")
        table.add_column("Fail", justify="right")
        for check in report.status.control_checks:
            table.add_row(
                check.id, check.name, check.severity,
                str(check.pass_total), str(check.fail_total),
            )
        console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
