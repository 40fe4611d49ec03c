"""Typer-based CLI for the UniFi network manager."""

import asyncio
import json
import typer
import uuid
from dotenv import load_dotenv
from pathlib import Path
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import Annotated, Any
from unifi_netmgr.models.analysis import NetworkAnalysis, NetworkOverview, Severity
from unifi_netmgr.models.organization import OrganizationResult
from unifi_netmgr.organize.report import build_plan_document, render_markdown
from unifi_netmgr.organize.rules import load_rules
from unifi_netmgr.sdk import UniFiSDK
from unifi_netmgr.utils.errors import ToolError
from unifi_netmgr.utils.logging import (
    configure_logging,
    log_operation_result,
    log_operation_start,
)


console = Console()

SEVERITY_STYLES = {
    Severity.CRITICAL: 'bold red',
    Severity.HIGH: 'red',
    Severity.MEDIUM: 'yellow',
    Severity.LOW: 'cyan',
}


class State:
    """Global CLI state."""

    config_path: Path | None = None
    debug: bool = False


state = State()


app = typer.Typer(
    name='unifi-netmgr',
    help='UniFi network monitoring, optimisation and IP organisation',
    rich_markup_mode='rich',
    no_args_is_help=True,
)


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option('--config', '-c', help='Path to .env configuration file', envvar='UNIFI_CONFIG'),
    ] = None,
    debug: Annotated[bool, typer.Option('--debug', help='Log to the console as well')] = False,
) -> None:
    """UniFi network manager.

    Credentials come from UNIFI_CLOUD_API_KEY and the UNIFI_LOCAL_* variables,
    optionally loaded from a .env file.
    """
    state.config_path = config
    state.debug = debug

    if config is not None:
        if not config.expanduser().exists():
            console.print(f'[bold red]Configuration file not found: {config}[/bold red]')
            raise typer.Exit(1)
        load_dotenv(config.expanduser(), override=True)
    else:
        load_dotenv()

    configure_logging(log_level='DEBUG' if debug else 'INFO', include_console=debug)


def _run(operation: str, params: dict[str, Any], coro_factory: Any) -> Any:
    """Run an SDK coroutine, mapping ToolError to a non-zero exit."""
    correlation_id = uuid.uuid4().hex[:8]
    log_operation_start(operation, params, correlation_id)

    async def runner() -> Any:
        async with UniFiSDK.from_env() as sdk:
            return await coro_factory(sdk)

    try:
        result = asyncio.run(runner())
    except ToolError as e:
        log_operation_result(operation, False, error=e.message, correlation_id=correlation_id)
        console.print(f'[bold red]{escape(str(e))}[/bold red]')
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print('\n[bold yellow]Operation cancelled by user[/bold yellow]')
        raise typer.Exit(1)

    log_operation_result(operation, True, result=result, correlation_id=correlation_id)
    return result


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str) + '\n', encoding='utf-8')
    console.print(f'Saved to [cyan]{path}[/cyan]')


def _print_analysis(analysis: NetworkAnalysis) -> None:
    summary = analysis.summary
    score_style = 'green' if summary.health_score >= 80 else 'yellow' if summary.health_score >= 50 else 'red'

    console.print(f'\n[bold]Health score:[/bold] [{score_style}]{summary.health_score}/100[/{score_style}]')
    console.print(
        f'Devices: {summary.online_devices}/{summary.total_devices} online, '
        f'clients: {summary.total_clients} ({summary.wifi_clients} WiFi, {summary.wired_clients} wired)'
    )

    if not analysis.recommendations:
        console.print('[green]No recommendations, network looks healthy[/green]')
        return

    table = Table(title='Recommendations')
    table.add_column('Severity')
    table.add_column('Title')
    table.add_column('Recommended')
    table.add_column('Auto', justify='center')
    for rec in analysis.recommendations:
        style = SEVERITY_STYLES[rec.severity]
        table.add_row(
            f'[{style}]{rec.severity.value}[/{style}]',
            rec.title,
            rec.recommended_state,
            'yes' if rec.automated else '',
        )
    console.print(table)


def _print_organization(result: OrganizationResult) -> None:
    summary = result.summary
    table = Table(title='IP Organization')
    table.add_column('Category')
    table.add_column('Devices', justify='right')
    for category, count in summary.by_category.items():
        table.add_row(category, str(count))
    console.print(table)

    console.print(
        f'Auto-classified: [green]{summary.auto_classified}[/green], '
        f'needs review: [yellow]{summary.needs_review}[/yellow], '
        f'rejected: [red]{summary.rejected}[/red]'
    )
    if result.applied and summary.partial_failure:
        console.print(f'[bold red]{summary.commit_failures} reservation(s) failed to commit[/bold red]')


@app.command()
def monitor(
    output: Annotated[
        Path, typer.Option('--output', '-o', help='Where to write the raw network data')
    ] = Path('network-data.json'),
) -> None:
    """Fetch a network overview and save it as JSON."""

    async def fetch(sdk: UniFiSDK) -> NetworkOverview:
        return await sdk.get_network_overview()

    overview = _run('monitor', {'output': str(output)}, fetch)

    console.print(f'Source: [cyan]{overview.source}[/cyan]')
    if overview.source == 'cloud':
        console.print(
            f'Hosts: {len(overview.hosts)}, sites: {len(overview.sites)}, '
            f'devices: {len(overview.cloud_devices)}'
        )
    else:
        console.print(f'Devices: {len(overview.devices)}, clients: {len(overview.clients)}')

    _write_json(output, overview.model_dump(mode='json', by_alias=True))


@app.command()
def optimize(
    output: Annotated[
        Path, typer.Option('--output', '-o', help='Where to write the analysis')
    ] = Path('analysis.json'),
) -> None:
    """Analyse network health and list recommendations."""

    async def analyse(sdk: UniFiSDK) -> NetworkAnalysis:
        return await sdk.analyze_network()

    analysis = _run('optimize', {'output': str(output)}, analyse)
    _print_analysis(analysis)
    _write_json(output, analysis.model_dump(mode='json'))


@app.command()
def apply(
    dry_run: Annotated[
        bool, typer.Option('--dry-run', help='Show what would be changed without applying')
    ] = False,
) -> None:
    """Apply automated recommendations through the local controller."""
    if dry_run:
        console.print('[bold cyan]Dry run mode - no changes will be applied[/bold cyan]')

    async def run_apply(sdk: UniFiSDK) -> tuple[NetworkAnalysis, list]:
        analysis = await sdk.analyze_network()
        results = await sdk.apply_optimizations(analysis.recommendations, dry_run=dry_run)
        return analysis, results

    analysis, results = _run('apply', {'dry_run': dry_run}, run_apply)

    automated = [r for r in analysis.recommendations if r.automated]
    if not automated:
        console.print('[green]Nothing to apply[/green]')
        return

    if dry_run:
        for rec in automated:
            console.print(f'Would apply: {rec.title}')
        return

    failed = 0
    for result in results:
        if result.success:
            console.print(f'[green]Applied:[/green] {result.change.description}')
        else:
            failed += 1
            console.print(f'[red]Failed:[/red] {result.change.description}: {escape(result.error or "")}')

    if failed:
        raise typer.Exit(1)


@app.command()
def organize(
    apply_changes: Annotated[
        bool,
        typer.Option('--apply/--dry-run', help='Commit fixed-IP reservations or only write the plan'),
    ] = False,
    rules: Annotated[
        Path | None,
        typer.Option('--rules', '-r', help='JSON file with extra classification rules'),
    ] = None,
    output_dir: Annotated[
        Path, typer.Option('--output-dir', '-o', help='Directory for the plan files')
    ] = Path('.'),
) -> None:
    """Classify clients and plan (or commit) fixed-IP reservations by category."""
    try:
        rule_set = load_rules(rules, extend_defaults=True) if rules else None
    except ToolError as e:
        console.print(f'[bold red]{escape(str(e))}[/bold red]')
        raise typer.Exit(1)

    if not apply_changes:
        console.print('[bold cyan]Dry run mode - reservations will not be committed[/bold cyan]')

    async def run_organize(sdk: UniFiSDK) -> OrganizationResult:
        return await sdk.organize_ips(apply_changes=apply_changes, rules=rule_set)

    params = {'apply': apply_changes, 'rules': str(rules) if rules else None}
    result = _run('organize', params, run_organize)

    _print_organization(result)
    _write_json(output_dir / 'ip-organization.json', build_plan_document(result))

    plan_path = output_dir / 'ip-organization.md'
    plan_path.write_text(render_markdown(result, str(rules) if rules else None), encoding='utf-8')
    console.print(f'Saved to [cyan]{plan_path}[/cyan]')

    if result.summary.partial_failure:
        raise typer.Exit(1)


@app.command()
def test() -> None:
    """Check connectivity to the configured APIs."""

    async def check(sdk: UniFiSDK) -> Any:
        return await sdk.test_connection()

    result = _run('test', {}, check)

    console.print(f"Cloud API: {'[green]OK[/green]' if result.cloud else '[red]unavailable[/red]'}")
    console.print(f"Local API: {'[green]OK[/green]' if result.local else '[red]unavailable[/red]'}")
    for error in result.errors:
        console.print(f'  [red]{escape(error)}[/red]')

    if not (result.cloud or result.local):
        raise typer.Exit(1)


if __name__ == '__main__':
    app()
