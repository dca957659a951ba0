"""CLI interface for fastdomaincheck."""

import json
import sys

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from . import __version__
from .checkers import AvailabilityService, get_default_table, load_whois_table
from .checkers.availability_service import MAX_BATCH_SIZE
from .config import configure_logging, load_settings
from .errors import ConfigError, InvalidDomain
from .utils.domain_validator import get_tld, normalize_domain, to_ascii


console = Console()
err_console = Console(stderr=True)


def read_domain_file(path: str) -> list:
    """Read domains from a JSON list or a one-per-line text file."""
    with open(path) as f:
        content = f.read()
    try:
        domains = json.loads(content)
    except json.JSONDecodeError:
        return [line.strip() for line in content.splitlines()
                if line.strip() and not line.strip().startswith('#')]
    if not isinstance(domains, list):
        raise click.BadParameter(f"{path} must contain a JSON list of domains")
    return domains


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', 'config_path', default=None, help='Path to YAML config file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging to stderr')
@click.pass_context
def cli(ctx, config_path, verbose):
    """FastDomainCheck - bulk domain availability via WHOIS and DNS."""
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(2)
    configure_logging(verbose=verbose, debug_whois=settings.debug_whois)
    ctx.obj = {'settings': settings, 'verbose': verbose}


@cli.command()
@click.argument('domains', nargs=-1)
@click.option('--file', '-f', 'domain_file', default=None, type=click.Path(exists=True, dir_okay=False),
              help='File with domains (JSON list or one per line)')
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
@click.option('--delay', default=None, type=click.FloatRange(min=0), help='Pause between domains in seconds')
@click.pass_context
def check(ctx, domains, domain_file, as_json, delay):
    """Check domain availability."""
    settings = ctx.obj['settings']
    if delay is not None:
        settings.request_delay = delay

    domain_list = list(domains)
    if domain_file:
        domain_list.extend(read_domain_file(domain_file))

    if not domain_list:
        err_console.print("[red]No domains provided. Use arguments or --file[/red]")
        sys.exit(1)

    if len(domain_list) > MAX_BATCH_SIZE:
        err_console.print(f"[red]Cannot check more than {MAX_BATCH_SIZE} domains at once[/red]")
        sys.exit(1)

    try:
        service = AvailabilityService.from_settings(settings)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(2)

    if as_json:
        results = service.check_batch(domain_list)
        click.echo(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True
    ) as progress:
        task = progress.add_task("[cyan]Checking domains...", total=len(domain_list))

        def update(current, total):
            progress.update(task, completed=current)

        results = service.check_batch(domain_list, progress_callback=update)

    table = Table(title="Domain Availability")
    table.add_column("Domain", style="cyan")
    table.add_column("Available", justify="center")
    table.add_column("Method", style="dim")
    table.add_column("Note", style="yellow")

    for r in results:
        if r.error:
            avail = "[yellow]?[/yellow]"
        elif r.available:
            avail = "[green]Y[/green]"
        else:
            avail = "[red]N[/red]"
        note = r.error or ("WHOIS failed, DNS fallback" if r.fallback else "")
        table.add_row(str(r.domain), avail, r.method or "-", note)

    console.print(table)

    available = sum(1 for r in results if r.available)
    console.print(f"\n[bold]{available}[/bold] of {len(results)} domains available")


@cli.command('whois-server')
@click.argument('domain')
@click.pass_context
def whois_server(ctx, domain):
    """Show which WHOIS server answers for a domain."""
    settings = ctx.obj['settings']
    try:
        name = normalize_domain(domain)
        tld = get_tld(name)
        if not tld:
            raise InvalidDomain('Invalid domain format')
        if settings.whois_servers_file:
            table = load_whois_table(settings.whois_servers_file)
        else:
            table = get_default_table()
    except (InvalidDomain, ConfigError) as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(1)

    server = table.resolve(tld)
    console.print(f"[bold]Domain:[/bold] {name} ({to_ascii(name)})")
    console.print(f"[bold]TLD:[/bold]    {tld}")
    if server:
        console.print(f"[bold]Server:[/bold] {server}")
    else:
        console.print("[bold]Server:[/bold] [yellow]none configured, DNS fallback[/yellow]")


@cli.command()
@click.pass_context
def serve(ctx):
    """Run the MCP server on stdio."""
    from .server import run
    run(ctx.obj['settings'], verbose=ctx.obj['verbose'])


def main():
    cli()


if __name__ == '__main__':
    main()
