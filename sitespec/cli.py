"""
cli.py
=======
Command-line entry point for adapter generation, evaluation and lookup.
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

import logfire
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sitespec.config import Settings
from sitespec.core.evaluation import PageEvaluator
from sitespec.core.validation import parse_spec
from sitespec.exceptions import SiteSpecError
from sitespec.models import AdapterSpec, EvaluationReport
from sitespec.service import AdapterService, LookupResult
from sitespec.storage import AdapterStore
from sitespec.utils import init_sitespec, setup_local_logging
from sitespec.utils.console import create_console


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding='utf-8')


def _parse_criteria(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError('--criteria must be a JSON object')
    return value


def print_report(console: Console, report: EvaluationReport) -> None:
    """Print an evaluation report as a table."""
    table = Table(title='Evaluation')
    table.add_column('Metric', style='cyan')
    table.add_column('Value', style='green')
    for key, value in report.counts.items():
        table.add_row(key, str(value))
    console.print(table)

    if report.ok:
        console.print('[success]✓ Accepted[/success]')
    else:
        console.print('[danger]✗ Rejected[/danger]')
        for issue in report.issues:
            console.print(f'[warning]  • {issue}[/warning]')


def print_spec(console: Console, spec: AdapterSpec) -> None:
    """Print a spec as pretty JSON inside a panel."""
    console.print(
        Panel(
            Text(json.dumps(spec.to_json_dict(), indent=2, ensure_ascii=False)),
            title=spec.id or spec.template or 'adapter',
        )
    )


def print_adapters(console: Console, adapters: list[AdapterSpec]) -> None:
    """Print a summary table of stored specs."""
    if not adapters:
        console.print('[warning]No adapters stored[/warning]')
        return

    table = Table(title='Stored Adapters')
    table.add_column('Id', style='cyan')
    table.add_column('Template', style='green')
    table.add_column('Match')
    table.add_column('Updated', style='dim')
    for spec in adapters:
        match = ', '.join(spec.match.host_contains or []) if spec.match else '*'
        updated = spec.updated_at.isoformat() if spec.updated_at else '-'
        table.add_row(spec.id or '-', spec.template or '-', match or '-', updated)
    console.print(table)
    console.print(f'\n[success]Total adapters: {len(adapters)}[/success]')


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(description='Generate and evaluate site adapters with an LLM')
    parser.add_argument(
        '--log-level',
        type=str,
        default='DEBUG',
        help='Logging level for the local log file (DEBUG, INFO, WARNING, ERROR, ALL)',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    generate = subparsers.add_parser('generate', help='Generate an adapter in a single pass and store it')
    generate.add_argument('url', help='Page URL')
    generate.add_argument('--html', type=str, help='Read markup from this file instead of fetching the URL')
    generate.add_argument('--template', type=str, help='Expected template')

    refine = subparsers.add_parser('refine', help='Generate an adapter with evaluation feedback and store it')
    refine.add_argument('url', help='Page URL')
    refine.add_argument('--html', type=str, help='Read markup from this file instead of fetching the URL')
    refine.add_argument('--template', type=str, help='Expected template')
    refine.add_argument('--max-iterations', type=int, help='Refinement budget')
    refine.add_argument('--criteria', type=str, help='Acceptance criteria overrides as JSON')

    evaluate = subparsers.add_parser('evaluate', help='Evaluate a spec file against a markup file')
    evaluate.add_argument('spec_file', help='Adapter spec JSON file')
    evaluate.add_argument('html_file', help='Page markup file')
    evaluate.add_argument('--url', type=str, help='Page URL used to resolve relative links')
    evaluate.add_argument('--template', type=str, help='Expected template')
    evaluate.add_argument('--criteria', type=str, help='Acceptance criteria overrides as JSON')

    lookup = subparsers.add_parser('lookup', help='Find the stored adapter for a URL')
    lookup.add_argument('url', help='Page URL')
    lookup.add_argument('--template', type=str, help='Expected template')

    subparsers.add_parser('list', help='List stored adapters')

    return parser


def run_evaluate(args: argparse.Namespace, console: Console) -> int:
    """Evaluate a spec against saved markup without calling a model."""
    spec = parse_spec(json.loads(_read_text(args.spec_file)))
    evaluator = PageEvaluator()
    report = evaluator.evaluate(
        spec,
        _read_text(args.html_file),
        template_hint=args.template,
        criteria=_parse_criteria(args.criteria),
        url=args.url,
    )
    print_report(console, report)
    return 0 if report.ok else 1


async def run_service_command(args: argparse.Namespace, console: Console) -> int:
    """Run a command that needs the adapter service."""
    settings = Settings.from_env()

    if args.command == 'list':
        # Listing never touches the model, so no API key is required
        print_adapters(console, AdapterStore(settings.store_path).list_adapters())
        return 0

    service = AdapterService(settings=settings, console=console)
    html = _read_text(args.html) if getattr(args, 'html', None) else None

    if args.command == 'generate':
        console.print(Panel(f'Generating adapter: {args.url}', style='bold blue'))
        spec = await service.generate_and_store(args.url, html=html, template_hint=args.template)
        print_spec(console, spec)
        return 0

    if args.command == 'refine':
        console.print(Panel(f'Refining adapter: {args.url}', style='bold blue'))
        result = await service.refine_and_store(
            args.url,
            html=html,
            template_hint=args.template,
            criteria=_parse_criteria(args.criteria),
            max_iterations=args.max_iterations,
        )
        print_spec(console, result.spec)
        print_report(console, result.report)
        console.print(f'[info]Iterations: {result.iterations}[/info]')
        return 0

    if args.command == 'lookup':
        found = await service.lookup(args.url, template_hint=args.template)
        await service.drain()
        if found.status == 'generating':
            adapter = service.store.find_adapter(args.url, args.template)
            found = LookupResult(adapter=adapter, status='generated' if adapter else 'not_found')
        if found.adapter is None:
            console.print(f'[warning]No adapter ({found.status})[/warning]')
            return 1
        console.print(f'[success]✓ Adapter {found.status}[/success]')
        print_spec(console, found.adapter)
        return 0

    return 1


def main() -> None:
    """Main entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args()

    init_sitespec()
    logfire_token = os.getenv('LOGFIRE_TOKEN')
    if logfire_token:
        logfire.configure(token=logfire_token)

    console = create_console()

    try:
        log_file = setup_local_logging(
            level=args.log_level,
            logs_dir=Settings.from_env().logs_path,
            forward_to_logfire=bool(logfire_token),
        )
        console.print(f'[dim]Logging to {log_file}[/dim]')

        if args.command == 'evaluate':
            code = run_evaluate(args, console)
        else:
            code = asyncio.run(run_service_command(args, console))
    except (SiteSpecError, ValueError, OSError) as e:
        logfire.error('Command failed', command=args.command, error=str(e))
        console.print(f'[danger]✗ {e}[/danger]')
        sys.exit(1)

    sys.exit(code)


if __name__ == '__main__':
    main()
