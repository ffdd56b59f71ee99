#!/usr/bin/env python3
"""
sspbridge CLI - convert System Security Plans between the flat compliance
model and OSCAL 1.1.2 SSP JSON or XML

export:   flat model JSON -> OSCAL SSP (validated before writing)
import:   OSCAL SSP JSON/XML -> flat model JSON, with import notes
validate: schema and best-practice checks for an OSCAL SSP file
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .pipeline import generate_and_validate, import_and_report
from .readers import ImportRejectedError, OSCALParseError, check_import_file, format_file_size, parse_ssp
from .serializers import export_filename, to_json, to_xml
from .validation import OSCALValidator, ValidationReporter

console = Console()
logger = logging.getLogger("sspbridge")

SERIALIZERS = {
    "json": to_json,
    "xml": to_xml,
}


def _configure_logging(verbose: bool, quiet: bool) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)]
    )

    if quiet:
        logging.getLogger().setLevel(logging.WARNING)
    elif verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def _fail(ctx, message: str, error: Optional[Exception] = None) -> None:
    logger.error(message)
    if error is not None and ctx.obj.get('verbose'):
        logger.exception(error)
    sys.exit(1)


def _print_issues(validation, title: str) -> None:
    reporter = ValidationReporter(validation)
    if validation["errors"] or validation["warnings"]:
        console.print(reporter.issue_table(title=title))


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """sspbridge - OSCAL SSP import and export for the flat compliance model"""
    ctx.ensure_object(dict)
    _configure_logging(verbose, quiet)

    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@cli.command()
@click.argument('flat_json', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output file (default: <acronym>_OSCAL_<date>.<format>)')
@click.option('--format', 'fmt', type=click.Choice(['json', 'xml']), default='json',
              show_default=True, help='OSCAL serialization')
@click.option('--title', help='Document title')
@click.option('--org', 'org_name', help='Owning organization name')
@click.option('--version', 'doc_version', help='Document version')
@click.option('--profile', 'profile_ref', help='Baseline profile href')
@click.option('--force', is_flag=True, help='Write the document even if it fails validation')
@click.pass_context
def export(ctx, flat_json: Path, output: Optional[Path], fmt: str, title: Optional[str],
           org_name: Optional[str], doc_version: Optional[str], profile_ref: Optional[str],
           force: bool):
    """Export a flat model JSON file as an OSCAL SSP"""
    try:
        with open(flat_json, 'r', encoding='utf-8') as f:
            flat = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        _fail(ctx, f"Failed to read {flat_json}: {e}", e)

    if not isinstance(flat, dict):
        _fail(ctx, f"{flat_json} does not contain a JSON object")

    result = generate_and_validate(
        flat,
        document_title=title,
        org_name=org_name,
        version=doc_version,
        profile_ref=profile_ref
    )

    console.print(result["summary"], markup=False)
    _print_issues(result["validation"], "Export validation")

    if not result["success"] and not force:
        _fail(ctx, "Document failed validation; nothing written (use --force to export anyway)")

    if not result["success"]:
        logger.warning("Writing a document that failed validation (--force)")

    output = output or Path(export_filename(flat, fmt))
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(SERIALIZERS[fmt](result["document"]), encoding='utf-8')
    except OSError as e:
        _fail(ctx, f"Failed to write {output}: {e}", e)

    logger.info(f"Wrote OSCAL SSP {fmt.upper()} to {output}")


@cli.command(name='import')
@click.argument('oscal_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the flat model JSON here instead of printing it')
@click.option('--mime', help='Declared MIME type (default: dispatch on the file extension)')
@click.pass_context
def import_(ctx, oscal_file: Path, output: Optional[Path], mime: Optional[str]):
    """Import an OSCAL SSP JSON or XML file into the flat model"""
    try:
        check_import_file(oscal_file.name, oscal_file.stat().st_size, mime)
        content = oscal_file.read_bytes()
        result = import_and_report(content, mime or oscal_file.name)
    except (ImportRejectedError, OSCALParseError) as e:
        _fail(ctx, f"Import failed: {e}", e)
    except OSError as e:
        _fail(ctx, f"Failed to read {oscal_file}: {e}", e)

    info = result["document_info"]
    logger.info(
        f"Imported '{info['title']}' v{info['version']} "
        f"(OSCAL {info['oscal_version']}, {format_file_size(len(content))})"
    )

    for note in result["warnings"]:
        console.print(f"• {note}", markup=False)

    if output:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(json.dumps(result["data"], indent=2, ensure_ascii=False), encoding='utf-8')
        except OSError as e:
            _fail(ctx, f"Failed to write {output}: {e}", e)
        logger.info(f"Wrote flat model to {output}")
    else:
        console.print_json(data=result["data"])


@cli.command()
@click.argument('oscal_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--mime', help='Declared MIME type (default: dispatch on the file extension)')
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
@click.pass_context
def validate(ctx, oscal_file: Path, mime: Optional[str], as_json: bool):
    """Validate an OSCAL SSP file against the OSCAL 1.1.2 schema"""
    try:
        parsed = parse_ssp(oscal_file.read_bytes(), mime or oscal_file.name)
    except OSCALParseError as e:
        _fail(ctx, f"Validation failed: {e}", e)
    except OSError as e:
        _fail(ctx, f"Failed to read {oscal_file}: {e}", e)

    validation = OSCALValidator().validate(parsed.graph)
    reporter = ValidationReporter(validation)

    if as_json:
        console.print_json(data=reporter.generate_report())
    else:
        console.print(reporter.summary(), markup=False)
        _print_issues(validation, f"Validation of {oscal_file.name}")

    if not validation["valid"]:
        sys.exit(1)


if __name__ == '__main__':
    cli()
