import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from zodgen.codegen.codegen import Codegen
from zodgen.config import DocumentConfig, create_default_config, get_config
from zodgen.exceptions import GenerationFailedError, ZodgenError

console = Console()
app = typer.Typer(
    name='zodgen',
    help='Generate zod validators and TypeScript types from OpenAPI documents',
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _print_failure(error: ZodgenError) -> None:
    console.print(f'[red]Error:[/red] {escape(error.message)}')
    if isinstance(error, GenerationFailedError):
        for cited_by, reference in sorted(set(error.dangling_references)):
            console.print(f'  [yellow]{cited_by}[/yellow] -> [red]{reference}[/red]')


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
) -> None:
    """Generate zod model modules from configuration.

    If no config file is specified, zodgen.yaml, zodgen.yml or zodgen.json in
    the current directory is used, then [tool.zodgen] in pyproject.toml.

    Examples:
        zodgen generate
        zodgen generate --config my-config.yaml
    """
    try:
        codegen_config = get_config(config)

        for document_config in codegen_config.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating models for {document_config.source} in {document_config.output}...',
                    total=None,
                )

                codegen = Codegen(document_config)
                mappings = codegen.generate()

                progress.update(
                    task, description=f'Code generation completed for {document_config.source}!'
                )

            if mappings is not None:
                for warning in mappings.report.all_warnings():
                    console.print(f'[yellow]Warning:[/yellow] {escape(warning.message)}')
                console.print('[dim]Generated entities:[/dim]')
                for entity in mappings.entities.values():
                    if entity.models:
                        console.print(
                            f'  - {document_config.output}/{entity.module_name}.ts'
                        )

        console.print('[green]Successfully generated code[/green]')

    except ZodgenError as e:
        _print_failure(e)
        raise typer.Exit(1)


@app.command()
def inspect(
    source: Annotated[str, typer.Argument(help='Path or URL to the OpenAPI document')],
    explicit: Annotated[
        bool, typer.Option('--explicit', help='Use explicit typing')
    ] = False,
) -> None:
    """Show which entity each schema is assigned to, without writing files."""
    document_config = DocumentConfig(
        source=source,
        output='.',
        generation={'prefer_explicit_typing': explicit},
    )
    try:
        mappings = Codegen(document_config).build()
    except ZodgenError as e:
        _print_failure(e)
        raise typer.Exit(1)

    table = Table(title=source)
    table.add_column('Schema')
    table.add_column('Entity')
    table.add_column('Validator')
    table.add_column('Recursive')
    recursive = {
        model.schema_name
        for models in mappings.entity_models.values()
        for model in models
        if model.is_recursive
    }
    for name in sorted(mappings.schema_to_entity):
        table.add_row(
            name,
            mappings.schema_to_entity[name],
            mappings.schema_to_validator_name[name],
            'yes' if name in recursive else '',
        )
    console.print(table)


@app.command()
def init(
    path: Annotated[
        str, typer.Argument(help='Where to write the configuration file')
    ] = 'zodgen.yaml',
) -> None:
    """Write a starter configuration file."""
    target = Path(path)
    if target.exists():
        console.print(f'[red]Error:[/red] {target} already exists')
        raise typer.Exit(1)
    target.write_text(yaml.safe_dump(create_default_config(), sort_keys=False))
    console.print(f'[green]Created {target}[/green]')


@app.command()
def version() -> None:
    """Show the version of zodgen."""
    from zodgen import __version__

    console.print(f'zodgen version: {__version__}')


if __name__ == '__main__':
    app()
