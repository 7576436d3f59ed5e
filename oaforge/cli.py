import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from oaforge.codegen.codegen import Codegen
from oaforge.config import CodegenConfig, DocumentConfig, get_config

console = Console()
app = typer.Typer(
    name='oaforge',
    help='Generate typed Python API clients from OpenAPI 3.0 documents',
    no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(message)s',
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
    source: Annotated[
        str | None,
        typer.Option('--source', '-s', help='Path or URL of an OpenAPI document'),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option('--output', '-o', help='Output directory (with --source)'),
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option('--include', help='Only generate operations with this tag'),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option('--exclude', help='Skip operations with this tag'),
    ] = None,
    optimistic: Annotated[
        bool,
        typer.Option('--optimistic', help='Return success data, raise on errors'),
    ] = False,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Enable debug logging')
    ] = False,
) -> None:
    """Generate a Python client module from configuration or a single document.

    If neither --config nor --source is given, the configuration is looked up
    in oaforge.yaml or the [tool.oaforge] table of pyproject.toml.

    Examples:
        oaforge generate
        oaforge generate --config oaforge.yaml
        oaforge generate -s ./openapi.yaml -o ./client --exclude internal
    """
    _setup_logging(verbose)

    try:
        if source:
            if not output:
                raise typer.BadParameter('--output is required with --source')
            settings = CodegenConfig(
                documents=[
                    DocumentConfig(
                        source=source,
                        output=output,
                        include=include or [],
                        exclude=exclude or [],
                        optimistic=optimistic,
                    )
                ]
            )
        else:
            settings = get_config(config)

        for document_config in settings.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating code for {document_config.source}...', total=None
                )
                written = Codegen(document_config).generate()
                progress.update(
                    task, description=f'Code generation completed for {document_config.source}!'
                )
            console.print(f'[green]Successfully generated code:[/green] {written}')

    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1) from e


@app.command()
def version() -> None:
    """Show the version of oaforge."""
    from oaforge import __version__

    console.print(f'oaforge version: {__version__}')


if __name__ == '__main__':
    app()
