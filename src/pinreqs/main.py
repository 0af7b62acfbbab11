import sys
from typing import Optional

import click
from rich.console import Console

from .cli_config import create_sample_config, load_config
from .error_handling import RequirementsGenerationError
from .generator import RequirementsGenerator
from .reporting import GenerationReporter
from .structured_logging import configure_logging

__version__ = "1.0.0"


def _print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"pinreqs version {__version__}")
    ctx.exit()


def _print_sample_config(
    ctx: click.Context, param: click.Parameter, value: bool
) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(create_sample_config())
    ctx.exit()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("target_dir", default=".", required=False)
@click.option(
    "--output",
    "-o",
    "output_file",
    help="Output file for requirements (default from config or requirements.txt)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Read settings from this JSON, YAML or pyproject.toml file",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress and results")
@click.option(
    "--verbose", "-v", is_flag=True, help="Log pipeline stages at INFO level"
)
@click.option(
    "--sample-config",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_sample_config,
    help="Print a sample JSON configuration and exit",
)
@click.option(
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_version,
    help="Show version information",
)
def cli(
    target_dir: str,
    output_file: Optional[str],
    config_path: Optional[str],
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Generate a pinned requirements.txt from the imports in TARGET_DIR.

    Python files under TARGET_DIR (default: current directory) are scanned
    for top-level imports, which are matched against the packages reported
    by 'pip freeze'.

    Examples:

      pinreqs

      pinreqs src --output requirements/base.txt
    """
    config = load_config(config_path)
    configure_logging(
        "INFO" if verbose else config.logging.log_level,
        config.logging.enable_json,
        config.logging.log_format,
    )

    reporter = GenerationReporter(
        quiet=quiet, show_contents=config.output.show_contents
    )
    generator = RequirementsGenerator(
        target_dir,
        output_file,
        config=config,
        progress_callback=reporter.print_stage,
    )

    try:
        result = generator.run()
    except KeyboardInterrupt:
        Console(stderr=True).print("\n⚠️  Interrupted by user", style="yellow")
        sys.exit(130)
    except RequirementsGenerationError as e:
        raise click.ClickException(str(e))

    reporter.print_results(result)


if __name__ == "__main__":
    cli()
