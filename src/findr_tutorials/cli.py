"""
Command line interface for findr-tutorials.

Usage:
    findr-tutorials process geuvadis     # Reshape the Geuvadis CSVs into Arrow tables
    findr-tutorials process ecoli-grn    # Reshape and align E. coli expression + RegulonDB
    findr-tutorials inventory            # Check raw and processed files
    findr-tutorials download-info        # Where to get the raw data
"""

from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Optional
import platform
import sys

import typer
from rich.table import Table
from typing_extensions import Annotated

from findr_tutorials import __version__
from findr_tutorials.cli_utils import (
    check_file_status,
    console,
    create_file_table,
    error,
    handle_error,
    info,
    success,
)
from findr_tutorials.config import (
    OUTPUT_SEPARATORS,
    coerce_value,
    get_config,
    get_config_path,
    reset_config,
    resolve_data_dir,
    save_config,
    setup_logging,
)
from findr_tutorials.constants import DATASETS, ECOLI_GRN, GEUVADIS, RAW_DIR, datadir
from findr_tutorials.errors import FindrTutorialsError

app = typer.Typer(
    name="findr-tutorials",
    help="Data preparation and utilities for the findr tutorials.",
    add_completion=False,
)
process_app = typer.Typer(help="Reshape raw downloads into Arrow tables.")
config_app = typer.Typer(help="Show or change the configuration file.")

app.add_typer(process_app, name="process")
app.add_typer(config_app, name="config")

DataDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--data-dir",
        "-d",
        help="Data root holding exp_raw/ and exp_pro/ (default: config, FINDR_TUTORIALS_DATA or ./data)",
    ),
]

DEPENDENCIES = ["numpy", "pandas", "polars", "pyarrow", "matplotlib", "typer", "rich", "PyYAML"]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"findr-tutorials version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
    ] = False,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase verbosity (-v info, -vv debug)"),
    ] = 0,
) -> None:
    """Data preparation and utilities for the findr tutorials."""
    config = get_config()
    setup_logging(verbose, log_file=config.log_file, default_level=config.log_level)


@process_app.command("geuvadis")
def process_geuvadis_command(data_dir: DataDirOption = None) -> None:
    """Reshape dt/dm/dgt/dgm CSVs and the gene-name table of the Geuvadis data."""
    from findr_tutorials.processing import process_geuvadis

    try:
        report = process_geuvadis(resolve_data_dir(data_dir))
    except (FindrTutorialsError, OSError) as e:
        handle_error(e, f"processing {GEUVADIS}")
    report.print_summary()


@process_app.command("ecoli-grn")
def process_ecoli_command(data_dir: DataDirOption = None) -> None:
    """Reshape the E. coli expression compendium and align it with RegulonDB."""
    from findr_tutorials.processing import process_ecoli_grn

    try:
        report = process_ecoli_grn(resolve_data_dir(data_dir))
    except (FindrTutorialsError, OSError) as e:
        handle_error(e, f"processing {ECOLI_GRN}")
    report.print_summary()


@app.command()
def inventory(
    data_dir: DataDirOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output path for inventory report"),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option("--format", help="Report format: tsv or csv (default: config output_format)"),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress the summary"),
    ] = False,
    files: Annotated[
        bool,
        typer.Option("--files", help="List every raw and processed file with its size"),
    ] = False,
) -> None:
    """Check raw downloads and processed tables of every dataset."""
    from findr_tutorials.data_inventory import validate_inventory

    inv = validate_inventory(data_dir, verbose=not quiet)

    if files:
        for name, ds in inv.datasets.items():
            table = create_file_table(name)
            for stage, paths in (("raw", ds.raw_files), ("processed", ds.processed_files)):
                for key, path in paths.items():
                    status, size = check_file_status(path)
                    table.add_row(f"{stage}/{key}", str(path), status, size)
            console.print(table)

    if output:
        fmt = output_format or get_config().output_format
        if fmt not in OUTPUT_SEPARATORS:
            error(f"Invalid format: '{fmt}'. Valid options: {', '.join(OUTPUT_SEPARATORS)}")
            raise typer.Exit(code=1)
        inv.to_dataframe().to_csv(output, sep=OUTPUT_SEPARATORS[fmt], index=False)
        success(f"Inventory report saved to {output}")


@app.command("download-info")
def download_info(
    dataset: Annotated[
        Optional[str],
        typer.Argument(help=f"Dataset name ({', '.join(DATASETS)})"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show where to download the raw data and where to put it."""
    if dataset is not None and dataset not in DATASETS:
        error(f"Invalid dataset: '{dataset}'. Valid options: {', '.join(DATASETS)}")
        raise typer.Exit(code=1)

    root = resolve_data_dir(data_dir)
    for name in [dataset] if dataset else list(DATASETS):
        config = DATASETS[name]
        console.print(f"\n[bold]{name}[/bold]: {config['description']}")
        for line in config["download"]:
            info(f"  {line}")
        info(f"  Raw directory: {datadir(RAW_DIR, name, root=root)}")


@app.command("info")
def show_info() -> None:
    """Show version, platform, dependency and configuration details."""
    from findr_tutorials.backend import FindrBackend

    table = Table(title="findr-tutorials", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("findr-tutorials Version", __version__)
    table.add_row("Python Version", sys.version.split()[0])
    table.add_row("Platform", platform.platform())
    console.print(table)

    deps = Table(title="Dependencies", show_header=True)
    deps.add_column("Package", style="cyan")
    deps.add_column("Version")
    for name in DEPENDENCIES:
        try:
            deps.add_row(name, package_version(name))
        except PackageNotFoundError:
            deps.add_row(name, "[red]not installed[/red]")
    console.print(deps)

    config = get_config()
    cfg = Table(title="Configuration", show_header=False)
    cfg.add_column("Key", style="cyan")
    cfg.add_column("Value")
    cfg.add_row("Config File", str(get_config_path()))
    cfg.add_row("Data Directory", str(datadir(root=resolve_data_dir())))
    cfg.add_row("Backend", config.backend or "-")
    cfg.add_row("Registered Backends", ", ".join(FindrBackend.available()) or "-")
    console.print(cfg)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration values."""
    for key, value in get_config().to_dict().items():
        console.print(f"[cyan]{key}[/cyan]: {value}")


@config_app.command("path")
def config_path() -> None:
    """Show the configuration file location."""
    console.print(str(get_config_path()))


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Configuration key")],
    value: Annotated[str, typer.Argument(help="New value ('none' to unset)")],
) -> None:
    """Set a configuration value and save it."""
    config = get_config()
    try:
        setattr(config, key, coerce_value(key, value))
    except KeyError:
        error(f"Unknown configuration key: '{key}'. Valid keys: {', '.join(config.__dataclass_fields__)}")
        raise typer.Exit(code=1)
    except ValueError as e:
        error(str(e))
        raise typer.Exit(code=1)

    path = save_config(config)
    reset_config()
    success(f"Set {key} = {value} in {path}")


@config_app.command("reset")
def config_reset() -> None:
    """Delete the configuration file and go back to defaults."""
    path = get_config_path()
    if path.exists():
        path.unlink()
        success(f"Removed {path}")
    else:
        info("No configuration file; defaults already in use")
    reset_config()


def main() -> None:
    """Entry point for the findr-tutorials CLI."""
    app()


if __name__ == "__main__":
    main()
