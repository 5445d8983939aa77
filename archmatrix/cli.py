"""
Command-line interface for archmatrix.

This module provides a subcommand-based CLI using Typer. The target and the
toggles come from the CI environment (TARGET, RUSTFLAGS, NORUN, NOSTD, ...);
the options only control how the run is carried out.
"""

import shutil
import sys
from pathlib import Path
from typing import Optional

import typer

from archmatrix.core.config import Config
from archmatrix.core.discovery import find_examples_dir
from archmatrix.core.environment import RunEnvironment, resolve_environment
from archmatrix.core.errors import ArchMatrixError
from archmatrix.core.logging import setup_logger
from archmatrix.core.pipeline import MatrixPipeline

# Exit status for a missing TARGET or an unusable configuration.
CONFIG_ERROR_EXIT = 2

app = typer.Typer(
    name="archmatrix",
    help="Run the per-target cargo test matrix for the SIMD crates workspace",
    add_completion=False,
)


def get_config(
    verbosity: Optional[int] = None,
    dry_run: bool = False,
    project_root: Optional[Path] = None,
    cargo: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> Config:
    """Create and configure Config object. Command-line values win over the config file."""
    config = Config(project_root=project_root)
    if dry_run:
        config.dry_run = True
    if cargo:
        config.cargo = cargo
    if log_file:
        config.log_file = log_file
    if verbosity is not None:
        if not 0 <= verbosity <= 3:
            raise ValueError(f"verbosity must be between 0 and 3, got {verbosity}")
        config.verbosity = verbosity
    return config


def _load(**kwargs) -> tuple[Config, RunEnvironment]:
    """Resolve environment first (TARGET is checked before anything else), then config."""
    try:
        environment = resolve_environment()
        config = get_config(**kwargs)
    except (ArchMatrixError, ValueError) as e:
        typer.echo(f"✗ {e}", err=True)
        sys.exit(CONFIG_ERROR_EXIT)
    return config, environment


@app.command()
def run(
    verbosity: Optional[int] = typer.Option(None, "--verbosity", "-v", help="Verbosity level (0-3)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the commands without running them"),
    cargo: Optional[str] = typer.Option(None, help="cargo executable"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write the log to this file"),
    project_root: Optional[Path] = typer.Option(None, "--repo-root", help="Workspace root directory"),
):
    """Run every planned invocation in order, stopping at the first failure."""
    config, environment = _load(
        verbosity=verbosity, dry_run=dry_run, project_root=project_root, cargo=cargo, log_file=log_file,
    )
    setup_logger(verbosity=config.verbosity, log_file=config.log_file)

    pipeline = MatrixPipeline(config, environment)
    for line in pipeline.summary_lines():
        typer.echo(line)

    result = pipeline.run()
    if result.success:
        typer.echo(f"✓ {result.message}")
        sys.exit(0)
    if result.skipped:
        typer.echo(result.message)
        sys.exit(0)
    typer.echo(f"✗ {result.message}", err=True)
    sys.exit(result.exit_code)


@app.command(name="plan")
def plan_command(
    cargo: Optional[str] = typer.Option(None, help="cargo executable"),
    project_root: Optional[Path] = typer.Option(None, "--repo-root", help="Workspace root directory"),
):
    """Print the ordered invocation plan and exit."""
    config, environment = _load(project_root=project_root, cargo=cargo)
    pipeline = MatrixPipeline(config, environment)
    for line in pipeline.format_plan():
        typer.echo(line)
    sys.exit(0)


@app.command()
def flags(
    project_root: Optional[Path] = typer.Option(None, "--repo-root", help="Workspace root directory"),
):
    """Print the composed RUSTFLAGS for TARGET."""
    config, environment = _load(project_root=project_root)
    typer.echo(MatrixPipeline(config, environment).flags.render())
    sys.exit(0)


@app.command()
def doctor(
    cargo: Optional[str] = typer.Option(None, help="cargo executable"),
    project_root: Optional[Path] = typer.Option(None, "--repo-root", help="Workspace root directory"),
):
    """Run preflight checks (cargo, workspace layout, TARGET)."""
    typer.echo("Running preflight checks...")
    all_ok = True

    try:
        config = get_config(project_root=project_root, cargo=cargo)
        typer.echo(f"✓ Workspace root: {config.project_root}")
    except ArchMatrixError as e:
        typer.echo(f"✗ Workspace root not found: {e}", err=True)
        sys.exit(1)

    if shutil.which(config.cargo):
        typer.echo(f"✓ {config.cargo} found")
    else:
        typer.echo(f"✗ {config.cargo} not found", err=True)
        all_ok = False

    for package in (config.package_set.core_arch, config.package_set.std_detect):
        manifest = config.project_root / package.manifest_path if package.manifest_path else None
        if manifest is None or manifest.exists():
            typer.echo(f"✓ {package.name} manifest")
        else:
            typer.echo(f"✗ {package.name} manifest not found: {manifest}", err=True)
            all_ok = False

    try:
        find_examples_dir(config.project_root)
        typer.echo("✓ examples/ exists")
    except ArchMatrixError as e:
        typer.echo(f"⚠ {e}", err=True)

    try:
        environment = resolve_environment()
        typer.echo(f"✓ TARGET={environment.target}")
    except ArchMatrixError as e:
        typer.echo(f"⚠ {e}", err=True)

    if all_ok:
        typer.echo("\n✓ All preflight checks passed")
        sys.exit(0)
    typer.echo("\n✗ Some preflight checks failed", err=True)
    sys.exit(1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
