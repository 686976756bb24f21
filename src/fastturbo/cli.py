# src/fastturbo/cli.py
from __future__ import annotations
import functools
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.tree import Tree

from .config import UserConfig, ConfigManager
from .exceptions import (
    FastTurboError,
    ConfigurationError,
    InvalidProjectNameError,
)
from .ignore import DEFAULT_IGNORE_RULES
from .installer import DependencyInstaller
from .models import PackageManager, ScaffoldResult
from .scaffolder import BUNDLED_TEMPLATE, ProjectScaffolder, describe_structure
from .validation import ProjectValidator

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    name="fastturbo",
    help="Turborepo monorepo scaffolding",
    context_settings=CONTEXT_SETTINGS,
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("fastturbo")


def handle_errors(func):
    """Decorator to handle common errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FastTurboError as e:
            console.print(f"[red bold]Error: {escape(str(e))}[/red bold]")
            _report_cleanup(e)
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except Exception as e:
            console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
            console.print("[dim]Run with --verbose for more details[/dim]")
            logger.debug("Unhandled exception", exc_info=True)
            sys.exit(1)

    return wrapper


def _report_cleanup(error: FastTurboError) -> None:
    if error.cleanup_error is not None:
        console.print(f"[red]Warning: {error.cleanup_error}[/red]")
    elif error.cleaned_up:
        console.print("[yellow]Cleaned up partial installation[/yellow]")


def configure_logging(verbose: bool = False) -> None:
    """Route the package logger through rich on stderr."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def resolve_package_manager(
    npm: bool, pnpm: bool, yarn: bool, package_manager: Optional[str]
) -> Optional[PackageManager]:
    """Turn selector flags into a package manager, or None if none was given."""
    flags = {PackageManager.NPM: npm, PackageManager.PNPM: pnpm, PackageManager.YARN: yarn}
    chosen = {pm for pm, flag in flags.items() if flag}
    if package_manager:
        chosen.add(PackageManager.parse(package_manager))
    if len(chosen) > 1:
        raise FastTurboError("Choose only one package manager")
    return chosen.pop() if chosen else None


def prompt_project_name(default: str) -> str:
    while True:
        name = Prompt.ask("Project name", default=default, console=console).strip()
        try:
            ProjectValidator.validate_project_name(name)
        except InvalidProjectNameError as e:
            console.print(f"[red]{e}[/red]")
            continue
        return name


def prompt_package_manager(default: PackageManager) -> PackageManager:
    for pm in PackageManager:
        console.print(f"  [cyan]{pm.value}[/cyan] [dim]{pm.label}[/dim]")
    answer = Prompt.ask(
        "Package manager",
        choices=[pm.value for pm in PackageManager],
        default=default.value,
        console=console,
    )
    return PackageManager(answer)


def show_structure(result: ScaffoldResult) -> None:
    tree = Tree(f"[bold]{result.project_name}[/bold]")
    for entry, children in describe_structure(result.destination).items():
        branch = tree.add(entry)
        for child in children:
            branch.add(f"[dim]{child}[/dim]")
    console.print(Panel(tree, title="Project Structure", border_style="cyan"))


@handle_errors
def create(
    name: Optional[str] = typer.Argument(None, help="Project name/directory"),
    npm: bool = typer.Option(False, "--npm", help="Use npm"),
    pnpm: bool = typer.Option(False, "--pnpm", help="Use pnpm (default)"),
    yarn: bool = typer.Option(False, "--yarn", help="Use yarn"),
    package_manager: Optional[str] = typer.Option(
        None, "--package-manager", help="Package manager: npm, pnpm or yarn"
    ),
    install: Optional[bool] = typer.Option(
        None, "--install/--no-install", help="Install dependencies after scaffolding (pnpm only by default)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show detailed output"),
) -> None:
    """Create a new Turborepo monorepo."""
    configure_logging(verbose)
    user_config = UserConfig.load()

    console.print("[cyan bold]\ncreate-fast-turbo[/cyan bold]")
    console.print("[dim]Turborepo scaffolding[/dim]\n")

    scaffolder = ProjectScaffolder()
    with console.status("[blue]Validating template..."):
        scaffolder.validate_template()
    console.print("[green]✓[/green] Template validated")

    selected = resolve_package_manager(npm, pnpm, yarn, package_manager)
    if name is None:
        name = prompt_project_name(user_config.default_project_name)
    if selected is None:
        selected = prompt_package_manager(user_config.default_package_manager)

    with console.status("[blue]Scaffolding project..."):
        result = scaffolder.scaffold(name, selected)
    console.print("[green]✓[/green] Project scaffolded")

    if not user_config.quiet_mode:
        show_structure(result)

    installer = None
    if install is None:
        install = user_config.install_dependencies and selected is PackageManager.PNPM
    if install:
        installer = DependencyInstaller(
            target_dir=result.destination,
            package_manager=selected,
            timeout=user_config.install_timeout,
        )
        installer.start()

    steps = "\n".join(f"  [cyan]{step}[/cyan]" for step in result.next_steps)
    console.print(
        Panel.fit(
            f"[green bold]Project ready![/green bold]\n"
            f"[bold]Location:[/bold] {result.destination}\n"
            f"[bold]Package manager:[/bold] {selected.value}\n\n"
            f"[bold]Next steps:[/bold]\n{steps}",
            title="Ready",
            border_style="green",
        )
    )

    if installer is not None:
        with console.status("[blue]Installing dependencies..."):
            outcome = installer.finish()
        if outcome.succeeded:
            console.print("[green]✓[/green] Dependencies installed")
        else:
            console.print("[yellow bold]Note:[/yellow bold]")
            console.print("[dim]  Dependencies may still be missing.[/dim]")
            console.print(f"[dim]  Run '{' '.join(selected.install_command)}' inside the project.[/dim]")


app.command("create")(create)

# Single-command entry point: `create-fast-turbo my-app --yarn`
create_app = typer.Typer(
    name="create-fast-turbo",
    help="Turborepo monorepo scaffolding",
    context_settings=CONTEXT_SETTINGS,
    add_completion=False,
)
create_app.command()(create)


@app.command()
def info() -> None:
    """Show the bundled template and the entries it never copies."""
    console.print(f"[bold]Template:[/bold] {BUNDLED_TEMPLATE}")

    table = Table(title="Ignored entries")
    table.add_column("Pattern", style="bold")
    table.add_column("Kind")
    for rule in DEFAULT_IGNORE_RULES:
        table.add_row(rule.pattern, "wildcard" if rule.is_wildcard else "name or path")
    console.print(table)


@app.command()
@handle_errors
def config(
    show: bool = typer.Option(False, "--show", help="Show current config"),
    init: bool = typer.Option(False, "--init", help="Initialize config file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
    set_key: Optional[str] = typer.Option(None, "--set", help="Set config key=value"),
    path: Optional[Path] = typer.Option(None, "--path", help="Config file path"),
) -> None:
    """Manage fastturbo configuration."""

    if init:
        try:
            config_path = ConfigManager.initialize_config(path, overwrite=force)
            console.print(f"[green]✓ Config initialized at {config_path}[/green]")
            console.print("[dim]Edit the file to customize your defaults[/dim]")
        except ConfigurationError as e:
            if "already exists" in str(e):
                console.print(f"[yellow]{e}[/yellow]")
                console.print("[dim]Use --force to overwrite[/dim]")
            else:
                raise
        return

    if show:
        details = ConfigManager.show_config_info()

        console.print(
            Panel(
                f"[bold]Config file:[/bold] {details['config_file']}\n\n" + json.dumps(details["config"], indent=2),
                title="Current Configuration",
                border_style="blue",
            )
        )

        console.print("\n[dim]Search paths:[/dim]")
        for i, search_path in enumerate(details["search_paths"], 1):
            console.print(f"  {i}. {search_path}")

        return

    if set_key:
        if "=" not in set_key:
            console.print("[red]Error: Format should be --set key=value[/red]")
            sys.exit(1)

        key, value = set_key.split("=", 1)

        user_config = UserConfig.load()
        user_config.update_setting(key, value)
        config_path = user_config.save(path)
        console.print(f"[green]✓ Set {key} = {value}[/green]")
        console.print(f"[dim]Saved to {config_path}[/dim]")
        return

    # Default: show help
    console.print("Use --show to view config, --init to create, or --set key=value to modify")


def main() -> None:
    create_app()


if __name__ == "__main__":
    app()
