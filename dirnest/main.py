# main.py
import logging
from pathlib import Path

import click

from dirnest.models import ViewSettings
from dirnest.provider import NestingTreeProvider
from dirnest.renderer import Renderer
from dirnest.scanner import DirectoryScanner
from dirnest.settings import NestingConfig, SettingsError, SettingsStore, normalize_extensions

logger = logging.getLogger("dirnest")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        force=True,
    )


def _apply(store: SettingsStore, config: NestingConfig) -> NestingConfig:
    try:
        return store.apply(config)
    except SettingsError as e:
        raise click.ClickException(str(e)) from e


def _describe(config: NestingConfig) -> str:
    state = "enabled" if config.enabled else "disabled"
    extensions = ", ".join(config.enabled_extensions) or "(none)"
    return f"Nesting: {state}\nExtensions: {extensions}"


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Settings file to use instead of the per-user default.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx, config_path, verbose):
    """
    Shows a project tree where a directory named like a sibling file
    (User.php + User/) is nested under that file.
    """
    _configure_logging(verbose)
    ctx.obj = SettingsStore(config_path)


def _scan(path: str, all_files: bool, ignore_gitignore: bool):
    view_settings = ViewSettings(show_hidden=all_files, respect_gitignore=not ignore_gitignore)
    return DirectoryScanner(view_settings).scan(path)


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--no-nesting", is_flag=True, help="Render the plain tree, ignoring the nesting settings.")
@click.option("-a", "--all", "all_files", is_flag=True, help="Include hidden files and directories.")
@click.option("-g", "--ignore-gitignore", is_flag=True, help="Do not hide paths matched by .gitignore.")
@click.option("-L", "--max-depth", type=click.IntRange(min=1), default=None,
              help="Descend at most this many levels.")
@click.pass_obj
def tree(store, path, no_nesting, all_files, ignore_gitignore, max_depth):
    """Print the nested project tree of PATH."""
    logger.debug("Rendering tree for %s", path)
    root = _scan(path, all_files, ignore_gitignore)
    config = store.snapshot()
    if no_nesting:
        config = config.with_enabled(False)
    renderer = Renderer(NestingTreeProvider(config), max_depth=max_depth)
    click.echo(renderer.render_tree([root]))


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("-a", "--all", "all_files", is_flag=True, help="Include hidden files and directories.")
@click.option("-g", "--ignore-gitignore", is_flag=True, help="Do not hide paths matched by .gitignore.")
@click.option("-e", "--editor", "open_in_editor", is_flag=True,
              help="Open the chosen file in $EDITOR instead of printing its path.")
@click.pass_obj
def view(store, path, all_files, ignore_gitignore, open_in_editor):
    """Browse the nested project tree of PATH interactively."""
    # Imported here so `tree` and `config` do not pay for textual
    from dirnest.viewer import NestingTreeApp

    root = _scan(path, all_files, ignore_gitignore)
    opened = NestingTreeApp(root, store).run()
    if not opened:
        return
    if open_in_editor:
        click.edit(filename=opened)
    else:
        click.echo(opened)


@cli.group()
def config():
    """Show or change the nesting settings."""


@config.command("show")
@click.pass_obj
def config_show(store):
    """Print the current settings."""
    click.echo(_describe(store.snapshot()))
    click.echo(f"File: {store.path}")


@config.command("enable")
@click.pass_obj
def config_enable(store):
    """Turn nesting on."""
    click.echo(_describe(_apply(store, store.snapshot().with_enabled(True))))


@config.command("disable")
@click.pass_obj
def config_disable(store):
    """Turn nesting off."""
    click.echo(_describe(_apply(store, store.snapshot().with_enabled(False))))


@config.command("add")
@click.argument("extensions", nargs=-1, required=True)
@click.pass_obj
def config_add(store, extensions):
    """Allow files with EXTENSIONS (without dot) to nest directories."""
    wanted = normalize_extensions(extensions)
    if not wanted:
        raise click.BadParameter("no usable extension given", param_hint="EXTENSIONS")
    updated = store.snapshot()
    for ext in wanted:
        updated = updated.with_extension(ext)
    click.echo(_describe(_apply(store, updated)))


@config.command("remove")
@click.argument("extensions", nargs=-1, required=True)
@click.pass_obj
def config_remove(store, extensions):
    """Stop nesting directories under files with EXTENSIONS."""
    wanted = normalize_extensions(extensions)
    if not wanted:
        raise click.BadParameter("no usable extension given", param_hint="EXTENSIONS")
    updated = store.snapshot()
    for ext in wanted:
        if ext not in updated.enabled_extensions:
            click.secho(f"[{ext} was not enabled]", fg="yellow", err=True)
        updated = updated.without_extension(ext)
    click.echo(_describe(_apply(store, updated)))


@config.command("reset")
@click.pass_obj
def config_reset(store):
    """Restore the default settings."""
    click.echo(_describe(_apply(store, NestingConfig())))


if __name__ == "__main__":
    cli()
