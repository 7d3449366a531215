from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

import click

from .common import ModmanGenError, UniqueSet, logger
from .compactor import globify_and_format
from .differ import diff_trees
from .ext.logging import set_level
from .layout import find_target_directory
from .utils import read_lines


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except ModmanGenError as e:
        # ClickException exits with 1
        raise click.ClickException(str(e)) from e


@click.group(context_settings={'max_content_width': 120, 'show_default': True})
@click.option('--verbose', '-v', is_flag=True, default=False, help='Log each unique path found')
@click.option('--quiet', '-q', is_flag=True, default=False, help='Only log warnings and errors')
def main(*, verbose: bool, quiet: bool) -> None:
    if verbose and quiet:
        raise click.UsageError("--verbose and --quiet are mutually exclusive")
    if verbose:
        set_level(logger, 'debug')
    if quiet:
        set_level(logger, 'warning')


option_module_dir = click.option(
    '--module-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Modman module directory [default: current directory]',
)
option_target_dir = click.option(
    '--target-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='''
Directory the module is overlaid onto.

By default the module is expected to be in <target>/.modman/<module>, and the target is derived from that.
''',
)


def _get_dirs(*, module_dir: Path | None, target_dir: Path | None) -> tuple[Path, Path]:
    if module_dir is None:
        module_dir = Path.cwd()
    module_dir = module_dir.absolute()
    if target_dir is None:
        target_dir = find_target_directory(module_dir)
    target_dir = target_dir.absolute()
    logger.info('module: %s, target: %s', module_dir, target_dir)
    return module_dir, target_dir


def _compute_unique(*, module_dir: Path | None, target_dir: Path | None) -> UniqueSet:
    mdir, tdir = _get_dirs(module_dir=module_dir, target_dir=target_dir)
    return diff_trees(mdir, tdir)


@main.command(name='generate', short_help='generate modman file for a module')
@option_module_dir
@option_target_dir
@click.option(
    '--output',
    '-o',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write entries to this file instead of stdout (e.g. <module>/modman)',
)
def generate(*, module_dir: Path | None, target_dir: Path | None, output: Path | None) -> None:
    with _reporting_errors():
        res = _compute_unique(module_dir=module_dir, target_dir=target_dir)
        # NOTE: everything is computed before writing, so failures never leave a partial manifest behind
        lines = globify_and_format(res.paths())

    logger.info('%d modman entries', len(lines))
    if output is None:
        for line in lines:
            click.echo(line)
    else:
        output.write_text(''.join(line + '\n' for line in lines))
        click.secho(f'Wrote {len(lines)} entries to {output}', fg='green', err=True)


@main.command(name='unique', short_help='print paths unique to the module (before globbing)')
@option_module_dir
@option_target_dir
def unique(*, module_dir: Path | None, target_dir: Path | None) -> None:
    with _reporting_errors():
        res = _compute_unique(module_dir=module_dir, target_dir=target_dir)
    for d in res.directories:
        click.echo(f'd\t{d}')
    for f in res.files:
        click.echo(f'f\t{f}')


@main.command(name='compact', short_help='glob a list of relative paths into modman entries')
@click.argument('input', type=click.File('r'), default='-')
def compact(*, input: IO[str]) -> None:  # noqa: A002
    '''
    Reads paths (one per line, relative to the module root) from INPUT or stdin
    '''
    paths = list(read_lines(input))
    with _reporting_errors():
        try:
            lines = globify_and_format(paths)
        except ValueError as e:
            # malformed path
            raise click.BadParameter(str(e), param_hint='INPUT') from e
    for line in lines:
        click.echo(line)


if __name__ == '__main__':
    main()
