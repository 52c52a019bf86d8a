import click
from dataclasses import replace
from pathlib import Path

from chipview import Q_, set_log_level, succeed, warn
from chipview.backends.gds import GDSReader
from chipview.backends.recording import RecordingSurface
from chipview.config import ViewerConfig
from chipview.coordinator import ParseCoordinator
from chipview.errors import LayoutError
from chipview.layout.bounds import aggregate
from chipview.layout.transform import Rectangle
from chipview.viewer import Viewer


def _check_suffix(path: Path) -> None:
    # Advisory only: unknown suffixes are still handed to the reader
    if path.suffix.lower() not in GDSReader.suffixes:
        warn(f"'{path.name}' does not look like a GDSII or OASIS file, trying anyway")


def _load_config(config_path, margin) -> ViewerConfig:
    try:
        config = ViewerConfig.load(config_path)
    except (OSError, ValueError) as e:
        raise click.ClickException(f'Invalid configuration: {e}')
    if margin is not None:
        config = replace(config, margin=margin)
    return config


def _parse_and_draw(layout: Path, config: ViewerConfig, surface, width, height, timeout):
    """Parse *layout* on a worker thread, wait for it, then draw one frame."""
    _check_suffix(layout)
    viewer = Viewer(ParseCoordinator(), config)
    viewer.open(layout)
    if not viewer.coordinator.wait(timeout):
        raise click.ClickException(f'Timed out after {timeout}s while parsing {layout}')
    frame = viewer.draw(Rectangle(0, 0, width, height), surface)
    if frame.outcome.is_error:
        raise click.ClickException(frame.outcome.error)
    return frame


def _size_options(func):
    func = click.option('--height', type=click.IntRange(min=1), default=420, show_default=True,
                        help='Viewport height in pixels')(func)
    func = click.option('--width', type=click.IntRange(min=1), default=420, show_default=True,
                        help='Viewport width in pixels')(func)
    return func


@click.group()
@click.option('--log-level', default='WARNING', show_default=True,
              help="DEBUG, INFO, WARNING, ERROR or SILENT")
def cli(log_level):
    """ Viewer for GDSII/OASIS integrated-circuit layouts """
    try:
        set_log_level(log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--log-level')


@cli.command()
@click.argument('layout', type=click.Path(dir_okay=False, path_type=Path))
@click.option('-o', '--output', type=click.Path(dir_okay=False, path_type=Path),
              help='PNG file to write (default: LAYOUT name with .png suffix)')
@_size_options
@click.option('--margin', type=click.FloatRange(min=0), default=None,
              help='Pixel margin around the layout (overrides the config)')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML viewer configuration')
@click.option('--timeout', type=float, default=None, help='Seconds to wait for the parse')
def render(layout, output, width, height, margin, config_path, timeout):
    """ Render LAYOUT to a PNG image """
    from chipview.backends.mpl import MatplotlibSurface

    config = _load_config(config_path, margin)
    surface = MatplotlibSurface(width, height)
    frame = _parse_and_draw(layout, config, surface, width, height, timeout)

    output = output or Path(layout.name).with_suffix('.png')
    surface.save(output)
    succeed(f'Wrote {output} ({frame.shapes_drawn} shapes)')


@cli.command()
@click.argument('layout', type=click.Path(dir_okay=False, path_type=Path))
def info(layout):
    """ Print cells, layers and extent of LAYOUT """
    _check_suffix(layout)
    try:
        db = GDSReader().read(layout)
    except (LayoutError, OSError) as e:
        raise click.ClickException(str(e))

    click.echo(f'Library: {db.name}')
    unit = Q_(db.unit, "m").to("nm")
    click.echo(f'Unit: {unit.magnitude:g} {unit.units:~}')
    click.echo(f'Cells: {len(db.cells())}')
    for name in db.cells():
        cell = db.cell(name)
        click.echo(f'  {name}: {len(cell)} shapes, {len(cell.references)} references')
    click.echo(f'Layers: {len(db.layers())}')
    for layer in db.layers():
        click.echo(f'  {layer}')

    bbox = aggregate(db)
    if bbox is None:
        click.echo('Bounding box: empty')
        return
    click.echo(f'Bounding box: ({bbox.min_x:g}, {bbox.min_y:g}) - ({bbox.max_x:g}, {bbox.max_y:g})')
    width = Q_(bbox.width * db.unit, 'm').to('um')
    height = Q_(bbox.height * db.unit, 'm').to('um')
    click.echo(f'Size: {width.magnitude:.3f} x {height.magnitude:.3f} {width.units:~}')


@cli.command()
@click.argument('layout', type=click.Path(dir_okay=False, path_type=Path))
@_size_options
@click.option('--margin', type=click.FloatRange(min=0), default=None,
              help='Pixel margin around the layout (overrides the config)')
@click.option('--timeout', type=float, default=None, help='Seconds to wait for the parse')
def inspect(layout, width, height, margin, timeout):
    """ Count the draw primitives LAYOUT renders to """
    config = _load_config(None, margin)
    surface = RecordingSurface()
    frame = _parse_and_draw(layout, config, surface, width, height, timeout)

    counts = surface.counts()
    click.echo(f'Shapes drawn: {frame.shapes_drawn}')
    for kind in ('rounded_rect', 'rect', 'path'):
        click.echo(f'  {kind}: {counts.get(kind, 0)}')
    if frame.transform is not None:
        click.echo(f'Scale: {frame.transform.scale:.6g} px/unit')


@cli.command()
@click.argument('layout', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML viewer configuration')
def view(layout, config_path):
    """ Open the interactive viewer window """
    try:
        from chipview.gui.main_window import run
    except ImportError as e:
        raise click.ClickException(f'The viewer window needs PyQt5 (pip install chipview[gui]): {e}')
    config = _load_config(config_path, None)
    raise SystemExit(run(layout, config))
