import typer
from pickup import samples as sample_tools, restarts, palette_tools, strip, file_utils
from pickup.kmeans import MAX_ITERATIONS, INIT_METHODS
from pathlib import Path
from PIL import UnidentifiedImageError
from typing import Optional

import sys

import rich.traceback

DEFAULT_CLUSTER_COUNT = 6

app = typer.Typer(add_completion=False)


def parse_cluster_count(value: Optional[str], default: int = DEFAULT_CLUSTER_COUNT) -> int:
    """Non-numeric or non-positive values quietly become the default."""
    if value is None:
        return default
    try:
        count = int(value.strip())
    except ValueError:
        return default
    return count if count >= 1 else default


# Unknown options pass through so a cluster count like "-1" reaches parse_cluster_count
@app.command(context_settings={"ignore_unknown_options": True})
def pickup_cli(
    input_path: Path = typer.Argument(
        ...,
        help="Input image file (e.g., photo.jpg).",
        metavar="IMAGE",
        exists=True, file_okay=True, dir_okay=False, readable=True, resolve_path=True,
    ),
    cluster_count_arg: Optional[str] = typer.Argument(
        None,
        help=f"Number of palette colors. Non-numeric or non-positive values fall back to {DEFAULT_CLUSTER_COUNT}.",
        metavar="[CLUSTER_COUNT]",
    ),
    # --- Clustering Options ---
    num_restarts: int = typer.Option(
        restarts.DEFAULT_RESTARTS, "--restarts", min=1,
        help=f"Independent k-means runs; the lowest distortion wins. Default: {restarts.DEFAULT_RESTARTS}."
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Root random seed for reproducible palettes. Default: fresh entropy."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", min=1, help="Parallel workers for the restarts. Default: CPU count."
    ),
    threads: bool = typer.Option(
        False, "--threads", help="Run restarts on a thread pool instead of processes."
    ),
    max_iterations: int = typer.Option(
        MAX_ITERATIONS, "--max-iterations", min=1,
        help=f"Iteration cap per run. Default: {MAX_ITERATIONS}."
    ),
    init: str = typer.Option(
        "random", "--init", help=f"Centroid initialization: {', '.join(INIT_METHODS)}. Default: random."
    ),
    # --- Output Options ---
    output_path: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Output PNG path. Default: <stem>-pickupcolor<k>.png next to the input.",
        dir_okay=False, resolve_path=True,
    ),
    block_width: int = typer.Option(strip.BLOCK_WIDTH, "--block-width", min=1, help=f"Width of each color block. Default: {strip.BLOCK_WIDTH}px."),
    height: int = typer.Option(strip.STRIP_HEIGHT, "--height", min=1, help=f"Strip height. Default: {strip.STRIP_HEIGHT}px."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print progress to stderr."),
):
    """
    Picks the dominant colors of an image and saves them as a palette strip.
    """
    command_line_str = " ".join(sys.argv)

    def progress(message: str):
        if verbose:
            typer.echo(message, err=True)

    if init not in INIT_METHODS:
        typer.secho(f"Error: --init must be one of: {', '.join(INIT_METHODS)}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    cluster_count = parse_cluster_count(cluster_count_arg)
    progress(f"Clustering into {cluster_count} colors with {num_restarts} restarts.")

    try:
        image = sample_tools.load_image(input_path)
    except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
        typer.secho(f"Error opening image {input_path}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    progress(f"Decoded {input_path.name}: {image.size[0]}x{image.size[1]} pixels, mode {image.mode}.")
    color_samples = sample_tools.extract_samples(image)
    if len(color_samples) == 0:
        typer.secho(
            f"No qualifying pixels in {input_path}: every pixel has saturation <= {sample_tools.MIN_SATURATION} "
            f"or value <= {sample_tools.MIN_VALUE}.",
            fg=typer.colors.RED, err=True
        )
        raise typer.Exit(code=1)
    progress(f"Kept {len(color_samples)} saturated samples.")

    summary = restarts.run_restarts(
        color_samples,
        cluster_count,
        restarts=num_restarts,
        seed=seed,
        max_workers=workers,
        use_processes=not threads,
        max_iterations=max_iterations,
        init=init
    )
    best = summary.best
    progress(f"Best run: restart {best.restart} after {best.iterations} iterations.")
    if not best.converged:
        typer.secho(
            f"Warning: best run hit the {max_iterations}-iteration cap before converging.",
            fg=typer.colors.YELLOW, err=True
        )

    palette = palette_tools.sort_by_hue(best.centroids)

    typer.echo(f"distortion: {best.distortion}")
    for line in palette_tools.format_palette_lines(palette):
        typer.echo(line)

    strip_image = strip.create_strip_image(palette, block_width=block_width, height=height)
    destination = output_path or file_utils.derive_output_path(input_path, cluster_count)
    try:
        file_utils.save_palette_png(
            strip_image,
            destination,
            command_line_invocation=command_line_str,
            additional_metadata={
                "SourceImage": input_path.name,
                "ClusterCount": str(cluster_count),
                "Distortion": repr(best.distortion),
                "Palette": " ".join(palette_tools.to_hex(c) for c in palette),
            }
        )
    except OSError as e:
        typer.secho(f"Error saving PNG to {destination}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    progress(f"Palette strip saved to: {destination}")


def main():
    rich.traceback.install(show_locals=False, suppress=[typer])
    app()


if __name__ == "__main__":
    main()
