"""
Output functions for saving flow-field grids.

Supports GeoTIFF rasters (rasterio) and PNG heatmaps and quiver plots
(matplotlib). Both libraries are optional at import time; the functions
that need them raise ImportError.

Rasters are written with world x along the horizontal axis and world y
increasing upward, i.e. the (rows, cols) grid transposed.
"""

from pathlib import Path

import numpy as np

from flowfield.core.dtypes import COST_MAX, INTEGR_MAX

try:
    import rasterio
    from rasterio.crs import CRS
    from rasterio.transform import from_bounds

    HAS_RASTERIO = True
except ImportError:
    HAS_RASTERIO = False

try:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.colors import LinearSegmentedColormap

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


NODATA = -1


def create_cost_colormap():
    """
    Create a colormap for terrain cost.

    Pale (open) -> Orange (rough) -> Dark brown (near wall)
    """
    colors = [
        (0.95, 0.95, 0.9),  # Open
        (0.95, 0.8, 0.5),  # Light cost
        (0.85, 0.5, 0.2),  # Rough
        (0.4, 0.2, 0.1),  # Wall
    ]
    return LinearSegmentedColormap.from_list("terrain_cost", colors, N=COST_MAX + 1)


def to_raster(values: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Reshape a per-cell array to (cols, rows): axis 0 = world y, axis 1 = world x."""
    return np.asarray(values).reshape(rows, cols).T


def get_transform(rows: int, cols: int, cell_size: float, origin_x: float = 0.0, origin_y: float = 0.0):
    """
    Create affine transform for GeoTIFF.

    Args:
        rows: Cells along world x
        cols: Cells along world y
        cell_size: World units per cell
        origin_x: X coordinate of lower-left corner
        origin_y: Y coordinate of lower-left corner

    Returns:
        Affine transform
    """
    return from_bounds(
        origin_x,
        origin_y,
        origin_x + rows * cell_size,
        origin_y + cols * cell_size,
        rows,
        cols,
    )


def save_geotiff(
    raster: np.ndarray,
    filepath: str | Path,
    cell_size: float = 1.0,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
    crs: str | None = None,
    nodata: float | None = None,
) -> None:
    """
    Save a (cols, rows) raster as a single-band GeoTIFF.

    Args:
        raster: 2D array from ``to_raster``
        filepath: Output path
        cell_size: World units per cell
        origin_x: X coordinate of lower-left corner
        origin_y: Y coordinate of lower-left corner
        crs: Optional coordinate reference system (arena units by default)
        nodata: NoData value
    """
    if not HAS_RASTERIO:
        raise ImportError("rasterio is required for GeoTIFF output")

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    height, width = raster.shape
    transform = get_transform(width, height, cell_size, origin_x, origin_y)

    # rasterio uses a top-left origin
    data_flipped = np.flipud(raster)

    profile = {
        "driver": "GTiff",
        "dtype": raster.dtype,
        "width": width,
        "height": height,
        "count": 1,
        "transform": transform,
        "compress": "lzw",
    }
    if crs is not None:
        profile["crs"] = CRS.from_string(crs)
    if nodata is not None:
        profile["nodata"] = nodata

    with rasterio.open(filepath, "w", **profile) as dst:
        dst.write(data_flipped, 1)


def save_thumbnail(
    raster: np.ndarray,
    filepath: str | Path,
    colormap="viridis",
    vmin: float | None = None,
    vmax: float | None = None,
    title: str | None = None,
    figsize: tuple[int, int] = (6, 6),
    dpi: int = 100,
) -> None:
    """
    Save a (cols, rows) raster as PNG heatmap with colormap.

    Args:
        raster: 2D array from ``to_raster``
        filepath: Output path
        colormap: Matplotlib colormap name or object
        vmin: Minimum value for colormap
        vmax: Maximum value for colormap
        title: Optional title
        figsize: Figure size in inches
        dpi: Resolution
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for thumbnail output")

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=figsize)

    im = ax.imshow(
        raster,
        cmap=colormap,
        vmin=vmin,
        vmax=vmax,
        origin="lower",
        aspect="equal",
    )

    plt.colorbar(im, ax=ax, shrink=0.8)

    if title:
        ax.set_title(title)

    ax.set_xlabel("X [cells]")
    ax.set_ylabel("Y [cells]")

    plt.tight_layout()
    plt.savefig(filepath, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def save_quiver(
    field,
    filepath: str | Path,
    title: str | None = None,
    figsize: tuple[int, int] = (6, 6),
    dpi: int = 100,
) -> None:
    """
    Save the flow field as an arrow plot over the integration heatmap.

    Cells with a zero flow vector get no arrow; walls are drawn black.
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for quiver output")

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    rows, cols = field.rows, field.cols
    integration = field.integration_array().astype(np.float32)
    integration[integration == INTEGR_MAX] = np.nan
    flow = field.flow_array()
    moving = np.any(flow != 0.0, axis=1)

    # Cell coordinates of every center, x along rows
    cx, cy = np.divmod(np.arange(field.size), cols)

    fig, ax = plt.subplots(figsize=figsize)
    cmap = matplotlib.colormaps["viridis"].copy()
    cmap.set_bad("black")
    ax.imshow(
        to_raster(integration, rows, cols),
        cmap=cmap,
        origin="lower",
        aspect="equal",
        extent=(0, rows, 0, cols),
    )
    ax.quiver(
        cx[moving] + 0.5,
        cy[moving] + 0.5,
        flow[moving, 0],
        flow[moving, 1],
        color="white",
        angles="xy",
        scale_units="xy",
        scale=1.5,
    )

    if title:
        ax.set_title(title)
    ax.set_xlabel("X [cells]")
    ax.set_ylabel("Y [cells]")

    plt.tight_layout()
    plt.savefig(filepath, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def save_field_output(
    field,
    output_dir: str | Path,
    prefix: str = "field",
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> dict[str, Path]:
    """
    Save cost and integration grids as GeoTIFF, plus PNG thumbnails.

    Args:
        field: FlowField after recompute
        output_dir: Output directory
        prefix: Filename prefix
        origin_x: X coordinate of lower-left corner
        origin_y: Y coordinate of lower-left corner

    Returns:
        Dictionary mapping output names to paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    rows, cols = field.rows, field.cols
    outputs = {}

    cost = to_raster(field.cost_array().astype(np.int32), rows, cols)
    integration_np = field.integration_array().astype(np.int32)
    integration = to_raster(
        np.where(integration_np == INTEGR_MAX, NODATA, integration_np), rows, cols
    )

    if HAS_RASTERIO:
        cost_path = output_dir / f"{prefix}_cost.tif"
        save_geotiff(cost, cost_path, field.cell_size, origin_x, origin_y)
        outputs["cost_tif"] = cost_path

        integration_path = output_dir / f"{prefix}_integration.tif"
        save_geotiff(
            integration, integration_path, field.cell_size, origin_x, origin_y,
            nodata=NODATA,
        )
        outputs["integration_tif"] = integration_path

    if HAS_MATPLOTLIB:
        cost_png = output_dir / f"{prefix}_cost.png"
        save_thumbnail(
            cost, cost_png, colormap=create_cost_colormap(),
            vmin=0, vmax=COST_MAX, title="Cost",
        )
        outputs["cost_png"] = cost_png

        integration_png = output_dir / f"{prefix}_integration.png"
        masked = np.where(integration == NODATA, np.nan, integration.astype(np.float32))
        save_thumbnail(
            masked, integration_png, vmin=0,
            title=f"Integration (target {field.target})",
        )
        outputs["integration_png"] = integration_png

        flow_png = output_dir / f"{prefix}_flow.png"
        save_quiver(field, flow_png, title="Flow")
        outputs["flow_png"] = flow_png

    return outputs
