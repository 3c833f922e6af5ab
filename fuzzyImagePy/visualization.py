from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence
import numpy as np

try:
    import matplotlib.pyplot as plt
    import seaborn as sns
    _PLOT_AVAILABLE = True
except ImportError:
    _PLOT_AVAILABLE = False

if TYPE_CHECKING:
    from .cardinality import EDCardinal
    from .fuzzy_image import FuzzyImage
    from .fuzzy_set import FuzzySetCollection
    from .level_set import LevelSet


def _check_plotting_availability():
    """Helper function to raise an error if plotting libraries are not installed."""
    if not _PLOT_AVAILABLE:
        raise ImportError("Plotting functionality requires matplotlib and seaborn. "
                          "Please install them using: pip install matplotlib seaborn")

# ==============================================================================
# 1. MEMBERSHIP FUNCTIONS
# ==============================================================================

def plot_membership_function(
    mfunction: Any,
    x_range: Sequence[float],
    num_points: int = 200,
    label: str | None = None,
    ax: Optional['plt.Axes'] = None,
    figsize=(8, 5)
) -> 'plt.Figure':
    """
    Plots a scalar membership function over an interval.

    Args:
        mfunction: Any callable float -> degree (a membership function or `fs.membership_degree`).
        x_range: (start, end) of the plotted domain.
        num_points: Number of samples.
        label: Legend label; the function's repr if omitted.
        ax: Existing axes to draw on; a new figure is created if omitted.
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()
    start, end = x_range
    if start >= end:
        raise ValueError("x_range must be an increasing (start, end) pair.")

    xs = np.linspace(start, end, num_points)
    ys = [mfunction(x) for x in xs]

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    ax.plot(xs, ys, label=label or repr(mfunction))
    ax.set_ylim(-0.05, 1.05)
    ax.set_xlabel('Domain value')
    ax.set_ylabel('Membership degree')
    ax.grid(True, alpha=0.5)
    ax.legend()
    return fig

# ==============================================================================
# 2. IMAGES
# ==============================================================================

def plot_degree_map(degrees: 'np.ndarray | FuzzyImage', title: str = 'Membership degrees', figsize=(8, 6)) -> 'plt.Figure':
    """
    Shows a degree raster: a FuzzyImage, a float array in [0, 1] or a grey
    mapping result in [0, 255].
    """
    _check_plotting_availability()
    data = degrees.degrees if hasattr(degrees, 'degrees') else np.asarray(degrees)
    if data.ndim != 2:
        raise ValueError(f"Expected a single band degree map, got shape {data.shape}.")
    vmax = 1.0 if np.issubdtype(data.dtype, np.floating) else 255

    fig, ax = plt.subplots(figsize=figsize)
    im = ax.imshow(data, cmap='gray', vmin=0, vmax=vmax)
    fig.colorbar(im, ax=ax)
    ax.set_title(title)
    ax.set_axis_off()
    fig.tight_layout()
    return fig

# ==============================================================================
# 3. DISCRETE FUZZY SETS
# ==============================================================================

def plot_level_set(level_set: 'LevelSet', figsize=(10, 6)) -> 'plt.Figure':
    """Plots the number of elements of every level against its threshold degree."""
    _check_plotting_availability()
    thresholds = [degree for degree, _ in level_set]
    sizes = [len(elements) for _, elements in level_set]

    fig, ax = plt.subplots(figsize=figsize)
    ax.step(thresholds, sizes, where='post', marker='o')
    ax.set_xlabel('Alpha level')
    ax.set_ylabel('Elements in the alpha-cut')
    ax.set_title(f"Level set of '{level_set.fuzzy_set.label}'")
    ax.grid(True, alpha=0.5)
    return fig

def plot_cardinal_distribution(cardinal: 'EDCardinal', figsize=(10, 6)) -> 'plt.Figure':
    """Bar chart of the ED cardinality distribution."""
    _check_plotting_availability()
    items = cardinal.items()
    numbers = [str(n) for n, _ in items]
    masses = [p for _, p in items]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.bar(numbers, masses, color=plt.cm.viridis(np.linspace(0, 1, len(numbers))))
    ax.set_xlabel('Cardinality')
    ax.set_ylabel('Probability')
    ax.set_title('ED cardinality distribution')

    for bar in bars:
        yval = bar.get_height()
        ax.text(bar.get_x() + bar.get_width()/2.0, yval, f'{yval:.3f}', va='bottom', ha='center')

    fig.tight_layout()
    return fig

# ==============================================================================
# 4. COLLECTIONS
# ==============================================================================

def plot_possibility_heatmap(
    collection: 'FuzzySetCollection',
    samples: Dict[str, Any] | Sequence[Any],
    figsize=(10, 6)
) -> 'plt.Figure':
    """
    Heatmap of the degree of every sample in every set of a collection
    (e.g. how a list of colours is classified by a fuzzy colour space).

    Args:
        collection: The fuzzy sets (rows).
        samples: {name: element} or a sequence of elements (columns).
        figsize: The size of the figure.
    """
    _check_plotting_availability()
    if isinstance(samples, dict):
        names, elements = list(samples.keys()), list(samples.values())
    else:
        elements = list(samples)
        names = [str(e) for e in elements]
    if not elements or len(collection) == 0:
        raise ValueError("A possibility heatmap needs at least one sample and one fuzzy set.")

    data = np.column_stack([collection.membership_degrees(e) for e in elements])

    sns.set_theme(style="white")
    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(data, annot=True, fmt='.2f', vmin=0.0, vmax=1.0, cmap='viridis',
                xticklabels=names, yticklabels=collection.labels, ax=ax)
    ax.set_xlabel('Sample')
    ax.set_ylabel('Fuzzy set')
    ax.set_title('Possibility distribution')
    fig.tight_layout()
    return fig
