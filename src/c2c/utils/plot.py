# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np

from ..utils.validation import check_series

try:
    import matplotlib.pyplot as plt
    from matplotlib.lines import Line2D
except ModuleNotFoundError as e:
    from ..utils import DependencyMissing

    matplotlib_missing = DependencyMissing(e, package="matplotlib")
    plt = matplotlib_missing
    Line2D = matplotlib_missing

__all__ = ["plot_changes"]


def plot_changes(
    dates,
    values,
    changes,
    *,
    ax=None,
    alpha=0.5,
    linewidth=1.0,
    color="gray",
    change_color="tab:blue",
    disturbance_color="tab:red",
    show_legend=True,
):
    """Plot a time series and the line through its changes

    Parameters
    ----------
    dates : array-like of shape (n_timestep, )
        The dates.

    values : array-like of shape (n_timestep, )
        The values.

    changes : list of Change
        The changes of the time series, e.g., as returned by
        :meth:`c2c.solver.C2cSolver.solve`.

    ax : Axes, optional
        The matplotlib Axes-object

    alpha : float, optional
        The opacity of the time series.

    linewidth : float, optional
        The width of the lines.

    color : str, optional
        The color of the time series.

    change_color : str, optional
        The color of the line through the changes.

    disturbance_color : str, optional
        The color of the changes with a negative magnitude.

    show_legend : bool, optional
        Whether the legend is shown.

    Returns
    -------
    ax : Axes
        The axes object that has been plotted.
    """
    if ax is None:
        fig, ax = plt.subplots()

    dates, values = check_series(dates, values)
    ax.plot(dates, values, color=color, alpha=alpha, linewidth=linewidth, zorder=-1)

    if changes:
        change_dates = np.array([change.date for change in changes])
        change_values = np.array([change.value for change in changes])
        disturbance = np.array([change.has_negative_magnitude for change in changes])
        ax.plot(change_dates, change_values, color=change_color, linewidth=linewidth)
        ax.scatter(
            change_dates,
            change_values,
            c=np.where(disturbance, disturbance_color, change_color),
            zorder=1,
        )

    if show_legend:
        legend = ax.legend(
            [
                Line2D([0], [0], color=color, alpha=alpha),
                Line2D([0], [0], color=change_color),
                Line2D([0], [0], color=disturbance_color, marker="o", linestyle=""),
            ],
            ["values", "segments", "disturbance"],
            loc="best",
        )
        legend.set_zorder(100)

    ax.set_xlim([dates[0], dates[-1]])
    return ax
