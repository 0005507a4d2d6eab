# visualisation.py
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from scipy.cluster.hierarchy import dendrogram


def format_percent(values, decimals=1):
    return [f"{100 * v:.{decimals}f}%" for v in values]


def _finish(fig, show):
    fig.tight_layout()
    if show:
        plt.show()
    return fig


################################
# Tags
################################

def plot_top_tags(counts, n=15, show=True):
    top = counts.sort_values(ascending=False).head(n).iloc[::-1]

    fig, ax = plt.subplots(figsize=(8, 6))
    colors = sns.color_palette("husl", len(top))
    ax.barh(range(len(top)), top.values, color=colors, alpha=0.9)
    for i, tag in enumerate(top.index):
        ax.text(top.values.max() * 0.01, i, tag, va="center", color="white",
                fontsize=9, fontweight="bold")
    ax.set_yticks([])
    ax.set_xlabel("occurrences")
    ax.set_title(f"Top {len(top)} tags")
    return _finish(fig, show)


################################
# Merge Tree
################################

def plot_dendrogram(tree, labels=None, height=None, show=True):
    fig, ax = plt.subplots(figsize=(14, 6))
    dendrogram(tree, ax=ax,
               labels=None if labels is None else list(labels),
               no_labels=labels is None,
               color_threshold=height)
    if height is not None:
        ax.axhline(height, color="red", linestyle="--", linewidth=1)
    ax.set_ylabel("1 - correlation")
    ax.set_title("Hierarchical clustering of talks")
    return _finish(fig, show)


################################
# Principal Components
################################

def plot_cumulative_variance(pca, show=True):
    fig, ax = plt.subplots(figsize=(10, 5))
    x = np.arange(1, pca.n_components + 1)
    ax.bar(x, pca.variance_ratio.values, color="steelblue", label="component")
    ax.plot(x, pca.cumulative_variance().values, marker="o", color="black", label="cumulative")
    ax.set_xticks(x)
    ax.set_xticklabels(pca.variance_ratio.index, rotation=45, fontsize=7)
    ax.set_ylabel("Share of variance")
    ax.set_ylim(0, 1)
    ax.legend()
    return _finish(fig, show)


def plot_loadings_grid(pca, n_pcs=6, ncols=2, show=True):
    pcs = list(pca.loadings.columns[:n_pcs])
    nrows = int(np.ceil(len(pcs) / ncols))
    fig, axs = plt.subplots(nrows, ncols, figsize=(12, 2.5 * nrows), sharey=True, squeeze=False)

    x = np.arange(len(pca.loadings.index))
    for ax, pc in zip(axs.flat, pcs):
        ax.bar(x, pca.loadings[pc].values, color=sns.color_palette("husl", len(x)), alpha=0.8)
        ax.set_title(pc, fontsize=8)
        ax.set_xticks([])
    for ax in list(axs.flat)[len(pcs):]:
        ax.set_visible(False)
    fig.supxlabel("Tags")
    fig.supylabel("Relative weight of the tag in each component")
    return _finish(fig, show)


def plot_component_contributions(pca, pc, n=40, min_abs=0.0, show=True):
    top = pca.top_contributions(pc, n=n, min_abs=min_abs)

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.bar(range(len(top)), top.values, color=sns.color_palette("husl", len(top)), alpha=0.8)
    ax.set_xticks(range(len(top)))
    ax.set_xticklabels(top.index, rotation=90, fontsize=7)
    ax.set_xlabel("Tags")
    ax.set_ylabel(f"Relative weight of the tag in {pc}")
    return _finish(fig, show)


def plot_component_scatter(pca, x="PC2", y="PC3", show=True):
    share = dict(zip(pca.variance_ratio.index, format_percent(pca.variance_ratio.values)))

    fig, ax = plt.subplots(figsize=(8, 6))
    sns.scatterplot(x=pca.scores[x], y=pca.scores[y], ax=ax,
                    s=15, color="midnightblue", alpha=0.1, edgecolor=None)
    ax.set_xlabel(f"Principal component {x[2:]} ({share[x]})")
    ax.set_ylabel(f"Principal component {y[2:]} ({share[y]})")
    ax.set_title("Talks projected on two principal components")
    return _finish(fig, show)


def plot_variable_map(pca, x="PC1", y="PC2", show=True):
    contrib = pca.variable_contributions((x, y))
    share = dict(zip(pca.variance_ratio.index, format_percent(pca.variance_ratio.values)))

    fig, ax = plt.subplots(figsize=(7, 7))
    cmap = sns.blend_palette(["#00AFBB", "#E7B800", "#FC4E07"], as_cmap=True)
    norm = plt.Normalize(contrib.min(), contrib.max())
    for tag, (lx, ly) in pca.variable_coordinates((x, y)).iterrows():
        ax.arrow(0, 0, lx, ly, color=cmap(norm(contrib[tag])), alpha=0.7,
                 head_width=0.01, length_includes_head=True)
    ax.add_patch(plt.Circle((0, 0), 1, fill=False, color="grey", linestyle="--"))
    ax.axhline(0, color="grey", linewidth=0.5)
    ax.axvline(0, color="grey", linewidth=0.5)
    ax.set_xlim(-1.05, 1.05)
    ax.set_ylim(-1.05, 1.05)
    ax.set_aspect("equal")
    ax.set_xlabel(f"{x} ({share[x]})")
    ax.set_ylabel(f"{y} ({share[y]})")
    fig.colorbar(plt.cm.ScalarMappable(norm=norm, cmap=cmap), ax=ax, label="contrib")
    ax.set_title("Variables - PCA")
    return _finish(fig, show)


#######################################################
# Component Correlation Matrix Plot
#######################################################

def plot_component_correlation(pca, show=True):
    fig = plt.figure(figsize=(10, 8))
    ax = sns.heatmap(pca.scores.corr(), annot=pca.n_components <= 16, cmap="Blues",
                     fmt=".2f", center=0, annot_kws={"fontsize": 7})
    ax.set_title('Correlation Matrix of Principal Components')
    plt.xticks(rotation=45, ha='right', fontsize=7)
    plt.yticks(fontsize=7)
    return _finish(fig, show)
