"""Smoke tests for the figures."""

import matplotlib.pyplot as plt
import pytest

from tagclusters.clustering import build_merge_tree, principal_components
from tagclusters.preprocessing import (build_indicator_matrix, extract_tags,
                                       scale_indicator_matrix, tag_counts)
from tagclusters.visualisation import (format_percent, plot_component_contributions,
                                       plot_component_correlation, plot_component_scatter,
                                       plot_cumulative_variance, plot_dendrogram,
                                       plot_loadings_grid, plot_top_tags, plot_variable_map)


@pytest.fixture
def tag_table(talks):
    return extract_tags(talks)


@pytest.fixture
def scaled(tag_table):
    scaled, _ = scale_indicator_matrix(build_indicator_matrix(tag_table))
    return scaled


@pytest.fixture
def pca(scaled):
    return principal_components(scaled, n_components=3)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_format_percent():
    assert format_percent([0.1234, 1.0]) == ["12.3%", "100.0%"]


def test_plot_top_tags(tag_table):
    fig = plot_top_tags(tag_counts(tag_table), n=3, show=False)

    ax = fig.axes[0]
    assert len(ax.patches) == 3
    assert len(ax.texts) == 3
    assert {t.get_text() for t in ax.texts} <= set(tag_table["tag"])


def test_plot_dendrogram(scaled):
    fig = plot_dendrogram(build_merge_tree(scaled), labels=scaled.index, height=0.4, show=False)

    assert fig.axes[0].get_ylabel() == "1 - correlation"


def test_plot_cumulative_variance(pca):
    fig = plot_cumulative_variance(pca, show=False)

    assert len(fig.axes[0].patches) == pca.n_components


def test_plot_loadings_grid_hides_unused_axes(pca):
    fig = plot_loadings_grid(pca, n_pcs=6, ncols=2, show=False)

    visible = [ax for ax in fig.axes if ax.get_visible()]
    assert len(visible) == pca.n_components


def test_plot_component_contributions(pca):
    fig = plot_component_contributions(pca, "PC1", n=4, show=False)

    assert len(fig.axes[0].patches) == 4


def test_plot_component_scatter(pca):
    fig = plot_component_scatter(pca, "PC2", "PC3", show=False)

    assert fig.axes[0].get_xlabel().startswith("Principal component 2 (")


def test_plot_variable_map(pca):
    fig = plot_variable_map(pca, show=False)

    assert fig.axes[0].get_title() == "Variables - PCA"


def test_plot_component_correlation(pca):
    fig = plot_component_correlation(pca, show=False)

    assert fig.axes[0].get_title() == "Correlation Matrix of Principal Components"
