"""
Module: clustering.py
Description: Contains functions to compute correlation dissimilarities,
             hierarchical clustering cut at a fixed height, PCA of the
             scaled tag matrix, and comparison of clusterings.
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import fcluster, linkage
from scipy.spatial.distance import squareform
from sklearn.decomposition import PCA
from sklearn.metrics import adjusted_rand_score

from .config import CUT_HEIGHT, ID_COLUMN, LINKAGE_METHOD, N_COMPONENTS

LOGGER = logging.getLogger(__name__)

# Methods that stay monotone on a non-Euclidean distance such as 1 - r.
LINKAGE_METHODS = ("single", "complete", "average", "weighted")

# Distance given to pairs whose correlation is undefined (constant rows).
MAX_DISSIMILARITY = 2.0

# Components explaining less than this share of the first one are rank noise.
_RANK_TOLERANCE = 1e-10


def _row_index(matrix):
    if isinstance(matrix, pd.DataFrame):
        return matrix.index
    return pd.RangeIndex(np.asarray(matrix).shape[0])


#######################################################
# Dissimilarity
#######################################################

def correlation_dissimilarity(matrix):
    """
    Pairwise 1 - Pearson correlation between the rows of `matrix`.

    Rows are the units being compared (talks, or talks in component
    space). A row with no variance has no defined correlation with
    anything; its distance to every other row is set to 2, the largest
    value 1 - r can take.
    """
    values = np.asarray(matrix, dtype=float)
    if values.ndim != 2 or values.shape[0] == 0:
        raise ValueError("Expected a non-empty 2-D matrix with rows as units.")
    index = _row_index(matrix)

    constant = np.ptp(values, axis=1) == 0
    if constant.any():
        LOGGER.warning("%d row(s) have zero variance; their correlations are undefined "
                       "and treated as maximal distance.", int(constant.sum()))

    if values.shape[1] < 2:
        corr = np.full((len(values), len(values)), np.nan)
    else:
        with np.errstate(invalid="ignore", divide="ignore"):
            corr = np.atleast_2d(np.corrcoef(values))

    dissimilarity = 1.0 - corr
    dissimilarity[~np.isfinite(dissimilarity)] = MAX_DISSIMILARITY
    dissimilarity = (dissimilarity + dissimilarity.T) / 2.0
    np.fill_diagonal(dissimilarity, 0.0)
    return pd.DataFrame(np.clip(dissimilarity, 0.0, MAX_DISSIMILARITY),
                        index=index, columns=index)


def condensed_distance(dissimilarity):
    square = np.asarray(dissimilarity, dtype=float)
    return squareform(square, checks=False)


#######################################################
# Hierarchical Clustering
#######################################################

def build_merge_tree(matrix, method=LINKAGE_METHOD):
    if method not in LINKAGE_METHODS:
        raise ValueError(f"Unknown linkage method '{method}'. Choose from {LINKAGE_METHODS}.")
    if len(_row_index(matrix)) < 2:
        raise ValueError("At least two rows are needed to build a merge tree.")
    distance = condensed_distance(correlation_dissimilarity(matrix))
    return linkage(distance, method=method)


def cut_tree(tree, height, index, name="cluster"):
    """Flat clusters whose members all merged at or below `height`."""
    labels = fcluster(tree, t=height, criterion="distance")
    return pd.Series(labels, index=index, name=name)


def hierarchical_clusters(matrix, height=CUT_HEIGHT, method=LINKAGE_METHOD, name="cluster"):
    """
    Cluster the rows of `matrix` by correlation distance and cut the merge
    tree at `height`. Cluster ids are positive integers with no meaning
    beyond grouping; compare clusterings by membership, not by id.
    """
    index = _row_index(matrix)
    if len(index) == 1:
        return pd.Series([1], index=index, name=name)

    tree = build_merge_tree(matrix, method=method)
    labels = cut_tree(tree, height, index, name=name)
    LOGGER.info("Cut %d rows at height %.2f (%s linkage) into %d clusters",
                len(labels), height, method, labels.nunique())
    return labels


def cluster_sizes(labels):
    return labels.value_counts().sort_values(ascending=False, kind="stable")


def cluster_members(talks, labels, rank=1, id_col=ID_COLUMN):
    """Talks in the `rank`-th largest cluster (1 = largest)."""
    sizes = cluster_sizes(labels)
    if not 1 <= rank <= len(sizes):
        raise ValueError(f"rank must be between 1 and {len(sizes)}, got {rank}")
    cluster_id = sizes.index[rank - 1]
    members = labels.index[labels == cluster_id]
    return talks[talks[id_col].isin(members)]


def attach_clusters(talks, id_col=ID_COLUMN, **labelings):
    """
    Copy of `talks` with one column per labeling, looked up by talk id.
    Talks missing from a labeling (no tags) get <NA>.
    """
    augmented = talks.copy()
    for column, labels in labelings.items():
        augmented[column] = augmented[id_col].map(labels).astype("Int64")
    return augmented


def compare_partitions(labels_a, labels_b):
    """Adjusted Rand index over the talks both labelings cover."""
    shared = labels_a.index.intersection(labels_b.index)
    if len(shared) == 0:
        raise ValueError("The two labelings share no records.")
    return adjusted_rand_score(labels_a.loc[shared], labels_b.loc[shared])


#######################################################
# PCA
#######################################################

@dataclass
class PrincipalComponents:
    eigenvalues: pd.Series
    variance_ratio: pd.Series
    loadings: pd.DataFrame
    scores: pd.DataFrame

    @property
    def n_components(self):
        return len(self.variance_ratio)

    def cumulative_variance(self):
        return self.variance_ratio.cumsum()

    def retained_variance_ratio(self):
        """Share of each component within the retained components only."""
        return self.eigenvalues / self.eigenvalues.sum()

    def tidy_loadings(self):
        return (self.loadings
                .rename_axis("tag")
                .reset_index()
                .melt(id_vars="tag", var_name="PC", value_name="Contribution"))

    def top_contributions(self, pc, n=40, min_abs=0.0):
        if pc not in self.loadings.columns:
            raise ValueError(f"Unknown component '{pc}'. Available: {list(self.loadings.columns)}")
        column = self.loadings[pc]
        top = column.loc[column.abs().sort_values(ascending=False, kind="stable").index[:n]]
        top = top[top.abs() >= min_abs]
        return top.sort_values()

    def _check_components(self, pcs):
        pcs = list(pcs)
        missing = [pc for pc in pcs if pc not in self.loadings.columns]
        if missing:
            raise ValueError(f"Unknown component(s) {missing}. Available: {list(self.loadings.columns)}")
        return pcs

    def variable_coordinates(self, pcs=("PC1", "PC2")):
        """
        Correlation of each tag with the components in `pcs`.

        Loadings are scaled by the population standard deviation of the
        scores; the input columns have unit variance, so the result lies
        within the unit circle.
        """
        pcs = self._check_components(pcs)
        n = len(self.scores)
        sdev = np.sqrt(self.eigenvalues[pcs] * (n - 1) / n)
        return self.loadings[pcs].mul(sdev, axis=1)

    def variable_contributions(self, pcs=("PC1", "PC2")):
        """Percent contribution of each tag to the plane spanned by `pcs`."""
        pcs = self._check_components(pcs)
        weights = self.eigenvalues[pcs]
        contrib = (self.loadings[pcs] ** 2 * 100).mul(weights, axis=1).sum(axis=1)
        return contrib / weights.sum()


def principal_components(scaled, n_components=N_COMPONENTS, random_state=42):
    """
    PCA of the scaled talk-by-tag matrix.

    More components than the matrix can hold are truncated to its rank,
    with a warning, rather than returned as zero-variance noise.
    """
    if n_components < 1:
        raise ValueError(f"n_components must be positive, got {n_components}")
    n_rows, n_cols = scaled.shape
    if min(n_rows, n_cols) == 0:
        raise ValueError("Cannot compute principal components of an empty matrix.")

    limit = min(n_rows, n_cols)
    if n_components > limit:
        LOGGER.warning("Requested %d components but the matrix is %d x %d; using %d.",
                       n_components, n_rows, n_cols, limit)
        n_components = limit

    pca = PCA(n_components=n_components, random_state=random_state)
    scores = pca.fit_transform(np.asarray(scaled, dtype=float))

    variance = pca.explained_variance_
    keep = variance > variance[0] * _RANK_TOLERANCE if variance[0] > 0 else np.zeros_like(variance, dtype=bool)
    if not keep.any():
        raise ValueError("Matrix has no variance to decompose.")
    if not keep.all():
        LOGGER.warning("Matrix has rank %d; dropping %d zero-variance component(s).",
                       int(keep.sum()), int((~keep).sum()))

    names = [f"PC{i + 1}" for i in range(int(keep.sum()))]
    tags = scaled.columns if isinstance(scaled, pd.DataFrame) else pd.RangeIndex(n_cols)
    result = PrincipalComponents(
        eigenvalues=pd.Series(variance[keep], index=names),
        variance_ratio=pd.Series(pca.explained_variance_ratio_[keep], index=names),
        loadings=pd.DataFrame(pca.components_[keep].T, index=tags, columns=names),
        scores=pd.DataFrame(scores[:, keep], index=_row_index(scaled), columns=names),
    )
    LOGGER.info("Kept %d components explaining %.1f%% of the variance",
                result.n_components, 100 * result.variance_ratio.sum())
    return result
