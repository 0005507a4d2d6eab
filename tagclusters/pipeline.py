"""
Module: pipeline.py
Description: Runs the two clustering passes over the talk table: first on
             the scaled tag matrix, then on its principal components.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from .clustering import (PrincipalComponents, attach_clusters, cluster_members,
                         cluster_sizes, compare_partitions, hierarchical_clusters,
                         principal_components)
from .config import CUT_HEIGHT, ID_COLUMN, LINKAGE_METHOD, N_COMPONENTS, TAGS_COLUMN
from .preprocessing import (build_indicator_matrix, extract_tags, scale_indicator_matrix,
                            tag_vocabulary)

LOGGER = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    talks: pd.DataFrame
    tag_table: pd.DataFrame
    vocabulary: pd.Index
    indicator: pd.DataFrame
    scaled: pd.DataFrame
    dropped_tags: list
    tag_clusters: pd.Series
    pca: PrincipalComponents
    pca_clusters: pd.Series
    agreement: float
    id_col: str = ID_COLUMN

    def labelled_talks(self):
        return attach_clusters(self.talks, id_col=self.id_col,
                               cluster=self.tag_clusters,
                               cluster_pca=self.pca_clusters)


def run_analysis(talks, height=CUT_HEIGHT, n_components=N_COMPONENTS, method=LINKAGE_METHOD,
                 id_col=ID_COLUMN, tags_col=TAGS_COLUMN):
    tag_table = extract_tags(talks, id_col=id_col, tags_col=tags_col)
    if tag_table.empty:
        raise ValueError("No talk carries any tag.")

    vocabulary = tag_vocabulary(tag_table)
    indicator = build_indicator_matrix(tag_table, vocabulary, id_col=id_col)
    scaled, dropped = scale_indicator_matrix(indicator)
    LOGGER.info("Indicator matrix: %d talks x %d tags (%d dropped)",
                indicator.shape[0], scaled.shape[1], len(dropped))

    tag_clusters = hierarchical_clusters(scaled, height=height, method=method, name="cluster")

    pca = principal_components(scaled, n_components=n_components)
    pca_clusters = hierarchical_clusters(pca.scores, height=height, method=method,
                                         name="cluster_pca")

    agreement = compare_partitions(tag_clusters, pca_clusters)
    LOGGER.info("Adjusted Rand index between tag and PCA clusterings: %.3f", agreement)

    return AnalysisResult(talks=talks, tag_table=tag_table, vocabulary=vocabulary,
                          indicator=indicator, scaled=scaled, dropped_tags=dropped,
                          tag_clusters=tag_clusters, pca=pca, pca_clusters=pca_clusters,
                          agreement=agreement, id_col=id_col)


def print_cluster_report(talks, labels, top=2, columns=None, id_col=ID_COLUMN):
    sizes = cluster_sizes(labels)
    print(f"{labels.name}: {len(sizes)} clusters over {len(labels)} talks")
    print(sizes.head(20).to_string())
    for rank in range(1, min(top, len(sizes)) + 1):
        members = cluster_members(talks, labels, rank=rank, id_col=id_col)
        shown = members[columns] if columns else members
        print(f"\nCluster #{rank} by size (id {sizes.index[rank - 1]}, {len(members)} talks):")
        print(shown.to_string(index=False))
