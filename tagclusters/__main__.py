"""
Cluster talks by their tags, before and after PCA.

Usage:
    python -m tagclusters data/ted_main.csv [--height 0.4] [--components 16] [--plots]
"""

import argparse
import logging

from . import config
from .clustering import LINKAGE_METHODS, build_merge_tree
from .pipeline import print_cluster_report, run_analysis
from .preprocessing import load_talks, tag_counts, tags_per_talk_summary
from .visualisation import (format_percent, plot_component_contributions,
                            plot_component_correlation, plot_component_scatter,
                            plot_cumulative_variance, plot_dendrogram, plot_loadings_grid,
                            plot_top_tags, plot_variable_map)


def build_parser():
    parser = argparse.ArgumentParser(prog="tagclusters", description=__doc__.strip().splitlines()[0])
    parser.add_argument("csv", nargs="?", default=str(config.DEFAULT_TALKS_CSV),
                        help="Talk table with an id column and a serialized tag list column")
    parser.add_argument("--id-col", default=config.ID_COLUMN)
    parser.add_argument("--tags-col", default=config.TAGS_COLUMN)
    parser.add_argument("--height", type=float, default=config.CUT_HEIGHT,
                        help="Dissimilarity at which the merge tree is cut")
    parser.add_argument("--components", type=int, default=config.N_COMPONENTS,
                        help="Number of principal components to keep")
    parser.add_argument("--method", default=config.LINKAGE_METHOD, choices=LINKAGE_METHODS,
                        help="Linkage criterion")
    parser.add_argument("--top", type=int, default=2,
                        help="How many of the largest clusters to list")
    parser.add_argument("--plots", action="store_true", help="Show the figures")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def show_plots(result, height, method, top_tags):
    plot_top_tags(tag_counts(result.tag_table), n=top_tags)
    plot_dendrogram(build_merge_tree(result.scaled, method=method), height=height)
    plot_cumulative_variance(result.pca)
    if result.pca.n_components >= 2:
        plot_variable_map(result.pca)
    plot_loadings_grid(result.pca)
    for pc in result.pca.loadings.columns[:4]:
        plot_component_contributions(result.pca, pc)
    if result.pca.n_components >= 3:
        plot_component_scatter(result.pca, "PC2", "PC3")
    plot_component_correlation(result.pca)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    talks = load_talks(args.csv, id_col=args.id_col)
    result = run_analysis(talks, height=args.height, n_components=args.components,
                          method=args.method, id_col=args.id_col, tags_col=args.tags_col)

    print("Most frequent tags:")
    print(tag_counts(result.tag_table).head(config.TOP_TAGS).to_string())
    print("\nTags per talk:")
    print(tags_per_talk_summary(result.tag_table, id_col=args.id_col).to_string())
    if result.dropped_tags:
        print(f"\nDropped constant tags: {', '.join(result.dropped_tags)}")

    labelled = result.labelled_talks()
    columns = [c for c in (args.id_col, "title", args.tags_col) if c in labelled.columns]
    print()
    print_cluster_report(labelled, result.tag_clusters, top=args.top, columns=columns,
                         id_col=args.id_col)

    print("\nCumulative variance explained:")
    cumulative = result.pca.cumulative_variance()
    print(", ".join(f"{pc}: {p}" for pc, p in zip(cumulative.index, format_percent(cumulative))))

    print()
    print_cluster_report(labelled, result.pca_clusters, top=args.top + 1, columns=columns,
                         id_col=args.id_col)
    print(f"\nAdjusted Rand index between the two clusterings: {result.agreement:.3f}")

    if args.plots:
        show_plots(result, args.height, args.method, config.TOP_TAGS)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
