"""End-to-end tests for the two clustering passes and the command line."""

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from tagclusters.__main__ import main
from tagclusters.pipeline import print_cluster_report, run_analysis


def test_run_analysis_both_passes(talks):
    result = run_analysis(talks, height=0.4, n_components=16)

    assert result.indicator.shape == (5, 6)
    assert list(result.scaled.columns) == list(result.vocabulary)
    assert result.dropped_tags == []
    assert result.pca.n_components == 3
    assert list(result.pca.loadings.index) == list(result.vocabulary)
    assert list(result.tag_clusters.index) == list(result.pca_clusters.index)
    assert result.tag_clusters.name == "cluster"
    assert result.pca_clusters.name == "cluster_pca"
    assert -1.0 <= result.agreement <= 1.0

    first, second = result.scaled.index[:2]
    assert result.tag_clusters[first] == result.tag_clusters[second]
    assert result.pca_clusters[first] == result.pca_clusters[second]


def test_labelled_talks_keeps_untagged_talks(talks):
    result = run_analysis(talks)

    labelled = result.labelled_talks()

    assert len(labelled) == len(talks)
    assert {"cluster", "cluster_pca"} <= set(labelled.columns)
    assert pd.isna(labelled["cluster"].iloc[5])
    assert labelled["cluster"].iloc[:5].notna().all()


def test_run_analysis_drops_tag_on_every_talk():
    talks = pd.DataFrame({
        "url": ["x", "y", "z"],
        "tags": ["['ted', 'a', 'b']", "['ted', 'a', 'b']", "['ted', 'c']"],
    })

    result = run_analysis(talks, height=0.1)

    assert result.dropped_tags == ["ted"]
    assert "ted" not in result.scaled.columns
    assert result.tag_clusters["x"] == result.tag_clusters["y"]
    assert result.tag_clusters["z"] != result.tag_clusters["x"]


def test_run_analysis_without_tags():
    talks = pd.DataFrame({"url": ["x", "y"], "tags": ["[]", ""]})

    with pytest.raises(ValueError):
        run_analysis(talks)


def test_print_cluster_report(talks, capsys):
    labels = pd.Series([1, 1, 2], index=talks["url"][:3], name="cluster")

    print_cluster_report(talks, labels, top=2, columns=["title"])

    out = capsys.readouterr().out
    assert "cluster: 2 clusters over 3 talks" in out
    assert "Cluster #1 by size" in out
    assert "Cluster #2 by size" in out


def test_cli_prints_both_clusterings(talks_csv, capsys):
    assert main([str(talks_csv), "--components", "4", "--height", "0.4"]) == 0

    out = capsys.readouterr().out
    assert "Most frequent tags:" in out
    assert "cluster: " in out
    assert "cluster_pca: " in out
    assert "Cumulative variance explained:" in out
    assert "Adjusted Rand index" in out


def test_cli_plots_with_single_component(tmp_path, monkeypatch, capsys):
    path = tmp_path / "two_talks.csv"
    pd.DataFrame({"url": ["x", "y"], "tags": ["['a']", "['b']"]}).to_csv(path, index=False)
    monkeypatch.setattr(plt, "show", lambda: None)

    try:
        assert main([str(path), "--plots"]) == 0
    finally:
        plt.close("all")

    assert "cluster_pca: " in capsys.readouterr().out


def test_cli_rejects_non_monotone_linkage(talks_csv):
    with pytest.raises(SystemExit):
        main([str(talks_csv), "--method", "centroid"])
