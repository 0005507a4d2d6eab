"""
Module: preprocessing.py
Description: Reads the talk table, explodes the serialized tag lists into a
             long-form (talk, tag) table and builds the standardized
             talk-by-tag indicator matrix used by the clustering steps.
"""

import logging

import pandas as pd
from sklearn.preprocessing import StandardScaler

from .config import ID_COLUMN, TAGS_COLUMN

LOGGER = logging.getLogger(__name__)

# Brackets and both quote characters wrap the serialized list and its items.
_TAG_DECORATION = r"[\[\]'\"]"


def load_talks(csv_path, id_col=ID_COLUMN):
    df = pd.read_csv(csv_path)
    if id_col not in df.columns:
        raise ValueError(f"Column '{id_col}' not found in {csv_path}")
    # The TED export carries a trailing newline on every URL.
    df[id_col] = df[id_col].astype(str).str.replace("\n", "", regex=False).str.strip()
    LOGGER.info("Loaded %d talks from %s", len(df), csv_path)
    return df


#######################################################
# Tag Extraction
#######################################################

def extract_tags(talks, id_col=ID_COLUMN, tags_col=TAGS_COLUMN):
    """
    Explode the serialized tag list of every talk into one row per tag.

    "['culture', 'design']" becomes two rows (talk, 'culture') and
    (talk, 'design'). An empty list gives no rows, so the talk disappears
    from every downstream matrix. Malformed strings are split as they are.
    """
    missing = [col for col in (id_col, tags_col) if col not in talks.columns]
    if missing:
        raise ValueError(f"Missing columns in talk table: {missing}")

    raw = talks[tags_col].fillna("").astype(str)
    tokens = raw.str.replace(_TAG_DECORATION, "", regex=True).str.split(",")

    tag_table = pd.DataFrame({id_col: talks[id_col].values, "tag": tokens.values})
    tag_table = tag_table.explode("tag")
    tag_table["tag"] = tag_table["tag"].astype(str).str.strip()
    tag_table = tag_table[tag_table["tag"] != ""].reset_index(drop=True)

    LOGGER.info("Extracted %d tag assignments over %d talks",
                len(tag_table), tag_table[id_col].nunique())
    return tag_table


def tag_vocabulary(tag_table):
    """Sorted distinct tags; fixes the column order of every matrix built later."""
    return pd.Index(sorted(tag_table["tag"].unique()), name="tag")


def tag_counts(tag_table):
    counts = tag_table["tag"].value_counts()
    counts.index.name = "tag"
    return counts.rename("n")


def tags_per_talk_summary(tag_table, id_col=ID_COLUMN):
    return tag_table.groupby(id_col).size().describe()


#######################################################
# Indicator Matrix
#######################################################

def build_indicator_matrix(tag_table, vocabulary=None, id_col=ID_COLUMN):
    if vocabulary is None:
        vocabulary = tag_vocabulary(tag_table)

    matrix = pd.crosstab(tag_table[id_col], tag_table["tag"]).clip(upper=1)
    # crosstab sorts its axes; restore talk order and the shared tag order.
    matrix = matrix.reindex(index=pd.Index(tag_table[id_col].unique(), name=id_col),
                            columns=vocabulary,
                            fill_value=0)
    return matrix.astype(int)


def drop_constant_columns(matrix):
    spread = matrix.max(axis=0) - matrix.min(axis=0)
    dropped = spread.index[spread == 0].tolist()
    if dropped:
        LOGGER.warning("Dropping %d zero-variance tag column(s): %s",
                       len(dropped), ", ".join(map(str, dropped)))
    return matrix.drop(columns=dropped), dropped


def scale_indicator_matrix(matrix):
    """
    Center every tag column to mean 0 and scale it to unit variance.

    Tags carried by every talk (or by none) have zero variance and cannot
    be standardized; they are dropped first and returned alongside the
    scaled matrix.
    """
    if matrix.empty:
        raise ValueError("Indicator matrix is empty.")

    kept, dropped = drop_constant_columns(matrix)
    if kept.shape[1] == 0:
        raise ValueError("No tag column with non-zero variance remains to scale.")

    scaler = StandardScaler()
    scaled = pd.DataFrame(scaler.fit_transform(kept.astype(float)),
                          index=kept.index, columns=kept.columns)
    return scaled, dropped
