"""
Module: config.py
Description: Default parameters of the analysis. Every value can be
             overridden through the environment or a .env file at the
             project root.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

_project_root = Path(__file__).parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=_env_path)


################################
# Paths
################################

PROJECT_ROOT = _project_root
DATA_DIR = Path(os.getenv("TAGCLUSTERS_DATA_DIR", PROJECT_ROOT / "data"))
DEFAULT_TALKS_CSV = DATA_DIR / "ted_main.csv"


################################
# Columns of the talk table
################################

ID_COLUMN = os.getenv("TAGCLUSTERS_ID_COLUMN", "url")
TAGS_COLUMN = os.getenv("TAGCLUSTERS_TAGS_COLUMN", "tags")


################################
# Clustering and PCA
################################

# Talks whose tags correlate at 0.6 or more end up together.
CUT_HEIGHT = float(os.getenv("TAGCLUSTERS_CUT_HEIGHT", "0.40"))
LINKAGE_METHOD = os.getenv("TAGCLUSTERS_LINKAGE_METHOD", "complete")
N_COMPONENTS = int(os.getenv("TAGCLUSTERS_N_COMPONENTS", "16"))
TOP_TAGS = int(os.getenv("TAGCLUSTERS_TOP_TAGS", "15"))
