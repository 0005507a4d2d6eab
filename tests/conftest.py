import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


@pytest.fixture
def talks():
    return pd.DataFrame(
        {
            "url": [
                "https://www.ted.com/talks/a\n",
                "https://www.ted.com/talks/b\n",
                "https://www.ted.com/talks/c\n",
                "https://www.ted.com/talks/d\n",
                "https://www.ted.com/talks/e\n",
                "https://www.ted.com/talks/f\n",
            ],
            "title": ["A", "B", "C", "D", "E", "F"],
            "tags": [
                "['art', 'design']",
                "['art', 'design']",
                "['biology', 'science']",
                "['biology', 'science', 'health']",
                "['music']",
                "[]",
            ],
        }
    )


@pytest.fixture
def talks_csv(tmp_path, talks):
    path = tmp_path / "talks.csv"
    talks.to_csv(path, index=False)
    return path
