import pytest

from chartforge.config.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Every test starts from default settings, whatever the shell exports"""
    for name in (
        "LOG_LEVEL",
        "LOG_JSON",
        "DEFAULT_COLOR_SCHEME",
        "DEFAULT_BINS",
        "MAX_CHART_DATA_POINTS",
        "WORDCLOUD_MAX_WORDS",
        "KDE_STEPS",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def sales_rows():
    return [
        {"region": "east", "sales": 10},
        {"region": "west", "sales": 20},
        {"region": "east", "sales": 5},
    ]


@pytest.fixture
def quarterly_rows():
    return [
        {"quarter": "Q1", "product": "alpha", "revenue": 100, "units": 4},
        {"quarter": "Q1", "product": "beta", "revenue": 80, "units": 2},
        {"quarter": "Q2", "product": "alpha", "revenue": 120, "units": 5},
        {"quarter": "Q3", "product": "beta", "revenue": 60, "units": 1},
        {"quarter": "Q3", "product": "gamma", "revenue": 30, "units": 3},
    ]
