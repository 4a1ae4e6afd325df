import pandas as pd
import pytest

from app.sample_data import load_sample_dataframe
from placement_analytics.config import DashboardSettings
from placement_analytics.coordinator import DashboardCoordinator
from placement_analytics.io import build_store
from placement_analytics.scheduler import ManualClock, Scheduler

SEED = 7


@pytest.fixture()
def sample_df():
    return load_sample_dataframe()


@pytest.fixture()
def sample_csv_path(tmp_path):
    df = load_sample_dataframe()
    file_path = tmp_path / "CollegePlacement.csv"
    df.to_csv(file_path, index=False)
    return file_path


@pytest.fixture()
def store(sample_df):
    return build_store(sample_df, seed=SEED, source="sample")


@pytest.fixture()
def frame(store):
    return store.to_frame()


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture()
def coordinator(store, scheduler):
    return DashboardCoordinator(store, settings=DashboardSettings(seed=SEED), scheduler=scheduler)


def _make_frame(cgpa, placement, college_id=None, internship=None, **extra) -> pd.DataFrame:
    """Minimal store-shaped frame for hand-built scenarios."""
    n = len(cgpa)
    data = {
        "record_id": list(range(n)),
        "sample_key": [0.0] * n,
        "college_id": college_id or ["C1"] * n,
        "iq": [100.0] * n,
        "prev_sem": [7.0] * n,
        "cgpa": cgpa,
        "academic_perf": [5.0] * n,
        "internship": internship or ["No"] * n,
        "extra_curricular": [5.0] * n,
        "communication": [5.0] * n,
        "projects": [2.0] * n,
        "placement": placement,
    }
    data.update(extra)
    return pd.DataFrame(data)


@pytest.fixture()
def make_frame():
    return _make_frame
