import pytest

from toolbox import deps
from toolbox.config import settings


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", str(tmp_path))
    deps.reset_singletons()
    yield tmp_path
    deps.reset_singletons()
