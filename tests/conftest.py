import pytest

from bktreex import config as bx_config

_ENV_KEYS = (
    "BKTREEX_LOG_LEVEL",
    "BKTREEX_ENABLE_DIAGNOSTICS",
    "BKTREEX_SEARCH_WORKERS",
)


@pytest.fixture(autouse=True)
def clean_runtime_config(monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    bx_config.reset_runtime_config_cache()
    yield
    bx_config.reset_runtime_config_cache()
