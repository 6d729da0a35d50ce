import logging
from pathlib import Path
import pytest

@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]

@pytest.fixture(scope="session")
def cfg_path(project_root: Path) -> Path:
    # default location we agreed on
    return project_root / "config" / "simplifier.toml"

@pytest.fixture(scope="session")
def cfg(cfg_path: Path):
    from simplifier.config_model.model import load_config
    return load_config(str(cfg_path))

@pytest.fixture
def rules_dir(tmp_path: Path) -> Path:
    d = tmp_path / "rules"
    d.mkdir(parents=True, exist_ok=True)
    return d

@pytest.fixture
def fresh_logger():
    # get_logger() is idempotent per name; tests that care about handlers start clean
    lg = logging.getLogger("simplifier")
    saved, level = list(lg.handlers), lg.level
    lg.handlers.clear()
    yield lg
    lg.handlers[:] = saved
    lg.setLevel(level)
