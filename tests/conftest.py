import logging
import time
from pathlib import Path

import pytest

from core.config import Config
from core.wearable_sets.catalog import build_catalog


@pytest.fixture
def temp_config(tmp_path):
    """
    Provide a fresh Config with validation.

    This fixture GUARANTEES a clean config or fails loudly.
    """
    config_path = tmp_path / f"config_{id(tmp_path)}_{time.time_ns()}.json"

    config = Config(config_file=config_path)

    # VALIDATE it starts clean (will fail test if not)
    assert config.best_sets_limit == 10, \
        f"FIXTURE CONTAMINATED! limit={config.best_sets_limit}, file={config.config_file}"
    assert config.catalog_path is None, \
        f"FIXTURE CONTAMINATED! catalog={config.catalog_path}, file={config.config_file}"
    assert config.age_brs_enabled is False, \
        f"FIXTURE CONTAMINATED! age={config.age_brs_enabled}, file={config.config_file}"

    return config


@pytest.fixture
def sample_raw_sets():
    """Raw catalog records in file order."""
    return [
        {"id": "0", "name": "Infantry", "wearableIds": [1, 2, 3],
         "traitBonuses": [0, 1, 0, 0, 0, 0], "setBonusBRS": 1},
        {"id": "1", "name": "Sergeant", "wearableIds": [7, 8, 9],
         "traitBonuses": [0, 0, 0, 1, 0, 0], "setBonusBRS": 2},
        {"id": "2", "name": "Apy Beach", "wearableIds": [18, 19, 20],
         "traitBonuses": [2, -1, 0, 0, 0, 0], "setBonusBRS": 2},
        {"id": "3", "name": "Mudgen", "wearableIds": [45, 46, 47],
         "traitBonuses": [0, 0, 2, 2, 0, 0], "setBonusBRS": 5},
    ]


@pytest.fixture
def sample_catalog(sample_raw_sets):
    return build_catalog(sample_raw_sets)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch, restore_root_logger):
    """Point Path.home() at tmp_path so logs and config stay out of ~."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    return home


def pytest_collection_modifyitems(config, items):
    """Assign tier markers based on test location."""
    for item in items:
        path = Path(str(item.fspath)).as_posix()

        if "/tests/integration/" in path:
            item.add_marker(pytest.mark.integration)
            continue

        if "/tests/unit/" in path:
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
