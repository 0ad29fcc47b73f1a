from __future__ import annotations

import pytest

from clipscribe.config import Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
        redis_url="",
        upload_max_bytes=4096,
    )
