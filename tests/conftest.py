from __future__ import annotations

import pytest

from src.models.config import FundaConfig, PaginationConfig


@pytest.fixture()
def config() -> FundaConfig:
    return FundaConfig(
        endpoint="http://feed.test/feeds/Aanbod.svc",
        api_key="test-key",
        pagination=PaginationConfig(page_size=2),
        timeout=5.0,
    )
