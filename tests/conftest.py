import json

import pytest

from affiliate_pipeline.api_fetcher.config import ZanoxConfig


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no network access")


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data if json_data is not None else {})
        self.text = text


@pytest.fixture
def zanox_config():
    return ZanoxConfig(
        connect_id="CONNECT123",
        secret_key="s3cr3t",
        ad_space_id="AS42",
        base_url="https://api.example.com/json/2011-03-01",
        timeout_sec=5,
    )


@pytest.fixture
def fake_response():
    return FakeResponse
