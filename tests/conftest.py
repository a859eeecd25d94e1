import pytest

from greenkart_e2e.config import DEFAULT_BASE_URL


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        '--url',
        action='store',
        default=None,
        help='Target URL for live e2e runs (overrides default)',
    )
    parser.addoption(
        '--run-e2e',
        action='store_true',
        default=False,
        help='Run tests that drive a real browser against the target site',
    )


def pytest_collection_modifyitems(config: pytest.Config, items) -> None:
    if config.getoption('--run-e2e'):
        return
    skip_e2e = pytest.mark.skip(reason='needs --run-e2e')
    for item in items:
        if item.get_closest_marker('e2e') is not None:
            item.add_marker(skip_e2e)


@pytest.fixture
def test_url(request: pytest.FixtureRequest) -> str:
    # Priority: CLI --url > GreenKart home page
    return request.config.getoption('--url') or DEFAULT_BASE_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ('GREENKART_BASE_URL', 'GREENKART_HEADLESS', 'GREENKART_VIDEO', 'DOCKER_ENV', 'GREENKART_TIMESTAMP'):
        monkeypatch.delenv(name, raising=False)
