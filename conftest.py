import pytest


def pytest_addoption(parser):
    """Adds the --plots command line flag."""
    parser.addoption(
        "--plots",
        action="store_true",
        default=False,
        help="Display mode shape plots during test execution (needs matplotlib).",
    )


@pytest.fixture
def plots_enabled(request):
    """Fixture that returns True if --plots is passed."""
    return request.config.getoption("--plots")


@pytest.fixture
def gm_profile():
    """Garrett-Munk exponential stratification, N0 = 5.2e-3 s^-1, b = 1300 m."""
    from igwmodes.stratification import exponential_stratification

    N0, b = 5.2e-3, 1300.0
    return exponential_stratification(N0, b), N0, b
