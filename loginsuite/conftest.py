"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers project-wide markers, gates browser scenarios behind --run-e2e and
keeps each test's call report available to fixtures for failure diagnostics.

================================================================================
"""

import pytest

from loginsuite.common import UISettings


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: Browser scenarios against a live login page"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests that need no browser"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag tests by directory and skip browser scenarios unless enabled.

    Browser scenarios run with --run-e2e or ui.e2e_enabled: true.
    """
    run_e2e = config.getoption("--run-e2e") or UISettings.from_config().e2e_enabled
    skip_e2e = pytest.mark.skip(reason="browser scenarios need --run-e2e")

    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)

        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report as item.rep_<phase> for fixture teardown."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    settings = UISettings.from_config(base_url=config.getoption("--ui-base-url"))
    return [
        "",
        "=" * 60,
        "Login Page E2E Suite",
        f"Target: {settings.base_url}",
        "=" * 60,
        "",
    ]
