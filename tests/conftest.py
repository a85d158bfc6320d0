"""
Pytest configuration and fixtures.
"""

import pytest


@pytest.fixture
def settings():
    """Provide test settings."""
    from dropdown_autoselect.config import Settings, SelectionSettings, BrowserSettings
    
    return Settings(
        selection=SelectionSettings(
            target_control="dropdown-1",
            retry_delay_ms=0,  # Keep retry loops fast
            observer_timeout_ms=500,
            settle_delay_ms=0,
        ),
        browser=BrowserSettings(headless=True),
    )


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from the global settings singleton and env."""
    from dropdown_autoselect.config import reset_settings
    
    monkeypatch.delenv("DROPDOWN_AUTOSELECT_CONFIG", raising=False)
    for name in ("TARGET_CONTROL", "MAX_RETRIES", "RETRY_DELAY_MS", "OBSERVER_TIMEOUT_MS"):
        monkeypatch.delenv(f"DROPDOWN_AUTOSELECT__SELECTION__{name}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
async def browser():
    """Provide a browser instance for integration tests."""
    from dropdown_autoselect.browsers import PlaywrightBrowser
    from dropdown_autoselect.exceptions import BrowserLaunchError
    
    browser = PlaywrightBrowser()
    try:
        await browser.launch(headless=True)
    except BrowserLaunchError as e:
        pytest.skip(f"No browser available: {e}")
    
    yield browser
    
    await browser.close()


@pytest.fixture
async def document(browser):
    """Provide a document for integration tests."""
    document = await browser.new_document()
    yield document
    await document.close()
