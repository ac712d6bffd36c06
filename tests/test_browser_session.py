from __future__ import annotations

import pytest

from selfheal.config.schema import EnvironmentConfig
from selfheal.core.browser import WRITE_DOCUMENT_SCRIPT, BrowserSession, SeleniumDocument
from selfheal.core.exceptions import ConfigurationError


class RecordingDriver:
    def __init__(self, fail_on_script: bool = False) -> None:
        self.fail_on_script = fail_on_script
        self.visited: list[str] = []
        self.scripts: list[tuple[str, tuple]] = []
        self.quit_calls = 0

    def get(self, url: str) -> None:
        self.visited.append(url)

    def execute_script(self, script: str, *args):
        if self.fail_on_script:
            raise RuntimeError("renderer crashed")
        self.scripts.append((script, args))

    def quit(self) -> None:
        self.quit_calls += 1


def test_window_size_accepts_either_separator():
    assert EnvironmentConfig(window_size="1280x720").window_size == "1280,720"
    assert BrowserSession(EnvironmentConfig(window_size=" 800 , 600 ")).window_dimensions() == (800, 600)


def test_both_browsers_get_the_configured_window_and_unit_scale():
    session = BrowserSession(EnvironmentConfig(window_size="1280,720", headless=True))

    chrome = session.chrome_options().arguments
    assert "--headless=new" in chrome
    assert "--window-size=1280,720" in chrome
    assert "--force-device-scale-factor=1" in chrome

    firefox = session.firefox_options()
    assert {"-headless", "--width=1280", "--height=720"} <= set(firefox.arguments)
    assert firefox.preferences["layout.css.devPixelsPerPx"] == "1.0"


def test_headed_session_leaves_out_headless_flags():
    session = BrowserSession(EnvironmentConfig(headless=False))
    assert "--headless=new" not in session.chrome_options().arguments
    assert "-headless" not in session.firefox_options().arguments


def test_unknown_browser_is_rejected_before_launch():
    with pytest.raises(ConfigurationError, match="safari"):
        BrowserSession(EnvironmentConfig()).start("Safari")


def test_open_document_writes_markup_into_blank_page(monkeypatch):
    driver = RecordingDriver()
    session = BrowserSession(EnvironmentConfig())
    monkeypatch.setattr(session, "start", lambda browser_name=None: driver)

    document = session.open_document("<button>Sign In</button>")

    assert isinstance(document, SeleniumDocument)
    assert driver.visited == ["about:blank"]
    assert driver.scripts == [(WRITE_DOCUMENT_SCRIPT, ("<button>Sign In</button>",))]
    document.close()
    assert driver.quit_calls == 1


def test_open_document_quits_driver_when_page_setup_fails(monkeypatch):
    driver = RecordingDriver(fail_on_script=True)
    session = BrowserSession(EnvironmentConfig())
    monkeypatch.setattr(session, "start", lambda browser_name=None: driver)

    with pytest.raises(RuntimeError, match="renderer crashed"):
        session.open_document("<p>broken</p>")
    assert driver.quit_calls == 1
