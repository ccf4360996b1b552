import webbrowser
from unittest.mock import patch

import pytest

from sitebox.errors import ExternalToolError
from sitebox.utils.browser import open_url


def test_open_url_uses_default_browser():
    with patch("webbrowser.open", return_value=True) as mock_open:
        open_url("http://localhost:1313")
    mock_open.assert_called_once_with("http://localhost:1313")


def test_open_url_without_browser_fails():
    with patch("webbrowser.open", return_value=False):
        with pytest.raises(ExternalToolError, match="no browser"):
            open_url("http://localhost:1313")


def test_open_url_launcher_error_is_wrapped():
    with patch("webbrowser.open", side_effect=webbrowser.Error("broken")):
        with pytest.raises(ExternalToolError) as exc:
            open_url("http://localhost:1313")
    assert isinstance(exc.value.__cause__, webbrowser.Error)
