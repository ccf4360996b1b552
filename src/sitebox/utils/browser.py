import logging
import webbrowser

from sitebox.errors import ExternalToolError

logger = logging.getLogger(__name__)


def open_url(url: str) -> None:
    """Open ``url`` with the platform's default browser launcher."""
    logger.info(f"🌐 Opening {url}")
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise ExternalToolError(f"could not launch a browser for {url}") from e
    if not opened:
        raise ExternalToolError(f"no browser is available to open {url}")
