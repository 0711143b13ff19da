"""Utility functions for loading template sources.

Templates are read from local files or fetched from http(s) URLs, with
errors reported as TemplateLoadError.
"""

from pathlib import Path
from urllib.parse import urlparse

import requests

from .errors import TemplateLoadError
from .logging_config import get_logger

logger = get_logger(__name__)


def is_url(location: str) -> bool:
    """Whether ``location`` names an http(s) resource."""
    parsed = urlparse(location)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def template_name(location: str) -> str:
    """Short name a template is registered under (its base name)."""
    if is_url(location):
        path = urlparse(location).path.rstrip("/")
        return path.rsplit("/", 1)[-1] or location
    return Path(location).name or location


def load_template_from_file(file_path: str | Path) -> str:
    """Read a template from a local file.

    Args:
        file_path: Path to the template file.

    Returns:
        Template source text.

    Raises:
        TemplateLoadError: If the file is missing or cannot be read.
    """
    file_path = Path(file_path)
    logger.debug(f"Loading template from file: {file_path}")

    if not file_path.is_file():
        logger.error(f"Template not found: {file_path}")
        raise TemplateLoadError(f"template not found: {file_path}")

    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading template {file_path}: {e}")
        raise TemplateLoadError(f"error reading template {file_path}: {e}") from e


def load_template_from_url(url: str, timeout: int = 30) -> str:
    """Fetch a template from a URL.

    Args:
        url: URL to fetch.
        timeout: Request timeout in seconds.

    Returns:
        Template source text.

    Raises:
        TemplateLoadError: If the request fails or returns an error status.
    """
    logger.debug(f"Fetching template from URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise TemplateLoadError(f"request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise TemplateLoadError(f"connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise TemplateLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise TemplateLoadError(f"request error for URL {url}: {e}") from e

    logger.info(f"Fetched template from {url}")
    return response.text


def load_template(location: str, timeout: int = 30) -> str:
    """Load template source from a file path or URL."""
    if is_url(location):
        return load_template_from_url(location, timeout)
    return load_template_from_file(location)
