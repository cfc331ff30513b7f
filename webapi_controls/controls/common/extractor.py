"""JSON Path extraction with the trailing-dot collapse rule."""

from functools import lru_cache
from typing import Any

from jsonpath_ng import JSONPath
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath
import structlog

from webapi_controls.config import get_settings
from .errors import ConfigurationError

logger = structlog.get_logger()


@lru_cache(maxsize=256)
def _compile(path: str) -> JSONPath:
    """Compile a path, treating a single trailing dot as "the value itself"."""
    expression = path[:-1] if path.endswith(".") else path
    return parse_jsonpath(expression or "$")


def query_path(path: str, document: Any) -> list[Any]:
    """Evaluate a JSON Path and return every matching value in document order."""
    try:
        expression = _compile(path)
    except (JSONPathError, ValueError) as e:
        raise ConfigurationError(f"Invalid JSON Path '{path}': {e}") from e

    return [match.value for match in expression.find(document)]


class JsonPathExtractor:
    """Extract values from a JSON document using a path query."""

    def __init__(self, default_path: str | None = None):
        self.default_path = default_path or get_settings().control.default_json_path

    def extract(self, document: Any, path: str | None = None) -> Any:
        """Apply ``path`` to ``document``.

        Args:
            document: Parsed JSON value
            path: JSON Path query, defaults to ``$.``

        Returns:
            List of matches. When exactly one value matches and the path ends
            with ``.``, the value itself. None for an empty document.
        """
        path = path or self.default_path

        if _is_empty(document):
            logger.debug("Nothing to extract", path=path)
            return None

        matches = query_path(path, document)
        logger.debug("Path evaluated", path=path, matches=len(matches))

        if len(matches) == 1 and path.endswith("."):
            return matches[0]

        return matches


def _is_empty(document: Any) -> bool:
    """Documents that count as "no data": null, false, 0, NaN and ""."""
    if document is None or document is False or document == "":
        return True
    if isinstance(document, (int, float)) and not isinstance(document, bool):
        return document == 0 or document != document
    return False
