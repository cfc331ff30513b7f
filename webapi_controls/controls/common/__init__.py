"""Building blocks shared by the controls."""

from .dispatcher import HttpProxyExecutor, RequestDispatcher
from .emitter import ChangeEmitter
from .errors import ConfigurationError, ControlError, ParseError, ShapeError, TransportError
from .extractor import JsonPathExtractor, query_path
from .renderer import VariantRenderer
from .result_builder import RunResultBuilder
from .transformers import coerce_value, is_int, load_json, sort_items

__all__ = [
    "RequestDispatcher",
    "HttpProxyExecutor",
    "ChangeEmitter",
    "ControlError",
    "ConfigurationError",
    "TransportError",
    "ParseError",
    "ShapeError",
    "JsonPathExtractor",
    "query_path",
    "VariantRenderer",
    "RunResultBuilder",
    "coerce_value",
    "is_int",
    "load_json",
    "sort_items",
]
