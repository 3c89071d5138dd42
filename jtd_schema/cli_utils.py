"""
CLI utilities for loading Python types and configuration files.
"""

import importlib
import json
from typing import Any

import click

from .pipeline import GeneratorConfig


def import_type(path: str) -> Any:
    """
    Import a type from a "package.module:QualName" path.

    Args:
        path: Module path and qualified name separated by a colon

    Returns:
        The imported object

    Raises:
        click.BadParameter: If the path is malformed or cannot be resolved
    """
    module_name, sep, qualname = path.partition(":")
    if not sep or not module_name or not qualname:
        raise click.BadParameter(f"expected 'module:QualName', got {path!r}")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import module {module_name!r}: {e}") from e

    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(f"{module_name!r} has no attribute {qualname!r}") from None
    return obj


def load_config(path: str | None) -> GeneratorConfig:
    """Load a GeneratorConfig from a JSON file, or return the defaults."""
    if path is None:
        return GeneratorConfig()
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"config file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise click.BadParameter(f"config file {path} must contain a JSON object")
    try:
        return GeneratorConfig.from_dict(data)
    except ValueError as e:
        raise click.BadParameter(f"invalid config file {path}: {e}") from e
