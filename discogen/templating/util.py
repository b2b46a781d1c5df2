"""Checks on template specs and loading of structured data."""

from __future__ import annotations

import json
from typing import Any, BinaryIO, Sequence

import yaml

from discogen.templating.spec import Spec, StreamOrPath, TemplatingError


def _overwrites_input(spec: Spec) -> bool:
    if spec.src.path is None or spec.dst.path is None:
        return False
    try:
        return spec.src.path.resolve(strict=True) == spec.dst.path.resolve(strict=True)
    except OSError:
        return False


def validate(data: StreamOrPath, specs: Sequence[Spec]) -> None:
    """Raise TemplatingError if the specs cannot be processed together."""
    if not specs:
        raise TemplatingError(
            "No spec provided, neither from standard input, nor from file"
        )
    needing_stdin = sum(1 for spec in specs if spec.src.is_stream())
    if needing_stdin > 1:
        raise TemplatingError(
            "Cannot read more than one template spec from standard input"
        )
    if data.is_stream() and needing_stdin == 1:
        raise TemplatingError(
            "Data is read from standard input, as well as one template. "
            "Please choose one"
        )
    for spec in specs:
        if _overwrites_input(spec):
            raise TemplatingError(
                f"Refusing to overwrite input file at '{spec.src}' with output"
            )


def load_json_or_yaml(stream: BinaryIO) -> Any:
    """Read all of ``stream`` and parse it as JSON, falling back to YAML."""
    try:
        buf = stream.read()
    except OSError as err:
        raise TemplatingError(
            "Could not read input stream data deserialization"
        ) from err
    try:
        return json.loads(buf)
    except ValueError as json_err:
        try:
            return yaml.safe_load(buf)
        except yaml.YAMLError as yaml_err:
            raise TemplatingError(
                "Could not deserialize data, tried JSON and YAML: "
                f"JSON deserialization failed: {json_err}; "
                f"YAML deserialization failed: {yaml_err}"
            ) from yaml_err