"""Render templates with structured data into files or standard output."""

from __future__ import annotations

import os
import sys
from typing import Any, Sequence, Set, Tuple, Union

import jinja2
import yaml

from discogen.templating.spec import Spec, StreamOrPath, TemplatingError
from discogen.templating.util import load_json_or_yaml, validate


def substitute_in_data(data: Any, replacements: Sequence[Tuple[str, str]]) -> Any:
    """Apply every (find, replace) pair, in order, to all strings in ``data``."""
    if not replacements:
        return data
    if isinstance(data, str):
        for find, replace in replacements:
            data = data.replace(find, replace)
        return data
    if isinstance(data, list):
        return [substitute_in_data(item, replacements) for item in data]
    if isinstance(data, dict):
        return {key: substitute_in_data(value, replacements) for key, value in data.items()}
    return data


def _load_dataset(input_data: StreamOrPath) -> Any:
    if input_data.path is None:
        if sys.stdin.isatty():
            raise TemplatingError(
                "Stdin is a TTY. Cannot substitute a template without any data."
            )
        return load_json_or_yaml(sys.stdin.buffer)
    try:
        handle = open(input_data.path, "rb")
    except OSError as err:
        raise TemplatingError(
            f"Could not open input data file at '{input_data.path}'"
        ) from err
    with handle:
        return load_json_or_yaml(handle)


def _render(engine: jinja2.Environment, spec: Spec, dataset: dict) -> str:
    with spec.src.open_as_input() as istream:
        raw = istream.read()
    try:
        source = raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise TemplatingError(
            f"Template at '{spec.src.name()}' is not valid UTF8"
        ) from err
    try:
        template = engine.from_string(source)
    except jinja2.TemplateSyntaxError as err:
        raise TemplatingError(
            f"Failed to parse liquid template at '{spec.src.name()}': {err}"
        ) from err
    try:
        return template.render(dataset)
    except (jinja2.TemplateError, TypeError) as err:
        raise TemplatingError(
            "Failed to render template from template at "
            f"'{spec.src.short_name()}': {err}"
        ) from err


def substitute(
    input_data: StreamOrPath,
    specs: Sequence[Spec],
    separator: Union[str, bytes],
    try_deserialize: bool,
    replacements: Sequence[Tuple[str, str]],
) -> None:
    """Render each spec's template with the data and write it to its destination."""
    dataset = _load_dataset(input_data)
    if input_data.path is not None and not specs:
        specs = [Spec(StreamOrPath(), StreamOrPath())]

    validate(input_data, specs)
    dataset = substitute_in_data(dataset, replacements)
    if not isinstance(dataset, dict):
        raise TemplatingError("Data model root must be an object")

    sep_bytes = os.fsencode(separator) if isinstance(separator, str) else separator
    engine = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )

    seen_file_outputs: Set[StreamOrPath] = set()
    writes_to_stdout = 0
    for spec in specs:
        if spec.dst.is_stream():
            writes_to_stdout += 1
            append = False
        else:
            append = spec.dst in seen_file_outputs
            seen_file_outputs.add(spec.dst)

        with spec.dst.open_as_output(append) as ostream:
            if writes_to_stdout > 1 or append:
                ostream.write(sep_bytes)
            rendered = _render(engine, spec, dataset)
            if try_deserialize:
                try:
                    list(yaml.safe_load_all(rendered))
                except yaml.YAMLError as err:
                    raise TemplatingError(
                        f"Validation of template output at '{spec.dst.name()}' "
                        "failed. It's neither valid YAML, nor JSON"
                    ) from err
            ostream.write(rendered.encode("utf-8"))