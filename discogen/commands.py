"""The work behind the command-line subcommands."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from discogen.naming import MappedIndex, NamingError
from discogen.templating.engine import substitute
from discogen.templating.spec import Spec, StreamOrPath

log = logging.getLogger(__name__)


def logged_write(
    path: Union[str, os.PathLike], contents: Union[str, bytes], kind: str
) -> None:
    """Write ``contents`` to ``path`` and log that it happened."""
    data = contents.encode("utf-8") if isinstance(contents, str) else contents
    target = Path(path)
    try:
        target.write_bytes(data)
    except OSError as err:
        raise OSError(f"Could not write {kind} file at '{target}'") from err
    log.info("Wrote file %s at '%s'", kind, target)


def pair_replacements(values: Sequence[str]) -> List[Tuple[str, str]]:
    """Turn ``[find, replace, find, replace, ...]`` into pairs."""
    if len(values) % 2 != 0:
        raise ValueError(
            "Please provide --replace-value arguments in pairs of two. "
            "First the value to find, second the one to replace it with"
        )
    it = iter(values)
    return list(zip(it, it))


def map_api_index(
    discovery_json_path: Union[str, os.PathLike],
    output_file: Union[str, os.PathLike],
    spec_directory: Union[str, os.PathLike],
    output_directory: Union[str, os.PathLike],
) -> None:
    """Map the discovery index to the project's naming and write it as JSON."""
    source = Path(discovery_json_path)
    raw = source.read_bytes()
    try:
        index = json.loads(raw)
    except ValueError as err:
        raise NamingError(f"Could not read spec file at '{source}'") from err
    if not isinstance(index, dict):
        raise NamingError(f"Could not read spec file at '{source}'")
    mapped = MappedIndex.from_api_index(index).validated(
        spec_directory, output_directory
    )
    logged_write(
        output_file,
        json.dumps(mapped.to_dict(), indent=2),
        "mapped api index",
    )


def run_substitute(
    data: Optional[StreamOrPath],
    specs: Iterable[Spec],
    separator: Union[str, bytes],
    validate: bool,
    replacements: Sequence[str],
) -> None:
    """Check the flat replacement list and substitute the templates."""
    pairs = pair_replacements(replacements)
    substitute(
        data if data is not None else StreamOrPath(),
        list(specs),
        separator,
        validate,
        pairs,
    )