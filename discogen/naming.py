"""Naming rules for generated API crates and the mapped API index.

Everything that derives a name, a path or a version from an API
description lives here, so that all tools agree on it.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Any, Dict, List, Mapping, Optional

log = logging.getLogger(__name__)

CI_WHITELIST = (
    "urlshortener:v1",
    "admin:directory_v1",
    "drive:v3",
    "oauth2:v2",
)

_CI_VARIABLES = (
    "CONTINUOUS_INTEGRATION",
    "BUILD_NUMBER",
    "RUN_ID",
    "TRAVIS",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "CIRCLECI",
    "APPVEYOR",
    "JENKINS_URL",
    "TF_BUILD",
    "BUILDKITE",
    "DRONE",
    "TEAMCITY_VERSION",
)

_ASCII_DIGITS = "0123456789"


class NamingError(ValueError):
    """Raised when a name, a version or an API cannot be handled."""


@dataclass
class Standard:
    """Constants that are not specific to any one API."""

    cargo_toml_path: str = "Cargo.toml"
    lib_path: str = "src/lib.rs"
    main_path: str = "src/main.rs"
    metadata_path: str = "meta.json"
    lib_dir: str = "lib"
    cli_dir: str = "cli"
    spec_dir: str = "etc/api"
    lib_crate_version: str = "0.1.0"
    cli_crate_version: str = "0.1.0"

    def to_dict(self) -> Dict[str, str]:
        return {
            "cargo_toml_path": self.cargo_toml_path,
            "lib_path": self.lib_path,
            "main_path": self.main_path,
            "metadata_path": self.metadata_path,
            "lib_dir": self.lib_dir,
            "cli_dir": self.cli_dir,
            "spec_dir": self.spec_dir,
            "lib_crate_version": self.lib_crate_version,
            "cli_crate_version": self.cli_crate_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Standard":
        try:
            return cls(**{key: str(data[key]) for key in cls().to_dict()})
        except KeyError as err:
            raise NamingError(f"missing field {err.args[0]!r} in standard") from err


class SkipIfErrorIsPresent(enum.Enum):
    """Which error logs make an API count as previously failed."""

    GENERATOR_AND_CARGO = "generator_and_cargo"
    GENERATOR = "generator"


_API_PATH_FIELDS = (
    "metadata_file",
    "lib_cargo_file",
    "gen_error_file",
    "cargo_error_file",
    "gen_dir",
    "spec_file",
)
_API_STR_FIELDS = (
    "lib_crate_name",
    "cli_crate_name",
    "make_target",
    "bin_name",
    "rest_url",
)


@dataclass
class Api:
    """Everything needed to generate and build the crates of one API."""

    name: str
    id: str
    metadata_file: PurePath
    lib_cargo_file: PurePath
    gen_error_file: PurePath
    cargo_error_file: PurePath
    gen_dir: PurePath
    spec_file: PurePath
    lib_crate_name: str
    cli_crate_name: str
    make_target: str
    bin_name: str
    rest_url: str
    lib_crate_version: Optional[str] = None
    cli_crate_version: Optional[str] = None

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Api":
        """Build from an entry of the discovery directory index."""
        try:
            raw_name = item["name"]
            version = item["version"]
            api_id = item["id"]
            rest_url = item["discoveryRestUrl"]
        except KeyError as err:
            raise NamingError(f"missing field {err.args[0]!r} in index item") from err
        name = sanitized_name(raw_name)
        gen_dir = PurePath(name) / version
        standard = Standard()
        lib_name = lib_crate_name(raw_name, version)
        target = make_target(raw_name, version)
        return cls(
            name=name,
            id=api_id,
            metadata_file=gen_dir / standard.metadata_path,
            lib_cargo_file=gen_dir / standard.lib_dir / standard.cargo_toml_path,
            gen_error_file=gen_dir / "generator-errors.log",
            cargo_error_file=gen_dir / "cargo-errors.log",
            gen_dir=gen_dir,
            spec_file=gen_dir / "spec.json",
            lib_crate_name=lib_name,
            cli_crate_name=cli_crate_name(lib_name),
            make_target=target,
            bin_name=target,
            rest_url=rest_url,
        )

    @classmethod
    def from_rest_desc(cls, desc: Mapping[str, Any]) -> "Api":
        """Build from a full discovery REST description of one API."""
        try:
            item = {
                "id": desc["id"],
                "name": desc["name"],
                "version": desc["version"],
                "discoveryRestUrl": "<unset>",
            }
            revision = desc["revision"]
        except KeyError as err:
            raise NamingError(f"missing field {err.args[0]!r} in description") from err
        api = cls.from_item(item)
        standard = Standard()
        api.lib_crate_version = crate_version(standard.lib_crate_version, revision)
        api.cli_crate_version = crate_version(standard.cli_crate_version, revision)
        return api

    def validated(
        self,
        ci: bool,
        spec_directory: os.PathLike,
        output_directory: os.PathLike,
        skip_mode: SkipIfErrorIsPresent,
    ) -> "Api":
        """Return self if the API may be processed, raise NamingError otherwise."""
        if api_is_valid(self, ci, spec_directory, output_directory, skip_mode):
            return self
        raise NamingError(f"Api '{self.id}' is invalid")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "id": self.id}
        for key in _API_PATH_FIELDS:
            data[key] = str(getattr(self, key))
        for key in _API_STR_FIELDS:
            data[key] = getattr(self, key)
        if self.lib_crate_version is not None:
            data["lib_crate_version"] = self.lib_crate_version
        if self.cli_crate_version is not None:
            data["cli_crate_version"] = self.cli_crate_version
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Api":
        try:
            kwargs: Dict[str, Any] = {"name": data["name"], "id": data["id"]}
            for key in _API_PATH_FIELDS:
                kwargs[key] = PurePath(data[key])
            for key in _API_STR_FIELDS:
                kwargs[key] = data[key]
        except KeyError as err:
            raise NamingError(f"missing field {err.args[0]!r} in api") from err
        kwargs["lib_crate_version"] = data.get("lib_crate_version")
        kwargs["cli_crate_version"] = data.get("cli_crate_version")
        return cls(**kwargs)


@dataclass
class MappedIndex:
    """The discovery index, mapped to the names this project uses."""

    standard: Standard = field(default_factory=Standard)
    api: List[Api] = field(default_factory=list)

    @classmethod
    def from_api_index(cls, index: Mapping[str, Any]) -> "MappedIndex":
        """Map a discovery directory index (with an ``items`` list)."""
        items = index.get("items") or []
        return cls(standard=Standard(), api=[Api.from_item(item) for item in items])

    def validated(
        self, spec_directory: os.PathLike, output_directory: os.PathLike
    ) -> "MappedIndex":
        """Drop every API that may not or cannot be processed."""
        ci = running_on_ci()
        if ci:
            log.info(
                "Running on CI - limiting APIs to %s", list(CI_WHITELIST)
            )
        self.api = [
            api
            for api in self.api
            if api_is_valid(
                api,
                ci,
                spec_directory,
                output_directory,
                SkipIfErrorIsPresent.GENERATOR_AND_CARGO,
            )
        ]
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard": self.standard.to_dict(),
            "api": [api.to_dict() for api in self.api],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MappedIndex":
        try:
            standard = Standard.from_dict(data["standard"])
            apis = [Api.from_dict(entry) for entry in data["api"]]
        except KeyError as err:
            raise NamingError(f"missing field {err.args[0]!r} in index") from err
        return cls(standard=standard, api=apis)


def running_on_ci() -> bool:
    """Tell whether the environment looks like a continuous integration run."""
    value = os.environ.get("CI")
    if value is not None and value.strip().lower() not in ("", "false", "0"):
        return True
    return any(os.environ.get(name) for name in _CI_VARIABLES)


def api_is_valid(
    api: Api,
    ci: bool,
    spec_directory: os.PathLike,
    output_directory: os.PathLike,
    skip_mode: SkipIfErrorIsPresent,
) -> bool:
    """Check that an API is allowed, has a spec and has not failed before."""
    if ci and api.id not in CI_WHITELIST:
        return False
    spec_path = Path(spec_directory) / api.spec_file
    if not spec_path.is_file():
        log.error(
            "Dropping API '%s' as its spec file at '%s' does not exist",
            api.lib_crate_name,
            spec_path,
        )
        return False
    if skip_mode is SkipIfErrorIsPresent.GENERATOR_AND_CARGO:
        skip_list = [api.gen_error_file, api.cargo_error_file]
    else:
        skip_list = [api.gen_error_file]
    for error_log in skip_list:
        error_log_file = Path(output_directory) / error_log
        if error_log_file.is_file():
            log.error(
                "Dropping API '%s' as it previously failed with errors, "
                "see '%s' for details.",
                api.lib_crate_name,
                error_log_file,
            )
            return False
    return True


def sanitized_name(name: str) -> str:
    """Strip trailing digits, unless the name consists of digits only."""
    return name.rstrip(_ASCII_DIGITS) or name


def lib_crate_name(name: str, version: str) -> str:
    return f"google-{make_target(name, version)}"


def cli_crate_name(crate_name: str) -> str:
    return f"{crate_name}-cli"


def make_target(name: str, version: str) -> str:
    return f"{sanitized_name(name)}{parse_version(version)}"


def crate_version(major_minor_patch: str, revision_date: str) -> str:
    return f"{major_minor_patch}-{revision_date}"


def _transform_version(version: str) -> str:
    if not version.startswith("v"):
        raise NamingError("A version must start with 'v'")
    out = []
    separator: Optional[str] = "_"
    for char in version[1:]:
        if char == ".":
            out.append("d")
        elif char in _ASCII_DIGITS:
            out.append(char)
        elif "a" <= char <= "z":
            if separator is not None:
                out.append(separator)
                separator = None
            out.append(char)
        else:
            raise NamingError(f"unexpected character '{ord(char)}'")
    return "".join(out)


def _normalize_version(version: str) -> str:
    if len(version.encode("utf-8")) < 2:
        raise NamingError("version string too small")
    if not version.isascii():
        raise NamingError("can only handle ascii versions")
    if version in ("alpha", "beta"):
        return version
    left, sep, right = version.partition("_")
    if sep:
        return f"{_transform_version(right)}_{left}"
    return _transform_version(version)


def parse_version(version: str) -> str:
    """Normalize an API version string, e.g. ``v1.3`` becomes ``1d3``."""
    try:
        return _normalize_version(version)
    except NamingError as err:
        raise NamingError(f"invalid version '{version}': {err}") from err