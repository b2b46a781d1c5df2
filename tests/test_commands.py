import json

import pytest

from discogen.commands import (
    logged_write,
    map_api_index,
    pair_replacements,
    run_substitute,
)
from discogen.naming import MappedIndex, NamingError
from discogen.templating.spec import Spec, StreamOrPath, TemplatingError


def _index(tmp_path):
    index = {
        "items": [
            {
                "kind": "discovery#directoryItem",
                "id": "drive:v3",
                "name": "drive",
                "version": "v3",
                "title": "Drive",
                "description": "Drive",
                "discoveryRestUrl": "https://example.com/drive/v3/rest",
                "preferred": True,
            },
            {
                "kind": "discovery#directoryItem",
                "id": "oauth2:v2",
                "name": "oauth2",
                "version": "v2",
                "title": "OAuth",
                "description": "OAuth",
                "discoveryRestUrl": "https://example.com/oauth2/v2/rest",
                "preferred": True,
            },
        ]
    }
    path = tmp_path / "index.json"
    path.write_text(json.dumps(index))
    return path


def test_logged_write_writes_bytes_and_text(tmp_path):
    target = tmp_path / "out.txt"
    logged_write(target, b"abc", "test")
    assert target.read_bytes() == b"abc"
    logged_write(target, "xyz", "test")
    assert target.read_text() == "xyz"


def test_logged_write_reports_failure(tmp_path):
    with pytest.raises(OSError, match="Could not write spec file"):
        logged_write(tmp_path / "missing" / "out.txt", b"abc", "spec")


def test_pair_replacements_pairs_in_order():
    assert pair_replacements(["a", "b", "c", "d"]) == [("a", "b"), ("c", "d")]
    assert pair_replacements([]) == []


def test_pair_replacements_rejects_odd_count():
    with pytest.raises(ValueError, match="pairs of two"):
        pair_replacements(["a", "b", "c"])


def test_map_api_index_keeps_apis_with_specs(tmp_path):
    index_path = _index(tmp_path)
    spec_dir = tmp_path / "specs"
    (spec_dir / "drive" / "v3").mkdir(parents=True)
    (spec_dir / "drive" / "v3" / "spec.json").write_text("{}")
    out_dir = tmp_path / "gen"
    out_dir.mkdir()
    output = tmp_path / "mapped.json"

    map_api_index(index_path, output, spec_dir, out_dir)

    mapped = MappedIndex.from_dict(json.loads(output.read_text()))
    assert [api.id for api in mapped.api] == ["drive:v3"]
    assert mapped.api[0].lib_crate_name == "google-drive3"
    assert mapped.api[0].rest_url == "https://example.com/drive/v3/rest"


def test_map_api_index_drops_previously_failed(tmp_path):
    index_path = _index(tmp_path)
    spec_dir = tmp_path / "specs"
    (spec_dir / "drive" / "v3").mkdir(parents=True)
    (spec_dir / "drive" / "v3" / "spec.json").write_text("{}")
    out_dir = tmp_path / "gen"
    (out_dir / "drive" / "v3").mkdir(parents=True)
    (out_dir / "drive" / "v3" / "cargo-errors.log").write_text("boom")
    output = tmp_path / "mapped.json"

    map_api_index(index_path, output, spec_dir, out_dir)

    assert json.loads(output.read_text())["api"] == []


def test_map_api_index_rejects_invalid_json(tmp_path):
    bad = tmp_path / "index.json"
    bad.write_text("not json")
    with pytest.raises(NamingError):
        map_api_index(bad, tmp_path / "out.json", tmp_path, tmp_path)


def test_run_substitute_applies_replacements(tmp_path):
    data = tmp_path / "data.json"
    data.write_text(json.dumps({"name": "world"}))
    template = tmp_path / "tpl.txt"
    template.write_text("Hello {{ name }}")
    output = tmp_path / "out.txt"

    run_substitute(
        StreamOrPath(data),
        [Spec(StreamOrPath(template), StreamOrPath(output))],
        "\n",
        False,
        ["world", "there"],
    )
    assert output.read_text() == "Hello there"


def test_run_substitute_rejects_odd_replacements(tmp_path):
    data = tmp_path / "data.json"
    data.write_text("{}")
    with pytest.raises(ValueError):
        run_substitute(StreamOrPath(data), [], "\n", False, ["only-one"])


def test_run_substitute_validation_failure(tmp_path):
    data = tmp_path / "data.json"
    data.write_text("{}")
    template = tmp_path / "tpl.txt"
    template.write_text("key: [unclosed")
    output = tmp_path / "out.txt"
    with pytest.raises(TemplatingError):
        run_substitute(
            StreamOrPath(data),
            [Spec(StreamOrPath(template), StreamOrPath(output))],
            "\n",
            True,
            [],
        )