# discogen

Helpers for driving code generation from API discovery documents:

- an RFC 6570 URI template parser (`discogen.uri_template`),
- the naming rules for generated library and command-line crates and the
  mapped API index (`discogen.naming`),
- a writer that pipes generated Rust code through `rustfmt`
  (`discogen.rustfmt`),
- template substitution that renders Jinja2 templates from JSON or YAML data
  (`discogen.templating`),
- the `mcp` command with the subcommands `map-api-index` and `substitute`.

## Installation

```
pip install .
```

## Command line

Transform a discovery directory index (a JSON document with an `items` list)
into a mapped index. APIs whose spec file is missing from the spec directory,
or that left a `generator-errors.log` or `cargo-errors.log` in the output
directory, are dropped. When the environment looks like a CI run, only the
APIs in `discogen.naming.CI_WHITELIST` are kept.

```
mcp map-api-index discovery.json mapped-index.json etc/api gen
```

Substitute templates using structured data. A template spec has the form
`<src>:<dst>`; leaving out `<src>` reads the template from standard input,
leaving out `<dst>` writes to standard output. With `--data` and no spec, the
template is read from standard input and written to standard output.

```
mcp substitute --data=index.json templates/Makefile.tpl:Makefile
mcp substitute --data=values.yaml --separator=$'---\n' a.yml b.yml
mcp substitute --data=values.yaml --replace=foo:bar --validate a.yml:out.yml
```

- `-s`/`--separator` is written between documents that go to the same
  destination (default: a newline).
- `--replace=find:replacement` replaces text in every string of the data
  before rendering; it may be given more than once.
- `-v`/`--validate` checks that each rendered template parses as YAML or JSON.
- `-d`/`--data` names the JSON or YAML data file; the root must be a mapping.

`sub` is an alias for `substitute`. Templates use Jinja2 syntax, and an
undefined variable is an error. Set the log level with `-l`/`--log-level`
(`INFO`, `ERROR`, `DEBUG`, `TRACE`). On failure the command prints the error
and its causes and exits with status 1.

## Library

```python
from discogen.naming import lib_crate_name, make_target, parse_version

lib_crate_name("youtube", "v2.0")   # "google-youtube2d0"
make_target("youtube", "v1.3")      # "youtube1d3"

from discogen.uri_template import ast_nodes

nodes = ast_nodes("/{foo}/{bar,baz}/literal")   # None if the template is invalid

from discogen.templating.spec import Spec

spec = Spec.parse("in.tpl:out.txt")
str(spec)                           # "in.tpl:out.txt"
```

`discogen.naming.Api` and `discogen.naming.MappedIndex` convert to and from
plain dictionaries with `to_dict` and `from_dict`.

`discogen.rustfmt.RustFmtWriter` writes bytes to a file through `rustfmt` when
it can be found (the `RUSTFMT` environment variable, else `PATH`); set
`RUSTFMT` to an empty value to write unformatted output.

## What it does not do

The package does not download API specifications, does not generate library
or command-line code from them, does not run cargo or collect its errors, and
does not produce shell completions. `mcp` offers only `map-api-index` and
`substitute`.

## Tests

```
pip install .[test]
pytest
```