"""Template substitution with Jinja2 from JSON or YAML data into files or standard output."""