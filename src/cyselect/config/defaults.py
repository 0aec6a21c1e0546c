"""Starter .cyselect.toml template."""

DEFAULT_TOML = """\
# cy-select configuration

[selection]
safety_level = "medium"   # high | moderate | medium | low
# threshold = 0.5         # explicit cut-off, overrides safety_level

[weights]
directory = 1.0
similarity = 1.0
import_graph = 1.0
tags = 0.5
titles = 0.4

[discovery]
project_root = "."
# test_patterns = ["cypress/e2e/**/*.{cy,spec,test}.{ts,tsx,js,jsx}"]
# exclude = ["**/legacy/**"]
# manifest = "cypress/tests.yml"

[git]
# default_base = "origin/main"   # unset = first of origin/main, origin/master, main, master

[output]
format = "human"          # human | json
verbose = false
"""
