"""Sphinx configuration for the EquityHub API reference.

Build with ``sphinx-build -b html docs docs/_build`` from the project root.
"""

import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

with (ROOT / "pyproject.toml").open("rb") as fh:
    _project = tomllib.load(fh)["project"]

project = "EquityHub"
author = "EquityHub Contributors"
release = _project["version"]
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable", None),
}

napoleon_google_docstrings = True
napoleon_numpy_docstrings = False
napoleon_use_rtype = False

autodoc_member_order = "groupwise"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
    "exclude-members": "__weakref__",
}
modindex_common_prefix = ["equityhub."]

html_theme = "alabaster"
html_title = f"EquityHub {release}"

exclude_patterns = ["_build"]
