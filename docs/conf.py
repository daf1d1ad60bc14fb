# Configuration file for the Sphinx documentation builder.
#
# For a comprehensive list of built-in configuration values, refer to the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import liespline

# -- Project Information -----------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#project-information

project = "liespline"
copyright = "2024, liespline contributors"
author = "liespline contributors"
release = liespline.__version__

# -- General Configuration ---------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#general-configuration

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.coverage",
    "sphinx-mathjax-offline",
    "sphinx.ext.napoleon",
    "sphinx_favicon",
]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]
source_suffix = {".rst": "restructuredtext"}
pygments_style = "sphinx"

# Group docstrings use the Google style.
napoleon_numpy_docstring = False
napoleon_use_rtype = False

autodoc_member_order = "bysource"
autodoc_typehints = "description"

# -- Options for HTML Output -------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#options-for-html-output

html_theme = "sphinx_rtd_theme"
htmlhelp_basename = "liesplinedoc"
