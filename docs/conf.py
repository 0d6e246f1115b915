import os
import sys

sys.path.insert(0, os.path.abspath(".."))

project = "get_data_url"
copyright = "2024, get_data_url contributors"
author = "get_data_url contributors"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.viewcode",
    "sphinx.ext.napoleon",
    "sphinx_autodoc_typehints",
]

html_theme = "sphinx_rtd_theme"

# Autodoc settings
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_class_signature = "separated"
