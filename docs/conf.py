#!/usr/bin/env python3
import sys
import os.path as path

# Document the checkout rather than whatever irctrack happens to be installed.
sys.path.insert(0, path.abspath(path.join(path.dirname(__file__), '..')))
import irctrack

project = irctrack.__name__
version = release = irctrack.__version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.intersphinx',
    'sphinx.ext.viewcode'
]
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None)
}

exclude_patterns = ['_build']
master_doc = 'index'

html_theme = 'sphinx_rtd_theme'
html_show_sphinx = False


def skip(app, what, name, obj, skip, options):
    """ Session.on_raw_* and CapabilityTable.on_isupport_* are dispatch targets, not API. """
    if skip:
        return True
    return name.startswith(('on_raw_', 'on_isupport_'))

def setup(app):
    app.connect('autodoc-skip-member', skip)
