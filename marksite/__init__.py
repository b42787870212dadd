"""marksite static site generator.

Builds a directory of Markdown documents and assets into a static site:
documents become HTML pages, Sass/SCSS sources are compiled to CSS and every
other file is copied as is. The result lands in an `out` folder inside the
source directory and can be served locally with a watcher that rebuilds
each changed file on the fly.

The main entry point is the CLI module.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
