"""
Address Tableau Server REST API endpoints and publish content in chunks.

Resolves logical operations into fully-qualified, version-correct request URLs, infers server identity from a content URL
shown in a browser, and coordinates the three-phase file upload protocol used to publish workbooks and data sources.
"""

from ._version import __version__

__all__ = ["__version__"]

__author__ = "Levente Hunyadi"
__copyright__ = "Copyright 2022-2026, Levente Hunyadi"
__license__ = "MIT"
__maintainer__ = "Levente Hunyadi"
__status__ = "Production"
