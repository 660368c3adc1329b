"""
aitranslate - incremental AI translation of Xcode string catalogs.
"""

__version__ = "0.1.0"
