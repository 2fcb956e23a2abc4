"""
vgm-importer: imports vgmrips soundtrack packs into a track catalogue.
"""

__version__ = "0.1.0"
