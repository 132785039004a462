"""Bundled data files for assetsweep."""
