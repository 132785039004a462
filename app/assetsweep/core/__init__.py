"""Core services for assetsweep.

Paths, policy configuration, used-asset detection, history state and the
cleaner facade.
"""
