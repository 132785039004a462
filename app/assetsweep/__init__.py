"""assetsweep - Dependency-aware cleanup of unused content assets."""

__version__ = "0.3.0"
