"""nebfire: nudged elastic band force composition with a FIRE integrator."""

__version__ = "0.1.0"
