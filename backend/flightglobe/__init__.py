"""Live flight tracking core: feed normaliser, trajectories and route resolution."""

__version__ = "0.1.0"
