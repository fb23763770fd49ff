"""ICS serial servo control and motion sequencing for a sixteen-servo humanoid robot."""

__version__ = "0.1.0"