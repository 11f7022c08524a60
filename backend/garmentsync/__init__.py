"""GarmentSync: order tracking and collaboration between garment manufacturers and buyers."""

__version__ = "1.0.0"
