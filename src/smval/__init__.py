"""Soil-moisture validation: pairwise metrics, Triple Collocation and Hovmoller diagrams."""

from smval.stats.metrics import compute_metrics
from smval.stats.tca import triple_collocation

__all__ = ["compute_metrics", "triple_collocation"]
