"""ClusterScore - compliance control aggregation for scanner reports."""

__version__ = "0.3.0"
