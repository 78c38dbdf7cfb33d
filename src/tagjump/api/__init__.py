"""HTTP surface over the tags engine."""
