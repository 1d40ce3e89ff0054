"""NetMetrics - flow metrics normalization for topology views.

Turns raw, sparse backend time-series keyed by flow endpoints into
gap-filled series, summary statistics and disambiguated flow records
that can be matched against topology graph nodes.
"""

__version__ = "0.1.0"
