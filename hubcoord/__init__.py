"""Partition coordination for hub clusters: hashing, cluster state, balancing steps and admin queries."""

__version__ = "0.1.0"