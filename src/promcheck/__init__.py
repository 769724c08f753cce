"""
promcheck - pre-flight validation of Prometheus metrics for Kubernetes collectors.
"""

__version__ = "0.1.0"
