"""
GCP service helpers (gcpsvc) - Compute Engine clients, operation polling
and VPC network peering lifecycle management.
"""
