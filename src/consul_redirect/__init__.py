"""Redirect Consul service hostnames to a live service port."""
