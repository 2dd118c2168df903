"""Vendor-agnostic building blocks shared by every provider adapter."""
