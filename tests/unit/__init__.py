"""Unit tests: one module per ae_sdk component, no network and no node."""
