"""
Integration tests.

Both builder strategies run side by side against the in-process node from
`tests.harness.fake_node`; nothing here needs a live network.
"""
