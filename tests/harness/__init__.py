"""
tests.harness
=============

Helpers shared by the test suites:

- fake_node.py: in-process FastAPI stand-in for a node's debug and account
  endpoints, with server-side encoding independent of ae_sdk.encoding.
"""
