#
# src/elmtest_adapter/cli/__init__.py
#
"""
Command line interface for elmtest-adapter.
"""
