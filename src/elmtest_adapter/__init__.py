#
# src/elmtest_adapter/__init__.py
#
"""
elmtest-adapter: runs elm-test and keeps a mergeable suite tree of its results.
"""

# 🔼⚙️
