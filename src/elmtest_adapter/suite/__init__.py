#
# src/elmtest_adapter/suite/__init__.py
#
"""
The suite tree: building it from a run, merging runs and locating tests.
"""
from .builder import SuiteBuilder, insert_test_completed
from .locator import find_line_for_test, find_offset_for_test, indent_function, locate_test_line
from .merge import copy_locations, merge_top_level_suites
from .nodes import Node, Suite, Test, leaves, walk
from .query import (
    get_file_path,
    get_files_and_all_test_ids,
    get_line_fun,
    get_test_ids_for_file,
    get_test_infos_by_file,
    get_tests_root,
)

__all__ = [
    "Node",
    "Suite",
    "SuiteBuilder",
    "Test",
    "copy_locations",
    "find_line_for_test",
    "find_offset_for_test",
    "get_file_path",
    "get_files_and_all_test_ids",
    "get_line_fun",
    "get_test_ids_for_file",
    "get_test_infos_by_file",
    "get_tests_root",
    "indent_function",
    "insert_test_completed",
    "leaves",
    "locate_test_line",
    "merge_top_level_suites",
    "walk",
]

# 🔼⚙️
