"""Test discovery — glob walking, metadata scraping, YAML manifests."""

from cyselect.discovery.discover import DiscoveryError, discover_tests, find_test_files
from cyselect.discovery.manifest import load_manifest
from cyselect.discovery.metadata import extract_tags, extract_test_metadata, extract_titles
from cyselect.discovery.models import TestCandidate
from cyselect.discovery.patterns import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_TEST_PATTERNS,
    expand_braces,
    normalize_pattern,
    normalize_patterns,
)

__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_TEST_PATTERNS",
    "DiscoveryError",
    "TestCandidate",
    "discover_tests",
    "expand_braces",
    "extract_tags",
    "extract_test_metadata",
    "extract_titles",
    "find_test_files",
    "load_manifest",
    "normalize_pattern",
    "normalize_patterns",
]
