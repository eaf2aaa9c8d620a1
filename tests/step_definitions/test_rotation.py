"""
Step definitions for the wallpaper rotation feature.

External programs are mocked by the shared rotator fixture; the network is
replaced by a fake session.get that serves per-source behaviour.
"""

import re
from typing import Any, Dict

import pytest
import requests
from pytest_bdd import scenarios, given, when, then, parsers

from conftest import mock_response
from wallrotate.rotator import RotationMode

# Load all scenarios from the feature file
scenarios("../features/rotation.feature")


SOURCE_URLS = {
    "first": "http://localhost:8000/first",
    "second": "http://localhost:8000/second",
}


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def rotation_context(rotator, png_bytes, monkeypatch) -> Dict[str, Any]:
    """Context for rotation tests with a fake network."""
    context: Dict[str, Any] = {
        "online": True,
        "sources": {},  # url -> "images" | "html"; anything else fails
        "requested": [],
        "outcomes": [],
    }

    def fake_get(url, **kwargs):
        context["requested"].append(url)
        behaviour = context["sources"].get(url)
        if behaviour == "images":
            return mock_response(png_bytes)
        if behaviour == "html":
            return mock_response(b"<html>not an image</html>")
        raise requests.ConnectionError(f"{url} unreachable")

    monkeypatch.setattr(rotator.fetcher.session, "get", fake_get)
    monkeypatch.setattr(rotator.fetcher, "check_connectivity", lambda: context["online"])
    return context


# ============================================================================
# Given Steps
# ============================================================================

@given(parsers.parse("cached wallpapers {listing}"))
def given_cached_wallpapers(rotation_context, make_wallpaper, listing):
    """Create cached files with explicit modification times."""
    for name, mtime in re.findall(r'"([^"]+)" at (\d+)', listing):
        make_wallpaper(name, float(mtime))


@given("an empty wallpaper cache")
def given_empty_cache(rotation_context, cache):
    assert cache.list_wallpapers() == []


@given("the network is unreachable")
def given_offline(rotation_context):
    rotation_context["online"] = False


@given("every wallpaper source fails")
def given_sources_fail(rotation_context):
    rotation_context["sources"] = {}


@given(parsers.parse("the {position} wallpaper source serves images"))
def given_source_serves_images(rotation_context, position):
    rotation_context["sources"][SOURCE_URLS[position]] = "images"


@given(parsers.parse("the {position} wallpaper source serves HTML"))
def given_source_serves_html(rotation_context, position):
    rotation_context["sources"][SOURCE_URLS[position]] = "html"


# ============================================================================
# When Steps
# ============================================================================

@when(parsers.parse('I rotate in "{mode}" mode'))
def when_rotate(rotation_context, rotator, mode):
    rotation_context["outcomes"].append(rotator.rotate(RotationMode(mode)))


@when(parsers.parse('I rotate in "{mode}" mode {count:d} times'))
def when_rotate_repeatedly(rotation_context, rotator, mode, count):
    for _ in range(count):
        rotation_context["outcomes"].append(rotator.rotate(RotationMode(mode)))


# ============================================================================
# Then Steps
# ============================================================================

@then(parsers.parse('"{name}" is applied'))
def then_file_applied(rotation_context, mock_setter, name):
    outcome = rotation_context["outcomes"][-1]
    assert outcome.applied is not None
    assert outcome.applied.path.name == name
    mock_setter.set.assert_called_with(outcome.applied.path, "")


@then("no download is attempted")
def then_no_download(rotation_context):
    assert rotation_context["requested"] == []


@then("no wallpaper is applied")
def then_nothing_applied(rotation_context, mock_setter):
    assert rotation_context["outcomes"][-1].is_noop
    mock_setter.set.assert_not_called()


@then("the cache is still empty")
def then_cache_empty(cache_dir):
    assert list(cache_dir.iterdir()) == []


@then("a downloaded wallpaper is applied")
def then_downloaded_applied(rotation_context):
    outcome = rotation_context["outcomes"][-1]
    assert outcome.from_network
    assert outcome.applied.path.exists()


@then(parsers.parse("the cache holds {count:d} file"))
def then_cache_count(cache_dir, count):
    assert len(list(cache_dir.iterdir())) == count


@then(parsers.parse("the cache holds exactly the last {count:d} downloads"))
def then_cache_holds_last(rotation_context, cache, count):
    applied = [o.applied.path for o in rotation_context["outcomes"]]
    assert {w.path for w in cache.list_wallpapers()} == set(applied[-count:])
