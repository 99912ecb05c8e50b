"""
Tests for entries, name validation and the site/tag registries
"""
import threading

import pytest

from sitetags.core.errors import DuplicateName, InvalidName, NotFound
from sitetags.registry.entries import Site, Tag, validate_name
from sitetags.registry.store import SiteRegistry, TagRegistry


@pytest.mark.parametrize("name", ["", ";", "a;b", "trailing;", ";leading"])
def test_validate_name_rejects_empty_and_separator(name):
    with pytest.raises(InvalidName):
        validate_name(name)


@pytest.mark.parametrize("name", [None, 42, b"bytes"])
def test_validate_name_rejects_non_strings(name):
    with pytest.raises(InvalidName):
        validate_name(name)


@pytest.mark.parametrize("name", ["x", "example.com", "with space", "ünïcode", "a.b-c_d"])
def test_validate_name_accepts_valid(name):
    assert validate_name(name) == name


def test_add_returns_fully_built_entry(sink):
    registry = SiteRegistry(sink)
    site = registry.add("x")

    assert isinstance(site, Site)
    assert site.name == "x"
    assert site.positive.current_weight() == 0
    assert site.negative.current_weight() == 0
    assert isinstance(site.tags, TagRegistry)
    assert len(site.tags) == 0


def test_add_duplicate_keeps_single_entry(sink):
    registry = TagRegistry(sink)
    first = registry.add("t")

    with pytest.raises(DuplicateName):
        registry.add("t")

    assert registry.enumerate_all() == (first,)


def test_add_invalid_name_leaves_registry_untouched(sink):
    registry = SiteRegistry(sink)

    with pytest.raises(InvalidName):
        registry.add("a;b")

    assert len(registry) == 0
    assert "a;b" not in registry


def test_get_missing_raises_not_found(sink):
    registry = SiteRegistry(sink)
    registry.add("x")

    with pytest.raises(NotFound):
        registry.get("y")


def test_get_returns_same_object(sink):
    registry = TagRegistry(sink)
    tag = registry.add("t")

    assert isinstance(tag, Tag)
    assert registry.get("t") is tag
    assert registry.get("t") is registry.get("t")


def test_enumerate_all_keeps_insertion_order(sink):
    registry = SiteRegistry(sink)
    for name in ["zeta", "alpha", "mid"]:
        registry.add(name)

    assert [s.name for s in registry.enumerate_all()] == ["zeta", "alpha", "mid"]
    assert [s.name for s in registry] == ["zeta", "alpha", "mid"]


def test_dump_formats_sites_and_tags(sink):
    registry = SiteRegistry(sink)
    site = registry.add("x")
    registry.add("bare")
    site.tags.add("t1")
    site.tags.add("t2")
    site.positive.record_endorsement(3, 0)
    site.tags.get("t2").negative.record_endorsement(0, 8)

    assert registry.dump() == ["x;3.0;t1;0.0;t2;0.8", "bare;0.0"]


def test_concurrent_adds_of_one_name_succeed_once(sink):
    registry = SiteRegistry(sink)
    results = []
    barrier = threading.Barrier(10)

    def worker():
        barrier.wait()
        try:
            registry.add("contested")
            results.append("ok")
        except DuplicateName:
            results.append("dup")

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("dup") == 9
    assert len(registry) == 1
