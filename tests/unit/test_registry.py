import logging

import pytest
from statscalc.services.registry import HandleRegistry

@pytest.fixture
def registry():
    return HandleRegistry()

def test_create_returns_distinct_handles(registry):
    a = registry.create()
    b = registry.create()
    assert a == 0
    assert b == 1
    assert registry.handles() == [0, 1]

def test_next_handle_is_max_plus_one(registry):
    for _ in range(3):
        registry.create()
    registry.destroy(1)
    assert registry.create() == 3
    for h in registry.handles():
        registry.destroy(h)
    assert len(registry) == 0
    assert registry.create() == 0

def test_destroyed_handle_returns_defaults(registry):
    first = registry.create()
    second = registry.create()
    registry.append_value(first, 1.0)
    registry.append_value(first, 3.0)
    registry.append_value(second, 10.0)
    registry.append_value(second, 20.0)
    registry.destroy(first)
    assert registry.lookup(first) is None
    assert registry.get_sum(first) == 0.0
    assert registry.get_mean(first) == 0.0
    assert registry.get_std_dev(first) == 0.0
    assert registry.get_count(first) == 0
    assert registry.get_sum(second) == 30.0

def test_destroy_unknown_handle_is_noop(registry):
    h = registry.create()
    registry.append_value(h, 5.0)
    registry.destroy(99)
    registry.destroy(-1)
    assert registry.handles() == [h]
    assert registry.get_sum(h) == 5.0

def test_operations_on_unknown_handle_are_noops(registry, tmp_path):
    out = tmp_path / "stats.txt"
    registry.append_value(7, 1.0)
    registry.read_file(7, tmp_path / "missing.txt")
    registry.write_stats(7, out)
    assert not out.exists()
    assert len(registry) == 0

def test_delegates_to_calculator(registry):
    h = registry.create()
    for v in (2, 4, 4, 4, 5, 5, 7, 9):
        registry.append_value(h, v)
    calc = registry.lookup(h)
    assert registry.get_sum(h) == calc.get_sum() == 40
    assert registry.get_mean(h) == 5.0
    assert registry.get_std_dev(h) == pytest.approx(2.1381, abs=1e-4)
    assert registry.get_count(h) == 8

def test_read_and_write_files(registry, tmp_path):
    src = tmp_path / "in.txt"
    src.write_text("1 2 3\n4 5")
    out = tmp_path / "out.txt"
    h = registry.create()
    registry.read_file(h, src)
    registry.write_stats(h, out)
    assert registry.get_count(h) == 5
    assert out.read_text().splitlines()[0] == "Count: 5"

def test_failures_are_swallowed_and_logged(registry, tmp_path, caplog):
    bad = tmp_path / "bad.txt"
    bad.write_text("1 2 x")
    h = registry.create()
    with caplog.at_level(logging.WARNING, logger="statscalc.services.registry"):
        registry.read_file(h, tmp_path / "missing.txt")
        registry.read_file(h, bad)
        assert registry.get_mean(h) == 0.0
        registry.write_stats(h, tmp_path / "no-such-dir" / "out.txt")
        registry.get_sum(42)
    assert registry.get_count(h) == 0
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 5
    assert any("'x'" in m for m in messages)
    assert any("unknown handle=42" in m for m in messages)

def test_registries_are_independent():
    one, two = HandleRegistry(), HandleRegistry()
    h1 = one.create()
    h2 = two.create()
    assert h1 == h2 == 0
    one.append_value(h1, 1.0)
    assert two.get_sum(h2) == 0.0
    assert 0 in one and list(two) == [0]

def test_overflowing_values_do_not_raise(registry):
    h = registry.create()
    registry.append_value(h, 1e200)
    registry.append_value(h, -1e200)
    assert registry.get_sum(h) == 0.0
    assert registry.get_std_dev(h) == float("inf")
    other = registry.create()
    registry.append_value(other, 1e308)
    registry.append_value(other, 1e308)
    assert registry.get_sum(other) == float("inf")

def test_undecodable_file_is_swallowed(registry, tmp_path, caplog):
    path = tmp_path / "binary.dat"
    path.write_bytes(b"1 2 \xff\xfe 3")
    h = registry.create()
    with caplog.at_level(logging.WARNING, logger="statscalc.services.registry"):
        registry.read_file(h, path)
    assert registry.get_count(h) == 0
    assert "utf-8" in caplog.records[0].getMessage()

def test_unconvertible_values_are_swallowed(registry):
    h = registry.create()
    registry.append_value(h, "abc")
    registry.append_value(h, 10 ** 400)
    registry.append_value(h, 2.0)
    assert registry.get_count(h) == 1
    assert registry.get_sum(h) == 2.0

def test_write_stats_with_overflowing_values(registry, tmp_path):
    out = tmp_path / "out.txt"
    h = registry.create()
    registry.append_value(h, 1e308)
    registry.append_value(h, 1e308)
    registry.write_stats(h, out)
    assert out.read_text().splitlines()[1] == "Sum: inf"
