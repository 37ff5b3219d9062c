import pytest

from raxkit.partition_assignment import (
    PartitionAssignment,
    PartitionAssignmentStats,
    PartitionRange,
    format_assignment_list,
)


def make_assignment(ranges):
    pa = PartitionAssignment()
    for part_id, start, length, weight in ranges:
        pa.assign_sites(part_id, start, length, weight)
    return pa


def test_new_assignment_is_empty():
    pa = PartitionAssignment()
    assert pa.empty()
    assert pa.num_parts() == 0
    assert pa.length() == 0
    assert pa.weight() == 0.0
    assert list(pa) == []


def test_assign_sites_accumulates_length_and_weight():
    ranges = [(0, 0, 10, 2.0), (1, 5, 4, 1.0), (2, 3, 7, 16.0)]
    pa = make_assignment(ranges)
    assert not pa.empty()
    assert pa.num_parts() == len(ranges)
    assert len(pa) == len(ranges)
    assert pa.length() == sum(r[2] for r in ranges)
    assert pa.weight() == sum(r[2] * r[3] for r in ranges)


def test_default_site_weight_is_one():
    pa = PartitionAssignment()
    pa.assign_sites(3, 0, 25)
    assert pa.weight() == pa.length()
    assert pa[0].per_site_weight == 1.0


def test_iteration_and_indexing_keep_order():
    ranges = [(4, 0, 3, 1.0), (1, 2, 5, 2.0)]
    pa = make_assignment(ranges)
    got = [(r.part_id, r.start, r.length, r.per_site_weight) for r in pa]
    assert got == ranges
    assert pa[1].part_id == ranges[1][0]


def test_getitem_out_of_range():
    pa = make_assignment([(0, 0, 3, 1.0)])
    assert pa[0].length == 3
    with pytest.raises(IndexError):
        pa[5]
    assert pa.num_parts() == 1


def test_find():
    pa = make_assignment([(0, 0, 3, 1.0), (7, 2, 5, 2.0)])
    found = pa.find(7)
    assert found is pa[1]
    assert pa.find(42) is None


def test_range_master_and_weight():
    assert PartitionRange(0, 0, 10).master()
    assert not PartitionRange(0, 4, 10).master()
    r = PartitionRange(1, 0, 12, 3.0)
    assert r.weight() == r.length * r.per_site_weight


def test_str_format():
    pa = make_assignment([(0, 0, 159, 16.0), (2, 10, 20, 1.0)])
    lines = str(pa).splitlines()
    assert lines[0] == "part#\tstart\tlength"
    assert lines[1:] == ["0\t0\t159", "2\t10\t20"]


def test_stats_min_max_totals():
    pal = [
        make_assignment([(0, 0, 10, 2.0)]),
        make_assignment([(0, 10, 5, 2.0), (1, 0, 3, 4.0)]),
    ]
    stats = PartitionAssignmentStats(pal)
    assert stats.num_cores == len(pal)
    assert stats.total_parts == pal[0].num_parts() + pal[1].num_parts()
    assert stats.total_sites == pal[0].length() + pal[1].length()
    assert stats.total_weight == int(pal[0].weight() + pal[1].weight())
    assert stats.min_thread_parts == pal[0].num_parts()
    assert stats.max_thread_parts == pal[1].num_parts()
    assert stats.min_thread_sites == pal[1].length()
    assert stats.max_thread_sites == pal[0].length()
    assert stats.min_thread_weight == min(pa.weight() for pa in pal)
    assert stats.max_thread_weight == max(pa.weight() for pa in pal)


def test_stats_str():
    pal = [make_assignment([(0, 0, 10, 2.5)])]
    stats = PartitionAssignmentStats(pal)
    assert str(stats) == (f"max. partitions/sites/weight per thread: 1 / "
                          f"{pal[0].length()} / {int(pal[0].weight())}")


def test_format_assignment_list():
    pal = [
        make_assignment([(0, 0, 10, 2.0)]),
        make_assignment([(1, 3, 4, 1.5)]),
    ]
    lines = format_assignment_list(pal).splitlines()
    assert lines[0] == "thread#\tpart#\tstart\tlength\tweight"
    assert lines[1] == f"0\t0\t0\t10\t{int(pal[0].weight())}"
    assert lines[2] == ""
    assert lines[3] == f"1\t1\t3\t4\t{int(pal[1].weight())}"
    assert lines[4] == ""