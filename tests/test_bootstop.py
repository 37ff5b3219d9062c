import pytest

from raxkit.bootstop import BootstopCheckMRE, compatible_splits

TREE_A = [{1, 2}, {4, 5}, {3, 4, 5}]
TREE_B = [{2, 3}, {4, 5}, {1, 4, 5}]


def test_compatible_nested_splits():
    assert compatible_splits(0b00011, 0b00111, 5)


def test_incompatible_overlapping_splits():
    assert not compatible_splits(0b0110, 0b0011, 4)


def test_compatible_is_symmetric():
    for a in range(16):
        for b in range(16):
            assert compatible_splits(a, b, 4) == compatible_splits(b, a, 4)


def test_not_converged_without_trees():
    check = BootstopCheckMRE(10, 0.03, 100)
    assert check.converged(1) is False
    assert check.num_bs_trees() == 0


def test_identical_trees_converge():
    check = BootstopCheckMRE(10, 0.03, 50)
    for _ in range(10):
        check.add_bootstrap_tree(TREE_A, 6)
    assert check.num_bs_trees() == 10
    assert check.converged(42) is True
    assert check.avg_wrf() == 0.0
    assert check.num_better() == 50


def test_max_trees_limit():
    check = BootstopCheckMRE(2, 0.03, 10)
    check.add_bootstrap_tree(TREE_A, 6)
    check.add_bootstrap_tree(TREE_B, 6)
    with pytest.raises(RuntimeError):
        check.add_bootstrap_tree(TREE_A, 6)


def test_set_max_trees_only_before_adding():
    check = BootstopCheckMRE(5, 0.03, 10)
    check.set_max_bs_trees(7)
    assert check.max_bs_trees() == 7
    check.add_bootstrap_tree(TREE_A, 6)
    check.set_max_bs_trees(3)
    assert check.max_bs_trees() == 7


def test_mismatched_tip_count_rejected():
    check = BootstopCheckMRE(5, 0.03, 10)
    check.add_bootstrap_tree(TREE_A, 6)
    with pytest.raises(ValueError):
        check.add_bootstrap_tree(TREE_A, 7)


def test_mre_skips_incompatible_low_support_splits():
    check = BootstopCheckMRE(8, 0.03, 10)
    for _ in range(4):
        check.add_bootstrap_tree(TREE_A, 6)
        check.add_bootstrap_tree(TREE_B, 6)
    splits = check.all_splits()
    assert len(splits) == 5
    support = [2, 4, 1, 2, 2]
    result = check.mre(splits, support)
    assert result == [0, 1, 2]
    assert sorted(splits) == [0, 1, 2, 3, 4]


def test_wrf_distance_identical_sets_is_zero():
    check = BootstopCheckMRE(8, 0.03, 10)
    assert check.consensus_wrf_distance([0, 1], [0, 1], [3, 4], [3, 4]) == 0.0


def test_wrf_distance_symmetry_and_value():
    check = BootstopCheckMRE(8, 0.03, 10)
    s1 = [3, 4, 0]
    s2 = [0, 1, 5]
    d12 = check.consensus_wrf_distance([0, 1], [1, 2], s1, s2)
    d21 = check.consensus_wrf_distance([1, 2], [0, 1], s2, s1)
    assert d12 == d21
    assert d12 == 11.0


def test_convergence_statistics_bounds():
    check = BootstopCheckMRE(20, 0.03, 30)
    for i in range(20):
        check.add_bootstrap_tree(TREE_A if i % 3 else TREE_B, 6)
    check.converged(7)
    assert 0 <= check.num_better() <= 30
    assert check.avg_wrf() >= 0.0
    assert check.avg_pct() >= 0.0


def test_convergence_is_deterministic_for_seed():
    results = []
    for _ in range(2):
        check = BootstopCheckMRE(20, 0.03, 30)
        for i in range(20):
            check.add_bootstrap_tree(TREE_A if i % 2 else TREE_B, 6)
        results.append((check.converged(3), check.avg_wrf(), check.num_better()))

    assert results[0] == results[1]
    assert 0 <= results[0][2] <= 30
    assert results[0][1] >= 0.0