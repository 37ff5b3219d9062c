from raxkit.types import (
    Command,
    ConsenseCutoff,
    DataType,
    ParamValue,
    RaxmlError,
    StartingTree,
)


def test_error_message_returned():
    err = RaxmlError("Incompatible tree!")
    assert err.message() == "Incompatible tree!"
    assert str(err) == "Incompatible tree!"


def test_error_message_keeps_format_characters():
    err = RaxmlError("50% of %s done")
    assert err.message() == "50% of %s done"
    assert str(err) == "50% of %s done"


def test_error_message_is_stable_across_calls():
    err = RaxmlError("found 3 items")
    assert err.message() == "found 3 items"
    assert err.message() == "found 3 items"
    assert str(err) == err.message()


def test_param_value_names():
    assert str(ParamValue.ML) == "ML"
    assert str(ParamValue.empirical) == "empirical"
    assert ParamValue(2) is ParamValue.user


def test_consense_cutoff_values():
    assert ConsenseCutoff(50) is ConsenseCutoff.MR
    assert ConsenseCutoff(100) is ConsenseCutoff.strict
    assert ConsenseCutoff.MRE < ConsenseCutoff.MR < ConsenseCutoff.strict


def test_enum_lookup_by_value():
    assert Command(0) is Command.none
    assert DataType(1) is DataType.dna
    start_trees = {StartingTree.random: 10, StartingTree.parsimony: 10}
    assert sum(start_trees.values()) == 20