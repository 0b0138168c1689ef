import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.capabilities import CapabilityTable
from infrastructure.database.metadata import DeclarationMetadataProvider
from schemas.enumeration import (
    ColumnDeclaration,
    ColumnExtra,
    FailurePolicy,
    InvalidHandlerSpec,
    MethodNameConflict,
)
from services.enumeration import AccessorSynthesizer

DOMAIN = ["good", "bad", "ugly"]


def _enum(name, labels=DOMAIN, handles=None):
    return ColumnDeclaration(name=name, data_type="enum", extra=ColumnExtra(labels=list(labels), handles=handles))


def _record_type():
    class _Record:
        def __init__(self, **values):
            for key, value in values.items():
                setattr(self, key, value)

    return _Record


def _setup(*declarations, policy=FailurePolicy.PARTIAL, **kwargs):
    record_type = _record_type()
    metadata = DeclarationMetadataProvider()
    metadata.declare(record_type, *declarations)
    capabilities = CapabilityTable()
    synthesizer = AccessorSynthesizer(metadata, capabilities=capabilities, policy=policy, **kwargs)
    return record_type, metadata, capabilities, synthesizer


def test_default_handles_install_one_predicate_per_value():
    record_type, _, _, synthesizer = _setup(_enum("foo"))

    installed = synthesizer.synthesize(record_type, ["foo"])

    assert [binding.method_name for binding in installed] == ["is_good", "is_bad", "is_ugly"]
    row = record_type(foo="bad")
    assert row.is_bad() is True
    assert row.is_good() is False
    assert row.is_ugly() is False


def test_absent_value_makes_every_predicate_false():
    record_type, _, _, synthesizer = _setup(_enum("foo"))
    synthesizer.synthesize(record_type, ["foo"])

    for row in (record_type(foo=None), record_type()):
        assert not row.is_good()
        assert not row.is_bad()
        assert not row.is_ugly()


def test_predicates_use_exact_string_equality():
    record_type, _, _, synthesizer = _setup(_enum("level", labels=["1", "2"]))
    synthesizer.synthesize(record_type, ["level"])

    assert record_type(level="1").is_1() is True
    assert record_type(level=1).is_1() is False
    assert record_type(level="Good").is_2() is False


def test_disabled_column_installs_nothing():
    record_type, _, capabilities, synthesizer = _setup(_enum("foo", handles=0))

    assert synthesizer.synthesize(record_type, ["foo"]) == []
    assert not hasattr(record_type, "is_good")
    assert capabilities.bindings(record_type) == {}


def test_static_map_installs_only_listed_names():
    record_type, _, _, synthesizer = _setup(_enum("bar", handles={"good_bar": "good", "coyote": "ugly"}))

    synthesizer.synthesize(record_type, ["bar"])

    assert record_type(bar="good").good_bar() is True
    assert record_type(bar="ugly").coyote() is True
    assert not hasattr(record_type, "is_bad")
    assert not hasattr(record_type, "is_good")


def test_generator_skips_omitted_values_and_names_the_rest():
    def handles(value, column, record_type):
        if value == "deprecated":
            return None
        return f"is_{column}_{value}"

    record_type, _, _, synthesizer = _setup(
        _enum("baz", labels=["good", "bad", "deprecated"], handles=handles)
    )

    synthesizer.synthesize(record_type, ["baz"])

    assert record_type(baz="good").is_baz_good() is True
    assert record_type(baz="good").is_baz_bad() is False
    assert not hasattr(record_type, "is_baz_deprecated")


def test_generator_collision_binds_later_value():
    record_type, _, capabilities, synthesizer = _setup(
        _enum("baz", handles=lambda value, column, record_type: "is_ok" if value != "good" else "is_fine")
    )

    synthesizer.synthesize(record_type, ["baz"])

    assert capabilities.bindings(record_type)["is_ok"].value == "ugly"
    assert record_type(baz="ugly").is_ok() is True
    assert record_type(baz="bad").is_ok() is False


def test_generated_names_are_written_back_to_metadata():
    record_type, metadata, _, synthesizer = _setup(
        _enum("foo"),
        _enum("baz", handles=lambda value, column, record_type: None if value == "bad" else f"{column}_{value}"),
    )

    synthesizer.synthesize(record_type, ["foo", "baz"])

    assert metadata.column_info(record_type, "foo").extra.handles == {
        "is_good": "good",
        "is_bad": "bad",
        "is_ugly": "ugly",
    }
    assert metadata.column_info(record_type, "baz").extra.handles == {
        "baz_good": "good",
        "baz_ugly": "ugly",
    }


def test_non_enum_columns_and_structured_specs_are_skipped():
    record_type, _, _, synthesizer = _setup(
        ColumnDeclaration(name="title", data_type="varchar"),
        _enum("foo"),
    )

    installed = synthesizer.synthesize(record_type, ["title", {"data_type": "enum"}, "+foo", ("foo",)])

    assert [binding.column for binding in installed] == ["foo", "foo", "foo"]
    assert record_type(foo="good").is_good() is True


def test_invalid_handles_raise():
    record_type, _, _, synthesizer = _setup(_enum("foo", handles="is_good"))

    with pytest.raises(InvalidHandlerSpec):
        synthesizer.synthesize(record_type, ["foo"])


def test_conflict_with_existing_attribute_raises():
    record_type, _, _, synthesizer = _setup(_enum("foo"))
    record_type.is_bad = lambda self: "mine"

    with pytest.raises(MethodNameConflict) as excinfo:
        synthesizer.synthesize(record_type, ["foo"])

    assert excinfo.value.qualified_name.endswith("._Record.is_bad")
    assert str(excinfo.value).endswith("is already defined")
    assert record_type(foo="bad").is_bad() == "mine"


def test_conflict_stops_remaining_columns_and_keeps_earlier_installs():
    record_type, _, capabilities, synthesizer = _setup(
        _enum("foo"),
        _enum("bar", labels=["good", "fair"]),
        _enum("qux", labels=["late"]),
    )

    with pytest.raises(MethodNameConflict):
        synthesizer.synthesize(record_type, ["foo", "bar", "qux"])

    assert set(capabilities.bindings(record_type)) == {"is_good", "is_bad", "is_ugly"}
    assert not hasattr(record_type, "is_late")
    assert not hasattr(record_type, "is_fair")


def test_atomic_policy_installs_nothing_on_conflict():
    record_type, metadata, capabilities, synthesizer = _setup(
        _enum("foo"),
        _enum("bar", labels=["good", "fair"]),
        policy=FailurePolicy.ATOMIC,
    )

    with pytest.raises(MethodNameConflict):
        synthesizer.synthesize(record_type, ["foo", "bar"])

    assert capabilities.bindings(record_type) == {}
    assert not hasattr(record_type, "is_good")
    assert metadata.column_info(record_type, "foo").extra.handles is None


def test_atomic_policy_installs_whole_batch():
    record_type, _, capabilities, synthesizer = _setup(
        _enum("foo"),
        _enum("bar", labels=["fair"]),
        policy="atomic",
    )

    synthesizer.synthesize(record_type, ["foo", "bar"])

    assert set(capabilities.bindings(record_type)) == {"is_good", "is_bad", "is_ugly", "is_fair"}


def test_empty_value_policy_is_configurable():
    record_type, _, _, synthesizer = _setup(
        _enum("foo", labels=["", "set"], handles={"is_blank": "", "is_set": "set"}),
        allow_empty_values=True,
    )

    synthesizer.synthesize(record_type, ["foo"])

    assert record_type(foo="").is_blank() is True
    assert record_type(foo=None).is_blank() is False


def test_racing_synthesizers_cannot_overwrite_each_other():
    record_type = _record_type()
    capabilities = CapabilityTable()
    barrier = threading.Barrier(2)
    errors = []

    def run(column):
        metadata = DeclarationMetadataProvider()
        metadata.declare(record_type, _enum(column, labels=["shared"]))
        synthesizer = AccessorSynthesizer(metadata, capabilities=capabilities, policy=FailurePolicy.PARTIAL)
        barrier.wait()
        try:
            synthesizer.synthesize(record_type, [column])
        except MethodNameConflict as exc:
            errors.append(exc)

    threads = [threading.Thread(target=run, args=(column,)) for column in ("first", "second")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(errors) == 1
    winner = capabilities.bindings(record_type)["is_shared"].column
    assert record_type(**{winner: "shared"}).is_shared() is True
