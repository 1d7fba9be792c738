from pir_viz.core.records import CanonicalRecord, RecordStore, clamp_trigger


def test_trigger_clamped_on_construction():
    assert CanonicalRecord(1, 0, 9).trigger == 5
    assert CanonicalRecord(1, 0, -2).trigger == 0
    assert clamp_trigger(3) == 3


def test_is_valid():
    assert CanonicalRecord(1.0, 2.0).is_valid
    assert not CanonicalRecord(float("nan"), 2.0).is_valid
    assert not CanonicalRecord(1.0, float("inf")).is_valid


def test_add_delete_clear_bump_revision(store):
    rev = store.revision
    index = store.add_record()
    assert index == 3
    assert store[3] == CanonicalRecord(3.0, 0.0, 5)
    assert store.revision == rev + 1

    store.delete_record(0)
    assert len(store) == 3
    assert store[0].distance == 5.5
    assert store.revision == rev + 2

    store.delete_record(99)
    assert store.revision == rev + 2

    store.clear()
    assert len(store) == 0
    assert store.projection is None


def test_update_field_parses_and_clamps(store):
    assert store.update_field(0, 'distance', "4.25")
    assert store[0].distance == 4.25
    assert store.update_field(0, 'angle', "not a number")
    assert store[0].angle == 0.0
    assert store.update_field(0, 'angle', "nan")
    assert store[0].angle == 0.0
    assert store.update_field(1, 'trigger', 8)
    assert store[1].trigger == 5
    assert store.update_field(1, 'trigger', "x")
    assert store[1].trigger == 0


def test_update_field_rejects_bad_target(store):
    rev = store.revision
    assert not store.update_field(10, 'distance', 1)
    assert not store.update_field(0, 'colour', 1)
    assert store.revision == rev


def test_latest_import_wins(store):
    first = store.begin_import()
    second = store.begin_import()

    assert store.accept_import(second, [CanonicalRecord(2, 2, 2)])
    assert not store.accept_import(first, [CanonicalRecord(9, 9, 9)])
    assert store.records == [CanonicalRecord(2, 2, 2)]


def test_valid_records_filters_non_finite():
    store = RecordStore([CanonicalRecord(1, 1), CanonicalRecord(float("nan"), 1)])
    assert store.valid_records() == [CanonicalRecord(1, 1)]
