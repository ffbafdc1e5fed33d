import pytest

from fsnotice.event_kind import (
    AccessKind,
    AccessMode,
    CreateKind,
    DataChange,
    EventKind,
    Flag,
    MetadataKind,
    ModifyKind,
    RemoveKind,
    RenameMode,
    kind_from_json,
    kind_to_json,
)


def test_kinds_are_debuggable():
    assert repr(EventKind.ANY) == "Any"
    assert (
        repr(EventKind.access(AccessKind.open(AccessMode.EXECUTE)))
        == "Access(Open(Execute))"
    )
    assert repr(EventKind.remove(RemoveKind.OTHER)) == "Remove(Other)"
    assert Flag.RESCAN.label == "Rescan"


def test_modify_name_repr():
    assert repr(EventKind.modify(ModifyKind.name(RenameMode.TO))) == "Modify(Name(To))"
    assert (
        repr(EventKind.modify(ModifyKind.metadata(MetadataKind.ACCESS_TIME)))
        == "Modify(Metadata(AccessTime))"
    )


def test_simple_kinds_serialize():
    assert kind_to_json(EventKind.ANY) == "any"
    assert kind_to_json(EventKind.OTHER) == "other"


def test_simple_kinds_deserialize():
    assert kind_from_json("any") == EventKind.ANY
    assert kind_from_json("other") == EventKind.OTHER


ACCESS_CASES = [
    (AccessKind.ANY, {"access": {"kind": "any"}}),
    (AccessKind.READ, {"access": {"kind": "read"}}),
    (AccessKind.open(AccessMode.ANY), {"access": {"kind": "open", "mode": "any"}}),
    (AccessKind.open(AccessMode.EXECUTE), {"access": {"kind": "open", "mode": "execute"}}),
    (AccessKind.open(AccessMode.READ), {"access": {"kind": "open", "mode": "read"}}),
    (AccessKind.close(AccessMode.WRITE), {"access": {"kind": "close", "mode": "write"}}),
    (AccessKind.close(AccessMode.OTHER), {"access": {"kind": "close", "mode": "other"}}),
    (AccessKind.OTHER, {"access": {"kind": "other"}}),
]


@pytest.mark.parametrize("kind,expected", ACCESS_CASES)
def test_access_events_are_serializable(kind, expected):
    assert kind_to_json(EventKind.access(kind)) == expected


CREATE_CASES = [
    (CreateKind.ANY, {"create": {"kind": "any"}}),
    (CreateKind.FILE, {"create": {"kind": "file"}}),
    (CreateKind.FOLDER, {"create": {"kind": "folder"}}),
    (CreateKind.OTHER, {"create": {"kind": "other"}}),
]


@pytest.mark.parametrize("kind,expected", CREATE_CASES)
def test_create_events_are_serializable(kind, expected):
    assert kind_to_json(EventKind.create(kind)) == expected


MODIFY_CASES = [
    (ModifyKind.ANY, {"modify": {"kind": "any"}}),
    (ModifyKind.data(DataChange.ANY), {"modify": {"kind": "data", "mode": "any"}}),
    (ModifyKind.data(DataChange.SIZE), {"modify": {"kind": "data", "mode": "size"}}),
    (ModifyKind.data(DataChange.CONTENT), {"modify": {"kind": "data", "mode": "content"}}),
    (ModifyKind.data(DataChange.OTHER), {"modify": {"kind": "data", "mode": "other"}}),
    (ModifyKind.metadata(MetadataKind.ANY), {"modify": {"kind": "metadata", "mode": "any"}}),
    (
        ModifyKind.metadata(MetadataKind.ACCESS_TIME),
        {"modify": {"kind": "metadata", "mode": "access-time"}},
    ),
    (
        ModifyKind.metadata(MetadataKind.WRITE_TIME),
        {"modify": {"kind": "metadata", "mode": "write-time"}},
    ),
    (
        ModifyKind.metadata(MetadataKind.PERMISSIONS),
        {"modify": {"kind": "metadata", "mode": "permissions"}},
    ),
    (
        ModifyKind.metadata(MetadataKind.OWNERSHIP),
        {"modify": {"kind": "metadata", "mode": "ownership"}},
    ),
    (
        ModifyKind.metadata(MetadataKind.EXTENDED),
        {"modify": {"kind": "metadata", "mode": "extended"}},
    ),
    (ModifyKind.metadata(MetadataKind.OTHER), {"modify": {"kind": "metadata", "mode": "other"}}),
    (ModifyKind.name(RenameMode.ANY), {"modify": {"kind": "rename", "mode": "any"}}),
    (ModifyKind.name(RenameMode.TO), {"modify": {"kind": "rename", "mode": "to"}}),
    (ModifyKind.name(RenameMode.FROM), {"modify": {"kind": "rename", "mode": "from"}}),
    (ModifyKind.name(RenameMode.BOTH), {"modify": {"kind": "rename", "mode": "both"}}),
    (ModifyKind.name(RenameMode.OTHER), {"modify": {"kind": "rename", "mode": "other"}}),
    (ModifyKind.OTHER, {"modify": {"kind": "other"}}),
]


@pytest.mark.parametrize("kind,expected", MODIFY_CASES)
def test_modify_events_are_serializable(kind, expected):
    assert kind_to_json(EventKind.modify(kind)) == expected


REMOVE_CASES = [
    (RemoveKind.ANY, {"remove": {"kind": "any"}}),
    (RemoveKind.FILE, {"remove": {"kind": "file"}}),
    (RemoveKind.FOLDER, {"remove": {"kind": "folder"}}),
    (RemoveKind.OTHER, {"remove": {"kind": "other"}}),
]


@pytest.mark.parametrize("kind,expected", REMOVE_CASES)
def test_remove_events_are_serializable(kind, expected):
    assert kind_to_json(EventKind.remove(kind)) == expected


ALL_KINDS = (
    [EventKind.ANY, EventKind.OTHER]
    + [EventKind.access(k) for k, _ in ACCESS_CASES]
    + [EventKind.create(k) for k, _ in CREATE_CASES]
    + [EventKind.modify(k) for k, _ in MODIFY_CASES]
    + [EventKind.remove(k) for k, _ in REMOVE_CASES]
)


@pytest.mark.parametrize("kind", ALL_KINDS, ids=repr)
def test_json_round_trip(kind):
    assert kind_from_json(kind_to_json(kind)) == kind


def test_deserialize_nested():
    data = {"access": {"kind": "open", "mode": "execute"}}
    assert kind_from_json(data) == EventKind.access(AccessKind.open(AccessMode.EXECUTE))
    assert kind_from_json({"remove": {"kind": "other"}}) == EventKind.remove(RemoveKind.OTHER)


@pytest.mark.parametrize(
    "data",
    [
        "bogus",
        {"access": {"kind": "open"}},
        {"access": {"kind": "read", "mode": "read"}},
        {"create": {"kind": "folder", "mode": "any"}},
        {"modify": {"kind": "rename", "mode": "sideways"}},
        {"unknown": {"kind": "any"}},
        {"create": {"kind": "any"}, "remove": {"kind": "any"}},
        {"remove": {}},
        42,
    ],
)
def test_invalid_json_is_rejected(data):
    with pytest.raises(ValueError):
        kind_from_json(data)


def test_predicates():
    assert EventKind.access(AccessKind.READ).is_access()
    assert EventKind.create(CreateKind.FILE).is_create()
    assert EventKind.modify(ModifyKind.ANY).is_modify()
    assert EventKind.remove(RemoveKind.FILE).is_remove()
    assert EventKind.OTHER.is_other()
    assert not EventKind.ANY.is_other()
    assert not EventKind.create(CreateKind.FILE).is_remove()


def test_kinds_are_hashable_and_equal_by_value():
    a = EventKind.modify(ModifyKind.name(RenameMode.FROM))
    b = EventKind.modify(ModifyKind.name(RenameMode.FROM))
    assert a == b
    assert len({a, b, EventKind.ANY}) == 2


def test_invalid_construction_raises():
    with pytest.raises(TypeError):
        AccessKind.open(DataChange.ANY)
    with pytest.raises(ValueError):
        AccessKind("jump")
    with pytest.raises(TypeError):
        EventKind.create(RemoveKind.FILE)
    with pytest.raises(ValueError):
        EventKind("any", CreateKind.FILE)