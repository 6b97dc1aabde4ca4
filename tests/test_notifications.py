from notifications import NotificationAction, NotificationCenter, NotificationRegistry, Severity, badge_label


def test_add_is_newest_first_and_unread():
    center = NotificationCenter()
    first = center.add("Deploy", "Version 2 ute")
    second = center.add("Fel", "Bygget misslyckades", severity=Severity.ERROR)

    assert [n.id for n in center.items] == [second.id, first.id]
    assert center.unread_count == 2
    assert len(first.id) == 7
    assert center.items[0].severity is Severity.ERROR


def test_mark_as_read_and_mark_all():
    center = NotificationCenter()
    a = center.add("A", "a")
    center.add("B", "b")

    assert center.mark_as_read(a.id) is True
    assert center.unread_count == 1
    assert center.mark_as_read("missing") is False

    assert center.mark_all_as_read() == 1
    assert center.unread_count == 0


def test_remove_and_clear():
    center = NotificationCenter()
    a = center.add("A", "a")
    center.add("B", "b")

    assert center.remove(a.id) is True
    assert center.remove(a.id) is False
    assert len(center.items) == 1

    center.clear()
    assert center.items == []


def test_to_dict_serializes_action():
    center = NotificationCenter()
    center.add("Nytt ärende", "Kund väntar", action=NotificationAction(label="Öppna", page="dashboardTickets"))
    data = center.to_dict()
    assert data["unread_count"] == 1
    assert data["notifications"][0]["action"] == {"label": "Öppna", "page": "dashboardTickets"}
    assert data["notifications"][0]["severity"] == "info"


def test_registry_isolates_sessions():
    registry = NotificationRegistry()
    registry.for_session("a").add("Hej", "a")

    assert registry.for_session("b").items == []
    assert registry.for_session("a").unread_count == 1
    assert len(registry) == 2

    assert registry.discard("a") is True
    assert registry.discard("a") is False
    assert registry.for_session("a").items == []


def test_center_drops_oldest_past_capacity():
    center = NotificationCenter(max_items=3)
    ids = [center.add(f"N{i}", "x").id for i in range(5)]

    assert [n.id for n in center.items] == ids[:1:-1]
    assert center.unread_count == 3


def test_registry_get_never_creates():
    registry = NotificationRegistry()

    assert registry.get("unknown") is None
    assert len(registry) == 0


def test_registry_evicts_least_recently_used():
    registry = NotificationRegistry(max_sessions=2)
    registry.for_session("a").add("A", "a")
    registry.for_session("b")
    registry.get("a")
    registry.for_session("c")

    assert len(registry) == 2
    assert registry.get("b") is None
    assert registry.get("a").unread_count == 1


def test_badge_label():
    assert badge_label(0) == "0"
    assert badge_label(9) == "9"
    assert badge_label(10) == "9+"
