from __future__ import annotations

import queue

import pytest

from staff_attendance.core.enums import NotificationType
from staff_attendance.core.exceptions import NotFoundError, ValidationError
from staff_attendance.notifications.feed import ChangeFeed
from staff_attendance.notifications.service import NotificationService

from conftest import InMemoryNotifications


@pytest.fixture
def service(notifications_repo, feed):
    svc = NotificationService(notifications_repo, feed)
    svc.notify(1, "Welcome", "Hello there", NotificationType.SYSTEM)
    svc.notify(1, "Checked in", "You checked in at 09:00.", NotificationType.SUCCESS)
    svc.notify(1, "Reminder", "Submit your timesheet")
    svc.notify(2, "Other", "Someone else's")
    return svc


def test_list_is_newest_first_and_scoped_to_user(service):
    titles = [n.title for n in service.list(1)]
    assert titles == ["Reminder", "Checked in", "Welcome"]


def test_filters(service):
    first = service.list(1)[-1]
    service.mark_read(1, first.notification_id)

    assert [n.title for n in service.list(1, "read")] == ["Welcome"]
    assert [n.title for n in service.list(1, "unread")] == ["Reminder", "Checked in"]
    with pytest.raises(ValidationError):
        service.list(1, "starred")


def test_mark_all_read_leaves_nothing_unread(service):
    changed = service.mark_all_read(1)

    counts = service.counts(1)
    assert changed == 3
    assert (counts.total, counts.unread, counts.read) == (3, 0, 3)
    assert all(n.is_read for n in service.list(1))
    assert service.counts(2).unread == 1


def test_mark_all_read_twice_changes_nothing(service):
    service.mark_all_read(1)
    assert service.mark_all_read(1) == 0


def test_cannot_touch_other_users_notifications(service):
    foreign = service.list(2)[0]

    with pytest.raises(NotFoundError):
        service.mark_read(1, foreign.notification_id)
    with pytest.raises(NotFoundError):
        service.delete(1, foreign.notification_id)


def test_delete(service):
    target = service.list(1)[0]
    service.delete(1, target.notification_id)

    assert target.notification_id not in [n.notification_id for n in service.list(1)]


def test_notify_requires_title_and_message(service):
    with pytest.raises(ValidationError):
        service.notify(1, "", "body")


def test_every_mutation_is_published(notifications_repo, feed):
    svc = NotificationService(notifications_repo, feed)
    q = feed.subscribe(1)

    nid = svc.notify(1, "Hi", "There")
    svc.mark_read(1, nid)
    svc.notify(1, "Again", "There")
    svc.mark_all_read(1)
    svc.delete(1, nid)

    events = [q.get_nowait()["event"] for _ in range(5)]
    assert events == ["INSERT", "UPDATE", "INSERT", "UPDATE", "DELETE"]
    with pytest.raises(queue.Empty):
        q.get_nowait()


def test_feed_is_scoped_by_user():
    feed = ChangeFeed()
    mine = feed.subscribe(1)
    theirs = feed.subscribe(2)

    assert feed.publish(1, {"table": "notifications", "event": "INSERT"}) == 1
    assert mine.get_nowait()["event"] == "INSERT"
    assert theirs.empty()


def test_feed_unsubscribe():
    feed = ChangeFeed()
    q = feed.subscribe(1)
    feed.unsubscribe(1, q)

    assert feed.subscriber_count(1) == 0
    assert feed.publish(1, {"event": "INSERT"}) == 0


def test_stream_frames_and_cleanup():
    feed = ChangeFeed()
    q = feed.subscribe(7)
    stream = feed.stream(7, q=q, keepalive_seconds=0.01)

    assert next(stream) == ": connected\n\n"
    feed.publish(7, {"table": "notifications", "event": "DELETE"})
    assert next(stream) == 'data: {"table": "notifications", "event": "DELETE"}\n\n'
    assert next(stream) == ": keepalive\n\n"

    stream.close()
    assert feed.subscriber_count(7) == 0


def test_service_works_with_default_feed():
    svc = NotificationService(InMemoryNotifications())
    q = svc.feed.subscribe(1)
    svc.notify(1, "Hi", "There")
    assert q.get_nowait()["table"] == "notifications"
