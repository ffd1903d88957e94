"""
Event wiring. Every listener in the system is subscribed here.
"""
from shared.events.dispatcher import EventDispatcher
from shared.events.events import BillStatusChanged, MessageSent, SubmissionCreated

from services.analytics.src.listeners import AnalyticsListeners
from services.notifications.src.listeners import NotificationListeners


def build_event_dispatcher(notification_queue=None, analytics_queue=None) -> EventDispatcher:
    notifications = NotificationListeners(queue=notification_queue)
    analytics = AnalyticsListeners(queue=analytics_queue)

    events = EventDispatcher()
    events.subscribe(BillStatusChanged, notifications.on_bill_status_changed)
    events.subscribe(BillStatusChanged, analytics.on_bill_status_changed)
    events.subscribe(MessageSent, notifications.on_message_sent)
    events.subscribe(SubmissionCreated, analytics.on_submission_created)
    return events
