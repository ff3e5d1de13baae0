from .acts import Acts
from .datasets import Datasets
from .key_value_stores import KeyValueStores
from .logs import Logs
from .request_queues import RequestQueues
from .schedules import Schedules
from .tasks import Tasks
from .users import Users
from .webhook_dispatches import WebhookDispatches
from .webhooks import Webhooks

__all__ = [
    "Acts",
    "Datasets",
    "KeyValueStores",
    "Logs",
    "RequestQueues",
    "Schedules",
    "Tasks",
    "Users",
    "WebhookDispatches",
    "Webhooks",
]
