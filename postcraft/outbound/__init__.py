# postcraft/outbound/__init__.py
from .messenger import MessengerClient, MessengerError, SendResult
from .publisher import PagePublisher, PublishResult
