from abc import ABC, abstractmethod


class BaseNotifier(ABC):
    """Contract for operator notification channels."""

    @abstractmethod
    def send(self, subject: str, body: str) -> None:
        """Deliver one notice to the configured operator.

        Raises:
            NotificationError: if the notice could not be delivered.
        """
