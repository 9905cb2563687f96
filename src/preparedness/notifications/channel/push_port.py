"""Push channel port — abstract interface for the external pub/sub relay."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    """Abstract interface for push relay adapters."""

    @abstractmethod
    def send(
        self,
        topic: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        """Publish a notification on a recipient's topic.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
