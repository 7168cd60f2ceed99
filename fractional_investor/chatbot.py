from typing import Optional

from fractional_investor.config import Settings
from fractional_investor.conversation_manager import ConversationManager
from fractional_investor.text_generator import TextGenerator


class Chatbot:
    """
    Programmatic front-end over :class:`ConversationManager`: one call per
    user turn, plus read access to the current allocation.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        generator: Optional[TextGenerator] = None,
    ):
        self._manager = ConversationManager(settings=settings, generator=generator)

    def start(self) -> str:
        """Greeting shown before the first user turn."""
        return self._manager.start()

    def send(self, message: str) -> str:
        """Process one user turn and return the reply text."""
        return self._manager.handle_message(message)

    @property
    def allocation(self):
        """Current allocation, or None before the first successful run."""
        return self._manager.context.allocation

    @property
    def is_done(self) -> bool:
        return self._manager.context.is_complete()
