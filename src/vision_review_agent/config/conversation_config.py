"""
Conversation Management Configuration
Handles per-agent context management for the vision and review agents.
"""

import logging
from strands.agent.conversation_manager import (
    ConversationManager,
    SlidingWindowConversationManager,
)

logger = logging.getLogger(__name__)

class ConversationConfig:
    """Configuration for conversation management across agents."""

    # Default window sizes for different agent types
    DEFAULT_WINDOW_SIZES = {
        "vision": 20,   # Image plus a few rounds of critique
        "review": 20,
        "default": 40
    }

    @classmethod
    def create_conversation_manager(cls, agent_type: str = "default") -> ConversationManager:
        """
        Create a sliding-window conversation manager sized for an agent type.

        Args:
            agent_type: Type of agent (vision, review); unknown types get the default window

        Returns:
            SlidingWindowConversationManager instance
        """
        window_size = cls.DEFAULT_WINDOW_SIZES.get(
            agent_type.lower(),
            cls.DEFAULT_WINDOW_SIZES["default"]
        )

        logger.debug(f"Creating SlidingWindowConversationManager for {agent_type} with window_size={window_size}")
        return SlidingWindowConversationManager(window_size=window_size)

def describe_conversation_manager(conversation_manager: ConversationManager) -> str:
    """
    Describe a conversation manager for status output and logs.

    Args:
        conversation_manager: The conversation manager instance

    Returns:
        Manager class name, with its window size when it has one
    """
    manager_type = type(conversation_manager).__name__

    if isinstance(conversation_manager, SlidingWindowConversationManager):
        window_size = getattr(conversation_manager, 'window_size', 'unknown')
        return f"{manager_type} (window_size={window_size})"
    return manager_type
