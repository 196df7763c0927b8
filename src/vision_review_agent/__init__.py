"""Vision agent and review agent conversation on Amazon Bedrock."""

from .config.config import AgentConfig, ChatConfig
from .conversation import ApprovalTerminationPolicy, ConversationDriver, Message, TerminationReason
from .exceptions import GenerationFailure, ImageValidationError, InvalidConfiguration

__all__ = [
    'AgentConfig',
    'ChatConfig',
    'ApprovalTerminationPolicy',
    'ConversationDriver',
    'Message',
    'TerminationReason',
    'GenerationFailure',
    'ImageValidationError',
    'InvalidConfiguration'
]
