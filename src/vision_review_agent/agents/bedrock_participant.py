"""
Bedrock Participant
Conversation participant backed by a Strands agent over an Amazon Bedrock model.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from botocore.exceptions import BotoCoreError, ClientError
from strands import Agent
from strands.types.exceptions import (
    ContextWindowOverflowException,
    EventLoopException,
    MaxTokensReachedException,
    ModelThrottledException,
)

from ..config.conversation_config import ConversationConfig
from ..conversation.messages import (
    AuthorRole,
    ImageContent,
    Message,
    MixedContent,
    TextContent,
    content_items,
)
from ..exceptions import GenerationFailure
from ..utils.images import to_bedrock_image
from .participant import StreamHandler

logger = logging.getLogger(__name__)

DEFAULT_CONTINUATION_PROMPT = "Please continue."


def to_bedrock_messages(
    transcript: Sequence[Message], speaker: str
) -> List[Dict[str, Any]]:
    """
    Convert a transcript into Bedrock Converse messages as ``speaker`` sees them.

    The speaker's own messages become ``assistant`` turns. Everything else is a
    ``user`` turn, with other agents' text prefixed by their name. Consecutive
    turns with the same role are merged because Bedrock requires alternation.

    Args:
        transcript: Conversation so far
        speaker: Name of the participant about to speak

    Returns:
        List of {"role": ..., "content": [blocks]} dicts
    """
    messages: List[Dict[str, Any]] = []
    for message in transcript:
        own = message.role == AuthorRole.ASSISTANT and message.author_name == speaker
        role = "assistant" if own else "user"

        if message.role == AuthorRole.SYSTEM:
            prefix = "[System]: "
        elif not own and message.author_name:
            prefix = f"[{message.author_name}]: "
        else:
            prefix = ""

        blocks = []
        for item in content_items(message.content):
            if isinstance(item, TextContent):
                if item.text.strip():
                    blocks.append({"text": f"{prefix}{item.text}"})
            elif isinstance(item, ImageContent):
                blocks.append(to_bedrock_image(item))
        if not blocks:
            continue

        if messages and messages[-1]["role"] == role:
            messages[-1]["content"].extend(blocks)
        else:
            messages.append({"role": role, "content": blocks})
    return messages


def _result_text(result) -> Optional[str]:
    """Pull the final assistant text out of a Strands AgentResult."""
    if result is None:
        return None
    message = getattr(result, "message", None) or {}
    texts = [block["text"] for block in message.get("content", []) if "text" in block]
    if not texts:
        return None
    return "".join(texts)


class BedrockParticipant:
    """
    A named participant whose replies come from a Strands agent.

    A fresh ``strands.Agent`` is built for every turn from the transcript, so
    the participant holds no conversation state of its own.
    """

    def __init__(
        self,
        name: str,
        system_prompt: str,
        model,
        agent_type: str = "default",
        stream_handler: Optional[StreamHandler] = None,
        continuation_prompt: str = DEFAULT_CONTINUATION_PROMPT,
        agent_factory=Agent,
    ):
        """
        Initialize the participant.

        Args:
            name: Participant identity used for turn-taking and approval checks
            system_prompt: Instructions for the agent
            model: Strands model (normally a BedrockModel)
            agent_type: Key for ConversationConfig window sizes
            stream_handler: Receives (name, chunk) for each streamed text chunk
            continuation_prompt: User turn sent when the speaker also wrote the
                last message
            agent_factory: Callable building the Strands agent
        """
        self.name = name
        self.system_prompt = system_prompt
        self.model = model
        self.agent_type = agent_type
        self.stream_handler = stream_handler
        self.continuation_prompt = continuation_prompt
        self._agent_factory = agent_factory

    def build_request(self, transcript: Sequence[Message]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Split the transcript into agent history and the prompt for this turn.

        Returns:
            (history messages, prompt content blocks)
        """
        messages = to_bedrock_messages(transcript, self.name)

        if messages and messages[-1]["role"] == "user":
            prompt = messages.pop()["content"]
        else:
            prompt = [{"text": self.continuation_prompt}]

        if messages and messages[0]["role"] == "assistant":
            messages.insert(0, {"role": "user", "content": [{"text": self.continuation_prompt}]})
        return messages, prompt

    def _create_agent(self, history):
        return self._agent_factory(
            model=self.model,
            system_prompt=self.system_prompt,
            messages=history,
            tools=[],
            callback_handler=None,
            conversation_manager=ConversationConfig.create_conversation_manager(self.agent_type),
            name=self.name,
        )

    async def generate_next(self, transcript: Sequence[Message], speaker: str) -> Message:
        """
        Stream the next reply for this participant.

        Args:
            transcript: Conversation so far
            speaker: Name the driver selected; must be this participant

        Returns:
            Assistant Message attributed to this participant

        Raises:
            GenerationFailure: If Bedrock rejects or cannot serve the request
        """
        if speaker != self.name:
            raise ValueError(f"{self.name} was asked to speak as {speaker}")

        try:
            history, prompt = self.build_request(transcript)
        except OSError as e:
            logger.error(f"{self.name} could not encode the image: {e}")
            raise GenerationFailure(f"Image could not be encoded: {e}", code="InvalidImage", speaker=self.name) from e
        agent = self._create_agent(history)
        logger.debug(f"{self.name}: sending {len(history)} history messages and {len(prompt)} prompt blocks")

        chunks = []
        result = None
        try:
            async for event in agent.stream_async(prompt):
                if "data" in event:
                    chunks.append(event["data"])
                    if self.stream_handler is not None:
                        self.stream_handler(self.name, event["data"])
                elif "result" in event:
                    result = event["result"]
        except ModelThrottledException as e:
            logger.error(f"{self.name} was throttled: {e}")
            raise GenerationFailure("Model request was throttled", code="ThrottlingException", speaker=self.name) from e
        except ContextWindowOverflowException as e:
            logger.error(f"{self.name} overflowed the context window: {e}")
            raise GenerationFailure(
                "Conversation is too long for the model", code="ContextWindowOverflow", speaker=self.name
            ) from e
        except MaxTokensReachedException as e:
            logger.error(f"{self.name} hit the max_tokens limit: {e}")
            raise GenerationFailure(
                "Reply was cut off at the max_tokens limit", code="MaxTokensReached", speaker=self.name
            ) from e
        except ClientError as e:
            error = e.response.get("Error", {})
            logger.error(f"{self.name} model call failed: {error.get('Code')}: {error.get('Message')}")
            raise GenerationFailure(
                error.get("Message") or str(e), code=error.get("Code"), speaker=self.name
            ) from e
        except BotoCoreError as e:
            logger.error(f"{self.name} AWS error: {e}")
            raise GenerationFailure(str(e), code=type(e).__name__, speaker=self.name) from e
        except EventLoopException as e:
            cause = e.original_exception
            code = type(cause).__name__
            if isinstance(cause, ClientError):
                code = cause.response.get("Error", {}).get("Code") or code
            logger.error(f"{self.name} agent loop failed: {code}: {cause}")
            raise GenerationFailure(str(cause), code=code, speaker=self.name) from e

        text = _result_text(result) or "".join(chunks)
        if not text:
            logger.warning(f"{self.name} returned no text")
            return Message(AuthorRole.ASSISTANT, MixedContent(()), author_name=self.name)
        return Message.from_agent(self.name, text)

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, agent_type={self.agent_type!r})"
