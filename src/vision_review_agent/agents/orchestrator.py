"""
Agent Orchestrator
Builds the Bedrock model and agents and hands out a fresh conversation per request.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..config.config import AgentConfig, ChatConfig, create_bedrock_model
from ..config.conversation_config import ConversationConfig, describe_conversation_manager
from ..conversation.driver import ConversationDriver, SelectionMode
from ..conversation.messages import ImageContent, Message
from ..conversation.termination import ApprovalTerminationPolicy
from ..utils.aws_auth import get_aws_session
from .review_agent import ReviewAgent
from .vision_agent import VisionAgent

logger = logging.getLogger(__name__)


def no_approval(transcript: Sequence[Message], candidate_author: Optional[str] = None) -> bool:
    """Termination predicate for single-agent runs, which end on the turn budget only."""
    return False


class AgentOrchestrator:
    """
    Orchestrates the vision/review agent system.
    Owns the model and creates a new ConversationDriver for every conversation.
    """

    def __init__(
        self,
        agent_config: AgentConfig = None,
        chat_config: ChatConfig = None,
        session=None,
        stream_handler=None,
        model=None,
    ):
        """
        Initialize the orchestrator.

        Args:
            agent_config: Bedrock model settings
            chat_config: Conversation settings
            session: boto3 session; a verified one is created when omitted
            stream_handler: Receives (speaker, chunk) while agents stream replies
            model: Pre-built Strands model, skips session and model creation
        """
        self.agent_config = agent_config or AgentConfig()
        self.chat_config = chat_config or ChatConfig()
        self.session = session
        self.stream_handler = stream_handler
        self.model = model
        self._initialize_model()
        logger.info("Agent Orchestrator initialized")

    def _initialize_model(self):
        """Create the shared Bedrock model unless one was supplied."""
        if self.model is not None:
            return
        try:
            if self.session is None:
                self.session = get_aws_session(self.agent_config.profile_name, self.agent_config.region)
            self.model = create_bedrock_model(self.agent_config, self.session)
            logger.info(f"Using Bedrock model {self.agent_config.model_id} in {self.agent_config.region}")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to initialize Bedrock model: {str(e)}")
            raise

    def _opening_message(self, image: Optional[ImageContent], question: Optional[str]) -> Message:
        text = question.strip() if question and question.strip() else self.chat_config.default_question
        return Message.user(text=text, image=image)

    def create_policy(self, maximum_iterations: Optional[int] = None) -> ApprovalTerminationPolicy:
        """Approval policy that only the review agent can satisfy."""
        return ApprovalTerminationPolicy(
            authorized_participants=[self.chat_config.review_agent_name],
            maximum_iterations=(
                self.chat_config.maximum_iterations if maximum_iterations is None else maximum_iterations
            ),
            trigger_phrase=self.chat_config.trigger_phrase,
        )

    def create_review_chat(
        self,
        image: Optional[ImageContent] = None,
        question: Optional[str] = None,
        maximum_iterations: Optional[int] = None,
    ) -> ConversationDriver:
        """
        Create a vision/review group conversation.

        The vision agent speaks first and the two agents alternate until the
        reviewer approves or the turn budget runs out.

        Args:
            image: Image to analyse
            question: Optional user question sent with the image
            maximum_iterations: Override the configured turn budget

        Returns:
            ConversationDriver seeded with the opening user message
        """
        vision = VisionAgent(
            self.model, name=self.chat_config.vision_agent_name, stream_handler=self.stream_handler
        )
        review = ReviewAgent(
            self.model,
            name=self.chat_config.review_agent_name,
            trigger_phrase=self.chat_config.trigger_phrase,
            stream_handler=self.stream_handler,
        )
        driver = ConversationDriver(
            [vision, review],
            termination=self.create_policy(maximum_iterations),
            selection=SelectionMode.ROUND_ROBIN,
        )
        driver.add_message(self._opening_message(image, question))
        return driver

    def create_vision_chat(
        self,
        image: Optional[ImageContent] = None,
        question: Optional[str] = None,
        maximum_iterations: Optional[int] = None,
    ) -> ConversationDriver:
        """
        Create a single-agent question/answer conversation with the vision agent.

        Args:
            image: Image the question is about
            question: The user's question
            maximum_iterations: Override the single-agent turn budget

        Returns:
            ConversationDriver seeded with the opening user message
        """
        vision = VisionAgent(
            self.model, name=self.chat_config.vision_agent_name, stream_handler=self.stream_handler
        )
        driver = ConversationDriver(
            [vision],
            termination=no_approval,
            maximum_iterations=(
                self.chat_config.single_agent_iterations if maximum_iterations is None else maximum_iterations
            ),
            selection=SelectionMode.REPEAT,
        )
        driver.add_message(self._opening_message(image, question))
        return driver

    def get_agent_status(self) -> Dict[str, Any]:
        """
        Get status of the agent system.

        Returns:
            Dictionary with model and conversation settings
        """
        managers = {
            agent_type: describe_conversation_manager(
                ConversationConfig.create_conversation_manager(agent_type)
            )
            for agent_type in ("vision", "review")
        }
        return {
            "model": "ready" if self.model is not None else "unavailable",
            "model_id": self.agent_config.model_id,
            "region": self.agent_config.region,
            "profile": self.agent_config.profile_name,
            "agents": [self.chat_config.vision_agent_name, self.chat_config.review_agent_name],
            "approver": self.chat_config.review_agent_name,
            "trigger_phrase": self.chat_config.trigger_phrase,
            "maximum_iterations": self.chat_config.maximum_iterations,
            "conversation_management": managers,
        }
