"""
Vision Agent - Describes and analyses images
Produces the image description that the review agent critiques, and answers
questions about the image in single-agent mode.
"""

import logging

from .bedrock_participant import BedrockParticipant

logger = logging.getLogger(__name__)


class VisionAgent(BedrockParticipant):
    """
    Agent that looks at the user's image and describes it.
    Revises its description when the review agent asks for changes.
    """

    def __init__(self, model, name: str = "VisionAgent", stream_handler=None, **kwargs):
        """
        Initialize the Vision Agent.

        Args:
            model: Strands model with image support
            name: Participant name
            stream_handler: Receives (name, chunk) while replies stream
        """
        super().__init__(
            name=name,
            system_prompt=self._get_system_prompt(),
            model=model,
            agent_type="vision",
            stream_handler=stream_handler,
            **kwargs,
        )
        logger.info(f"{name} initialized")

    def _get_system_prompt(self) -> str:
        """Get the system prompt for the Vision Agent."""
        return """
You are a Vision Agent specialized in analysing images such as photos, diagrams and flowcharts.

WHEN GIVEN AN IMAGE:
- Describe what the image shows, starting with its overall purpose
- For diagrams and flowcharts, walk through every step, decision and connection in order
- Transcribe any visible text exactly
- Answer the user's question directly if one was asked

WHEN A REVIEWER RESPONDS:
- Messages prefixed with a name in brackets come from other agents
- Address every point the reviewer raises
- Return a complete revised description, not just the changes

NEVER:
- Invent details that are not visible in the image
- Claim approval yourself; only the reviewer decides when the description is done
"""
