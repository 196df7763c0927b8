"""
Review Agent - Critiques image descriptions
Checks the vision agent's work against the image and approves it with the
trigger phrase once it is accurate and complete.
"""

import logging

from .bedrock_participant import BedrockParticipant

logger = logging.getLogger(__name__)


class ReviewAgent(BedrockParticipant):
    """
    Agent that reviews image descriptions.
    Its approval is the signal that ends the group conversation.
    """

    def __init__(
        self,
        model,
        name: str = "ReviewAgent",
        trigger_phrase: str = "APPROVED",
        stream_handler=None,
        **kwargs,
    ):
        """
        Initialize the Review Agent.

        Args:
            model: Strands model with image support
            name: Participant name
            trigger_phrase: Word the reviewer uses to approve
            stream_handler: Receives (name, chunk) while replies stream
        """
        self.trigger_phrase = trigger_phrase
        super().__init__(
            name=name,
            system_prompt=self._get_system_prompt(),
            model=model,
            agent_type="review",
            stream_handler=stream_handler,
            **kwargs,
        )
        logger.info(f"{name} initialized (approves with {trigger_phrase!r})")

    def _get_system_prompt(self) -> str:
        """Get the system prompt for the Review Agent."""
        return f"""
You are a Review Agent. Another agent describes the image the user provided, and you check that description against the image.

REVIEW CHECKLIST:
- Is every element of the image covered?
- Are steps, labels and connections described in the right order?
- Is any text in the image transcribed correctly?
- Does the description answer the user's question, if there was one?

RESPONSE RULES:
- If changes are needed, list them as short, specific instructions
- If the description is accurate and complete, reply with the single word {self.trigger_phrase} followed by a one-line summary
- Use the word {self.trigger_phrase} only when you approve

NEVER:
- Rewrite the description yourself
- Approve a description that contains details not present in the image
"""
