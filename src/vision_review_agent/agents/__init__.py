"""
Multi-Agent System for image review

This package contains:
- VisionAgent: Describes the user's image and revises on feedback
- ReviewAgent: Critiques the description and approves it
- BedrockParticipant: Strands/Bedrock-backed conversation participant
- AgentOrchestrator: Builds the model and creates conversations
"""

from .participant import Participant
from .bedrock_participant import BedrockParticipant
from .vision_agent import VisionAgent
from .review_agent import ReviewAgent
from .orchestrator import AgentOrchestrator

__all__ = [
    "Participant",
    "BedrockParticipant",
    "VisionAgent",
    "ReviewAgent",
    "AgentOrchestrator"
]
