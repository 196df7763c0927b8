"""Configuration settings for the vision review agent."""

import os
import boto3
from botocore.config import Config as BotocoreConfig
from dataclasses import dataclass
from strands.models import BedrockModel


@dataclass
class AgentConfig:
    """Configuration for the Bedrock-backed agents."""

    model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"  # Vision-capable
    region: str = "us-east-1"
    profile_name: str = None
    temperature: float = 0.0
    max_tokens: int = 2048
    request_timeout: int = 300  # Timeout in seconds for API requests

    def __post_init__(self):
        """Set default profile_name if not provided."""
        if self.profile_name is None:
            self.profile_name = os.environ.get("AWS_PROFILE", "default")


@dataclass
class ChatConfig:
    """Configuration for the agent conversation."""

    maximum_iterations: int = 3  # Participant turns, the opening user message excluded
    trigger_phrase: str = "APPROVED"
    vision_agent_name: str = "VisionAgent"
    review_agent_name: str = "ReviewAgent"
    single_agent_iterations: int = 1
    default_question: str = "Describe this image in detail."


def create_bedrock_model(config: AgentConfig = None, session: boto3.Session = None) -> BedrockModel:
    """
    Create a properly configured BedrockModel for Strands agents.

    Args:
        config: AgentConfig instance, creates default if None
        session: Existing boto3 session; one is created from the config if None

    Returns:
        BedrockModel configured with the specified profile and region
    """
    if config is None:
        config = AgentConfig()

    if session is None:
        session = boto3.Session(region_name=config.region, profile_name=config.profile_name)

    boto_client_config = BotocoreConfig(
        read_timeout=config.request_timeout,
        connect_timeout=min(config.request_timeout, 60),
    )

    bedrock_model = BedrockModel(
        model_id=config.model_id,
        boto_session=session,
        boto_client_config=boto_client_config,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )

    return bedrock_model
