"""
Settings File
Loads the optional JSON settings file and turns it into AgentConfig/ChatConfig.

Example::

    {
      "Bedrock": {"ModelId": "anthropic.claude-3-haiku-20240307-v1:0", "Region": "us-east-1"},
      "Chat": {"MaximumIterations": 4, "TriggerPhrase": "APPROVED"}
    }
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import InvalidConfiguration
from .config import AgentConfig, ChatConfig

logger = logging.getLogger(__name__)


class BedrockSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", protected_namespaces=())

    model_id: Optional[str] = Field(default=None, alias="ModelId", min_length=1)
    region: Optional[str] = Field(default=None, alias="Region", min_length=1)
    profile_name: Optional[str] = Field(default=None, alias="Profile")
    temperature: Optional[float] = Field(default=None, alias="Temperature", ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(default=None, alias="MaxTokens", gt=0)
    request_timeout: Optional[int] = Field(default=None, alias="RequestTimeout", gt=0)


class ChatSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    maximum_iterations: Optional[int] = Field(default=None, alias="MaximumIterations", gt=0)
    trigger_phrase: Optional[str] = Field(default=None, alias="TriggerPhrase", min_length=1)
    vision_agent_name: Optional[str] = Field(default=None, alias="VisionAgentName", min_length=1)
    review_agent_name: Optional[str] = Field(default=None, alias="ReviewAgentName", min_length=1)
    default_question: Optional[str] = Field(default=None, alias="DefaultQuestion")


class AppSettings(BaseModel):
    """Top-level layout of the settings file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    bedrock: BedrockSettings = Field(default_factory=BedrockSettings, alias="Bedrock")
    chat: ChatSettings = Field(default_factory=ChatSettings, alias="Chat")

    def to_configs(self) -> Tuple[AgentConfig, ChatConfig]:
        """Build the runtime dataclasses, keeping their defaults for unset keys."""
        agent_config = AgentConfig(**self.bedrock.model_dump(exclude_none=True))
        chat_config = ChatConfig(**self.chat.model_dump(exclude_none=True))
        return agent_config, chat_config


def load_settings(path) -> AppSettings:
    """
    Read and validate a JSON settings file.

    Args:
        path: Location of the settings file

    Returns:
        Validated AppSettings

    Raises:
        InvalidConfiguration: If the file is missing, is not JSON, or fails validation
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidConfiguration(f"Cannot read settings file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Settings file {path} is not valid JSON: {e}") from e

    try:
        settings = AppSettings.model_validate(data)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid settings in {path}: {e}") from e

    logger.info(f"Loaded settings from {path}")
    return settings
