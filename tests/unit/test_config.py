"""Unit tests for configuration dataclasses, the settings file and model creation."""

from __future__ import annotations

import json

import boto3
import pytest
from strands.agent.conversation_manager import (
    NullConversationManager,
    SlidingWindowConversationManager,
)
from strands.models import BedrockModel

from vision_review_agent.config.config import AgentConfig, ChatConfig, create_bedrock_model
from vision_review_agent.config.conversation_config import (
    ConversationConfig,
    describe_conversation_manager,
)
from vision_review_agent.config.settings_file import AppSettings, load_settings
from vision_review_agent.exceptions import InvalidConfiguration


class TestAgentConfig:

    def test_profile_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("AWS_PROFILE", "vision-dev")
        assert AgentConfig().profile_name == "vision-dev"

    def test_profile_default(self, monkeypatch) -> None:
        monkeypatch.delenv("AWS_PROFILE", raising=False)
        assert AgentConfig().profile_name == "default"

    def test_chat_defaults(self) -> None:
        config = ChatConfig()
        assert config.maximum_iterations == 3
        assert config.trigger_phrase == "APPROVED"
        assert config.review_agent_name == "ReviewAgent"


class TestCreateBedrockModel:

    def test_uses_given_session_and_settings(self) -> None:
        session = boto3.Session(
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
            region_name="us-west-2",
        )
        config = AgentConfig(model_id="anthropic.claude-3-5-sonnet-20240620-v1:0", temperature=0.2, max_tokens=512)

        model = create_bedrock_model(config, session=session)

        assert isinstance(model, BedrockModel)
        model_config = model.get_config()
        assert model_config["model_id"] == "anthropic.claude-3-5-sonnet-20240620-v1:0"
        assert model_config["temperature"] == 0.2
        assert model_config["max_tokens"] == 512


class TestConversationConfig:

    def test_window_sizes_per_agent_type(self) -> None:
        vision = ConversationConfig.create_conversation_manager("vision")
        fallback = ConversationConfig.create_conversation_manager("unknown")
        assert isinstance(vision, SlidingWindowConversationManager)
        assert vision.window_size == 20
        assert fallback.window_size == 40

    def test_agent_type_is_case_insensitive(self) -> None:
        manager = ConversationConfig.create_conversation_manager("Review")
        assert describe_conversation_manager(manager) == "SlidingWindowConversationManager (window_size=20)"

    def test_describe_other_manager(self) -> None:
        assert describe_conversation_manager(NullConversationManager()) == "NullConversationManager"


class TestSettingsFile:

    def _write(self, tmp_path, data) -> str:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(data) if not isinstance(data, str) else data)
        return path

    def test_full_file(self, tmp_path) -> None:
        path = self._write(
            tmp_path,
            {
                "Bedrock": {
                    "ModelId": "amazon.nova-lite-v1:0",
                    "Region": "eu-central-1",
                    "Profile": "vision",
                    "MaxTokens": 1024,
                },
                "Chat": {"MaximumIterations": 6, "TriggerPhrase": "LGTM", "ReviewAgentName": "Critic"},
            },
        )

        agent_config, chat_config = load_settings(path).to_configs()

        assert agent_config.model_id == "amazon.nova-lite-v1:0"
        assert agent_config.region == "eu-central-1"
        assert agent_config.profile_name == "vision"
        assert agent_config.max_tokens == 1024
        assert agent_config.temperature == 0.0
        assert chat_config.maximum_iterations == 6
        assert chat_config.trigger_phrase == "LGTM"
        assert chat_config.review_agent_name == "Critic"
        assert chat_config.vision_agent_name == "VisionAgent"

    def test_empty_sections_keep_defaults(self, tmp_path) -> None:
        agent_config, chat_config = load_settings(self._write(tmp_path, {})).to_configs()
        assert agent_config.model_id == AgentConfig().model_id
        assert chat_config == ChatConfig()

    def test_other_sections_are_ignored(self, tmp_path) -> None:
        settings = load_settings(self._write(tmp_path, {"Logging": {"Level": "DEBUG"}}))
        assert isinstance(settings, AppSettings)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(InvalidConfiguration):
            load_settings(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path) -> None:
        with pytest.raises(InvalidConfiguration):
            load_settings(self._write(tmp_path, "{not json"))

    @pytest.mark.parametrize(
        "data",
        [
            {"Chat": {"MaximumIterations": 0}},
            {"Chat": {"TriggerPhrase": ""}},
            {"Bedrock": {"Temperature": 3}},
            {"Bedrock": {"Endpoint": "https://example.openai.azure.com/"}},
            ["not", "an", "object"],
        ],
    )
    def test_invalid_values(self, tmp_path, data) -> None:
        with pytest.raises(InvalidConfiguration):
            load_settings(self._write(tmp_path, data))
