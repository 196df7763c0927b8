"""Unit tests for ApprovalTerminationPolicy."""

from __future__ import annotations

import pytest

from vision_review_agent.conversation.messages import (
    AuthorRole,
    ImageContent,
    Message,
    MixedContent,
    TextContent,
)
from vision_review_agent.conversation.termination import ApprovalTerminationPolicy
from vision_review_agent.exceptions import InvalidConfiguration

_REVIEWER = "ReviewAgent"
_VISION = "VisionAgent"
_IMAGE = ImageContent(b"\x89PNG fake", "image/png")


@pytest.fixture
def policy() -> ApprovalTerminationPolicy:
    return ApprovalTerminationPolicy([_REVIEWER], maximum_iterations=3)


class TestConstruction:

    def test_defaults(self, policy) -> None:
        assert policy.authorized_participants == frozenset({_REVIEWER})
        assert policy.maximum_iterations == 3
        assert policy.trigger_phrase == "APPROVED"

    def test_empty_authorized_set_is_rejected(self) -> None:
        with pytest.raises(InvalidConfiguration):
            ApprovalTerminationPolicy([])

    def test_invalid_configuration_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            ApprovalTerminationPolicy(set())

    @pytest.mark.parametrize("maximum_iterations", [0, -1, 2.5, True, "3"])
    def test_bad_turn_budget_is_rejected(self, maximum_iterations) -> None:
        with pytest.raises(InvalidConfiguration):
            ApprovalTerminationPolicy([_REVIEWER], maximum_iterations=maximum_iterations)

    @pytest.mark.parametrize("trigger_phrase", ["", "   "])
    def test_blank_trigger_phrase_is_rejected(self, trigger_phrase) -> None:
        with pytest.raises(InvalidConfiguration):
            ApprovalTerminationPolicy([_REVIEWER], trigger_phrase=trigger_phrase)

    def test_single_name_string_is_one_participant(self) -> None:
        policy = ApprovalTerminationPolicy(_REVIEWER)
        assert policy.authorized_participants == frozenset({_REVIEWER})


class TestShouldTerminate:

    def test_empty_transcript_is_false(self, policy) -> None:
        assert policy.should_terminate([]) is False
        assert policy.should_terminate((), _REVIEWER) is False

    @pytest.mark.parametrize("text", ["approved", "APPROVED", "ApProVed", "Looks good. Approved!"])
    def test_authorized_author_with_trigger_in_any_case(self, policy, text) -> None:
        transcript = [Message.from_agent(_REVIEWER, text)]
        assert policy.should_terminate(transcript) is True

    def test_unauthorized_author_with_trigger_is_false(self, policy) -> None:
        transcript = [Message.from_agent(_VISION, "APPROVED, I think my work is perfect")]
        assert policy.should_terminate(transcript) is False

    def test_user_message_with_trigger_is_false(self, policy) -> None:
        transcript = [Message.user(text="APPROVED")]
        assert policy.should_terminate(transcript) is False

    def test_authorized_author_without_trigger_is_false(self, policy) -> None:
        transcript = [Message.from_agent(_REVIEWER, "Needs more detail")]
        assert policy.should_terminate(transcript) is False

    def test_image_only_message_is_false(self, policy) -> None:
        transcript = [Message(AuthorRole.ASSISTANT, _IMAGE, author_name=_REVIEWER)]
        assert policy.should_terminate(transcript) is False

    def test_empty_mixed_content_is_false(self, policy) -> None:
        transcript = [Message(AuthorRole.ASSISTANT, MixedContent(()), author_name=_REVIEWER)]
        assert policy.should_terminate(transcript) is False

    def test_mixed_content_text_is_searched(self, policy) -> None:
        content = MixedContent((_IMAGE, TextContent("approved")))
        transcript = [Message(AuthorRole.ASSISTANT, content, author_name=_REVIEWER)]
        assert policy.should_terminate(transcript) is True

    def test_only_the_latest_message_counts(self, policy) -> None:
        transcript = [
            Message.from_agent(_REVIEWER, "APPROVED"),
            Message.from_agent(_VISION, "Here is another version"),
        ]
        assert policy.should_terminate(transcript) is False

    def test_candidate_author_overrides_message_author(self, policy) -> None:
        transcript = [Message(AuthorRole.ASSISTANT, TextContent("APPROVED"))]
        assert policy.should_terminate(transcript) is False
        assert policy.should_terminate(transcript, _REVIEWER) is True
        assert policy.should_terminate(transcript, _VISION) is False

    def test_custom_trigger_phrase(self) -> None:
        policy = ApprovalTerminationPolicy([_REVIEWER], trigger_phrase="Ship It")
        assert policy.should_terminate([Message.from_agent(_REVIEWER, "ok, ship it")]) is True
        assert policy.should_terminate([Message.from_agent(_REVIEWER, "APPROVED")]) is False

    def test_pure_and_repeatable(self, policy) -> None:
        transcript = (
            Message.user(text="Describe", image=_IMAGE),
            Message.from_agent(_VISION, "A flowchart"),
            Message.from_agent(_REVIEWER, "approved"),
        )
        first = policy.should_terminate(transcript)
        second = policy.should_terminate(transcript)
        assert first is second is True
        assert len(transcript) == 3

    def test_policy_is_callable(self, policy) -> None:
        transcript = [Message.from_agent(_REVIEWER, "APPROVED")]
        assert policy(transcript, _REVIEWER) is True
