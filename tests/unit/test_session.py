"""Unit tests for the console session and stream printer."""

from __future__ import annotations

import io

import pytest
from strands.types.exceptions import MaxTokensReachedException

from tests.fakes import FakeAgentFactory, FakeOrchestrator
from vision_review_agent.agents.orchestrator import AgentOrchestrator
from vision_review_agent.conversation.driver import TerminationReason
from vision_review_agent.conversation.messages import Message
from vision_review_agent.exceptions import GenerationFailure
from vision_review_agent.session import ConsoleSession, StreamPrinter


class ScriptedAgentOrchestrator(AgentOrchestrator):
    """Real orchestrator whose vision agent is backed by a fake Strands agent factory."""

    def __init__(self, factory: FakeAgentFactory) -> None:
        super().__init__(model=object())
        self.factory = factory

    def create_vision_chat(self, image=None, question=None, maximum_iterations=None):
        driver = super().create_vision_chat(image, question, maximum_iterations)
        for participant in driver.participants:
            participant._agent_factory = self.factory
        return driver


def _inputs(*lines):
    remaining = list(lines)

    def fake_input(prompt):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return fake_input


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


def _session(orchestrator, image, out, mode="review", *lines) -> ConsoleSession:
    return ConsoleSession(
        orchestrator, image, mode=mode, printer=StreamPrinter(out), input_func=_inputs(*lines)
    )


class TestStreamPrinter:

    def test_header_once_per_message(self, out) -> None:
        printer = StreamPrinter(out)
        printer("VisionAgent", "A flow")
        printer("VisionAgent", "chart")
        printer.message_done(Message.from_agent("VisionAgent", "A flowchart"))

        assert out.getvalue() == "\n🤖 VisionAgent:\nA flowchart\n"

    def test_unstreamed_message_printed_whole(self, out) -> None:
        printer = StreamPrinter(out)
        printer.message_done(Message.from_agent("ReviewAgent", "APPROVED"))
        printer("ReviewAgent", "next")

        assert out.getvalue() == "\n🤖 ReviewAgent:\nAPPROVED\n\n🤖 ReviewAgent:\nnext"


class TestConsoleSession:

    def test_rejects_unknown_mode(self, png_image) -> None:
        with pytest.raises(ValueError):
            ConsoleSession(FakeOrchestrator(), png_image, mode="debate")

    def test_review_until_approval(self, png_image, out) -> None:
        session = _session(FakeOrchestrator(["Needs detail", "APPROVED"], 4), png_image, out)

        result = session.ask_once("Explain step 2")

        assert result.reason is TerminationReason.APPROVED
        text = out.getvalue()
        assert "🤖 ReviewAgent:\nAPPROVED" in text
        assert "✅ Approved by ReviewAgent after 4 turns" in text

    def test_review_turn_limit(self, png_image, out) -> None:
        session = _session(FakeOrchestrator(["Needs detail"], 3), png_image, out)

        result = session.ask_once()

        assert result.reason is TerminationReason.TURN_LIMIT_REACHED
        assert "Turn limit reached after 3 turns" in out.getvalue()

    def test_ask_mode_uses_single_agent(self, png_image, out) -> None:
        orchestrator = FakeOrchestrator()
        session = _session(orchestrator, png_image, out, "ask")

        session.ask_once("What color?")

        assert orchestrator.requests == [{"mode": "ask", "question": "What color?"}]
        assert "answer to What color?" in out.getvalue()
        assert "Turn limit" not in out.getvalue()

    def test_generation_failure_is_presented(self, png_image, out) -> None:
        failure = GenerationFailure("Access denied", code="AccessDeniedException", speaker="ReviewAgent")
        session = _session(FakeOrchestrator([failure]), png_image, out)

        assert session.ask_once() is None
        text = out.getvalue()
        assert "❌ Agent error: ReviewAgent: Access denied (AccessDeniedException)" in text
        assert "Setup Checklist" in text

    def test_interactive_until_quit(self, png_image, out) -> None:
        orchestrator = FakeOrchestrator()
        session = _session(orchestrator, png_image, out, "review", "What is this?", "", "QuIt", "never read")

        completed = session.run_interactive()

        assert completed == 2
        assert [r["question"] for r in orchestrator.requests] == ["What is this?", None]
        assert out.getvalue().endswith("👋 Goodbye\n")

    def test_interactive_retries_after_failure(self, png_image, out) -> None:
        orchestrator = FakeOrchestrator([GenerationFailure("Throttled", code="ThrottlingException")])
        session = _session(orchestrator, png_image, out, "review", "first try", "quit")

        completed = session.run_interactive()

        assert completed == 0
        assert len(orchestrator.requests) == 1
        assert "Throttled" in out.getvalue()

    def test_interactive_reprompts_after_max_tokens(self, png_image, out) -> None:
        factory = FakeAgentFactory(chunks=["A flowchart"], error=MaxTokensReachedException("limit"), fail_times=1)
        session = _session(ScriptedAgentOrchestrator(factory), png_image, out, "ask", "Describe it", "Again", "quit")

        completed = session.run_interactive()

        assert completed == 1
        assert len(factory.agents) == 2
        text = out.getvalue()
        assert "❌ Agent error: VisionAgent: Reply was cut off at the max_tokens limit (MaxTokensReached)" in text
        assert "🤖 VisionAgent:\nA flowchart" in text
        assert text.endswith("👋 Goodbye\n")

    def test_interactive_ends_on_eof(self, png_image, out) -> None:
        session = _session(FakeOrchestrator(), png_image, out, "review", "one question")

        assert session.run_interactive() == 1
