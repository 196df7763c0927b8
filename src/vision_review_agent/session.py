"""
Console Session
Interactive loop that runs one conversation per user question and prints the
agents' replies as they stream.
"""

import asyncio
import logging
import sys
from typing import Callable, Optional

from .conversation.driver import ConversationResult, TerminationReason
from .conversation.messages import ImageContent, Message
from .exceptions import GenerationFailure

logger = logging.getLogger(__name__)

QUIT_COMMAND = "quit"
MODES = ("review", "ask")

SETUP_CHECKLIST = """
📋 Setup Checklist:
1. Authenticate with AWS: aws configure (or aws sso login --profile <profile>)
2. Request access to the model in the Amazon Bedrock console for your region
3. Ensure your model supports images (e.g., anthropic.claude-3-haiku-20240307-v1:0)
4. Check the settings passed with --settings, for example:
{
  "Bedrock": {"ModelId": "anthropic.claude-3-haiku-20240307-v1:0", "Region": "us-east-1"},
  "Chat": {"MaximumIterations": 3, "TriggerPhrase": "APPROVED"}
}
"""


class StreamPrinter:
    """Writes streamed chunks to the console with one header per message."""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self._streamed = False

    def _header(self, speaker):
        self.out.write(f"\n🤖 {speaker or 'assistant'}:\n")

    def __call__(self, speaker: str, chunk: str):
        if not self._streamed:
            self._header(speaker)
            self._streamed = True
        self.out.write(chunk)
        self.out.flush()

    def message_done(self, message: Message):
        """Finish the current message; prints it whole if nothing was streamed."""
        if not self._streamed:
            self._header(message.author_name)
            self.out.write(message.text if message.text is not None else "(no text)")
        self.out.write("\n")
        self.out.flush()
        self._streamed = False


class ConsoleSession:
    """
    One interactive console session over a single image.

    Holds the orchestrator, the image and the printer explicitly so nothing
    lives in module-level state.
    """

    def __init__(
        self,
        orchestrator,
        image: ImageContent,
        mode: str = "review",
        printer: Optional[StreamPrinter] = None,
        maximum_iterations: Optional[int] = None,
        input_func: Callable[[str], str] = input,
    ):
        if mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
        self.orchestrator = orchestrator
        self.image = image
        self.mode = mode
        self.printer = printer or StreamPrinter()
        self.maximum_iterations = maximum_iterations
        self.input_func = input_func

    @property
    def out(self):
        return self.printer.out

    def _create_chat(self, question: Optional[str]):
        if self.mode == "ask":
            return self.orchestrator.create_vision_chat(
                self.image, question, maximum_iterations=self.maximum_iterations
            )
        return self.orchestrator.create_review_chat(
            self.image, question, maximum_iterations=self.maximum_iterations
        )

    async def run_turn(self, question: Optional[str] = None) -> ConversationResult:
        """
        Run one complete conversation for a question.

        Raises:
            GenerationFailure: Propagated from the agents
        """
        driver = self._create_chat(question)
        self.out.write("\n🤖 Group chat starting:\n========================\n")
        result = await driver.run(on_message=self.printer.message_done)
        self.out.write("========================\n")
        self.report(result)
        return result

    def report(self, result: ConversationResult):
        if result.reason is TerminationReason.APPROVED:
            author = result.last_message.author_name if result.last_message else None
            self.out.write(f"✅ Approved by {author} after {result.turns} turns\n")
        elif self.mode == "review":
            self.out.write(f"⏹️ Turn limit reached after {result.turns} turns without approval\n")
        self.out.flush()

    def ask_once(self, question: Optional[str] = None) -> Optional[ConversationResult]:
        """
        Run one conversation, presenting a generation failure instead of raising.

        Returns:
            The result, or None if the agents failed
        """
        try:
            return asyncio.run(self.run_turn(question))
        except GenerationFailure as e:
            logger.error(f"Conversation failed: {e}")
            self.out.write(f"\n❌ Agent error: {e}\n")
            self.out.write(SETUP_CHECKLIST)
            self.out.flush()
            return None

    def run_interactive(self) -> int:
        """
        Prompt for questions until the user types quit.

        Returns:
            Number of conversations that completed
        """
        completed = 0
        self.out.write(f"Type a question about the image, press Enter for none, or '{QUIT_COMMAND}' to exit.\n")
        while True:
            try:
                line = self.input_func("\n❓ Question: ")
            except (EOFError, KeyboardInterrupt):
                self.out.write("\n")
                break
            if line.strip().lower() == QUIT_COMMAND:
                break
            if self.ask_once(line.strip() or None) is not None:
                completed += 1
        self.out.write("👋 Goodbye\n")
        self.out.flush()
        return completed
