#!/usr/bin/env python3
"""
Main entry point for the Vision Review Agent console.
"""

import argparse
import logging
import os
import sys

from botocore.exceptions import BotoCoreError, ClientError

from .agents.orchestrator import AgentOrchestrator
from .config.config import AgentConfig, ChatConfig
from .config.settings_file import load_settings
from .exceptions import ImageValidationError, InvalidConfiguration
from .session import MODES, SETUP_CHECKLIST, ConsoleSession, StreamPrinter
from .utils.aws_auth import check_model_access, get_aws_session
from .utils.images import validate_image

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    """Configure logging with quieter levels for the AWS SDK and Strands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)         # Reduce HTTP request noise
    logging.getLogger("boto3").setLevel(logging.WARNING)           # Reduce AWS SDK noise
    logging.getLogger("botocore").setLevel(logging.WARNING)        # Reduce AWS SDK noise
    logging.getLogger("strands").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vision agent with an approving review agent on Amazon Bedrock")
    parser.add_argument("image", nargs="?", help="Path to the image to analyse")
    parser.add_argument("--question", "-q", help="Ask one question and exit (default: interactive)")
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="review",
        help="review: vision and review agents until approval; ask: vision agent only (default: review)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum agent turns per conversation, the opening message excluded",
    )
    parser.add_argument("--trigger-phrase", default=None, help="Word the review agent approves with")
    parser.add_argument(
        "--profile",
        default=None,
        help="AWS profile name (default: uses AWS_PROFILE env var or 'default')",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="AWS region (default: AWS_DEFAULT_REGION or us-east-1)",
    )
    parser.add_argument("--model-id", default=None, help="Bedrock model ID (must accept images)")
    parser.add_argument("--settings", default=None, help="JSON settings file")
    parser.add_argument("--check-model", action="store_true", help="Check Bedrock model access and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def resolve_configs(args):
    """
    Combine the settings file, environment and command line into configs.

    Command-line flags win over the settings file, which wins over defaults.

    Returns:
        (AgentConfig, ChatConfig)
    """
    if args.settings:
        agent_config, chat_config = load_settings(args.settings).to_configs()
    else:
        agent_config, chat_config = AgentConfig(), ChatConfig()
        env_region = os.getenv("AWS_DEFAULT_REGION")
        if env_region:
            agent_config.region = env_region

    if args.profile:
        agent_config.profile_name = args.profile
    if args.region:
        agent_config.region = args.region
    if args.model_id:
        agent_config.model_id = args.model_id
    if args.max_iterations is not None:
        if args.max_iterations < 1:
            raise InvalidConfiguration("--max-iterations must be positive")
        chat_config.maximum_iterations = args.max_iterations
        chat_config.single_agent_iterations = args.max_iterations
    if args.trigger_phrase:
        chat_config.trigger_phrase = args.trigger_phrase
    return agent_config, chat_config


def main(argv=None):
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        agent_config, chat_config = resolve_configs(args)
    except InvalidConfiguration as e:
        print(f"❌ Configuration Error: {e}")
        return 2

    if args.check_model:
        try:
            session = get_aws_session(agent_config.profile_name, agent_config.region)
        except (BotoCoreError, ClientError) as e:
            print(f"❌ AWS authentication failed: {e}")
            return 1
        ok, detail = check_model_access(session, agent_config.model_id, agent_config.region)
        print(f"{'✅' if ok else '❌'} {agent_config.model_id}: {detail}")
        return 0 if ok else 1

    if not args.image:
        parser.error("an image path is required")

    # Pre-flight: reject bad images before any model is contacted
    try:
        image = validate_image(args.image)
    except ImageValidationError as e:
        print(f"❌ {e}")
        return 1

    print("🤖 Vision Review Agent")
    print("===============================")
    print(f"🖼️ Image: {args.image} ({image.mime_type})")
    print(f"🔗 Region: {agent_config.region} (profile {agent_config.profile_name})")
    print(f"🤖 Model: {agent_config.model_id}")

    printer = StreamPrinter(sys.stdout)
    try:
        orchestrator = AgentOrchestrator(agent_config, chat_config, stream_handler=printer)
    except (BotoCoreError, ClientError) as e:
        print(f"❌ Agent initialization error: {e}")
        print(SETUP_CHECKLIST)
        return 1

    session = ConsoleSession(
        orchestrator,
        image,
        mode=args.mode,
        printer=printer,
    )

    try:
        if args.question:
            return 0 if session.ask_once(args.question) is not None else 1
        session.run_interactive()
        return 0
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
