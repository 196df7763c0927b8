"""AWS authentication and Bedrock access checks."""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ..config.config import AgentConfig

logger = logging.getLogger(__name__)


def get_aws_session(profile_name=None, region=None, verify=True):
    """
    Create an AWS session using the specified profile and region.

    Args:
        profile_name (str, optional): AWS profile name to use. Defaults to None.
        region (str, optional): AWS region to use. Defaults to None.
        verify (bool): Confirm the credentials with STS before returning.

    Returns:
        boto3.Session: Authenticated AWS session
    """
    config = AgentConfig()
    profile = profile_name or config.profile_name
    region = region or config.region

    try:
        session = boto3.Session(profile_name=profile, region_name=region)
        if verify:
            # Test the session by making a simple API call
            identity = session.client('sts').get_caller_identity()
            logger.info(f"Authenticated as {identity.get('Arn')}")
        return session
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Error creating AWS session: {str(e)}")
        logger.error(f"Using profile: {profile}, region: {region}")
        raise


def check_model_access(session, model_id, region=None):
    """
    Test if a Bedrock model can be invoked successfully.

    Sends a tiny Converse request, which works the same way for every
    text-capable Bedrock model.

    Args:
        session (boto3.Session): Session to use
        model_id (str): The Bedrock model ID to test
        region (str, optional): Override the session region

    Returns:
        tuple: (ok, detail) where detail is the reply or the error explanation
    """
    try:
        client = session.client('bedrock-runtime', region_name=region or session.region_name)
        response = client.converse(
            modelId=model_id,
            messages=[{"role": "user", "content": [{"text": "Say OK"}]}],
            inferenceConfig={"maxTokens": 5},
        )
        content = response.get("output", {}).get("message", {}).get("content", [])
        reply = "".join(block.get("text", "") for block in content)
        logger.info(f"Model {model_id} replied: {reply!r}")
        return True, reply

    except ClientError as e:
        error_code = e.response['Error']['Code']
        error_message = e.response['Error']['Message']
        logger.error(f"Model invocation failed: {error_code}: {error_message}")

        if error_code == 'AccessDeniedException':
            hint = "request model access in the Bedrock console"
        elif error_code == 'ValidationException':
            hint = "check the model ID and that it supports the Converse API"
        elif error_code == 'ResourceNotFoundException':
            hint = "the model is not available in this region"
        else:
            hint = error_message
        return False, f"{error_code}: {hint}"

    except NoCredentialsError:
        logger.error("No AWS credentials found")
        return False, "No AWS credentials found"

    except BotoCoreError as e:
        logger.error(f"Unexpected AWS error: {e}")
        return False, str(e)
