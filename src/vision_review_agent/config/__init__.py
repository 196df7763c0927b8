"""Configuration for the Bedrock agents and their conversation."""
