"""
LLM Infrastructure for the Receipt Pipeline

Provides AWS Bedrock integration for payment field extraction.

This package provides:
- BedrockLLMClient for chat-style InvokeModel calls
- The payment extraction prompt
- extract_payment_info, returning a tagged StageResult
"""

from payments.shared.llm.bedrock_client import (
    BedrockLLMClient,
    create_bedrock_runtime_client,
)
from payments.shared.llm.extraction import extract_payment_info, parse_payment_content
from payments.shared.llm.prompts import build_payment_extraction_prompt


__all__ = [
    "BedrockLLMClient",
    "create_bedrock_runtime_client",
    "extract_payment_info",
    "parse_payment_content",
    "build_payment_extraction_prompt",
]
