"""Prompt templates for rerank models that expect chat-formatted input."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from reranker.models import TemplateConfig

QWEN3_QUERY_PREFIX = (
    "<|im_start|>system\n"
    "Judge whether the Document meets the requirements based on the Query and the Instruct "
    'provided. Note that the answer can only be "yes" or "no".<|im_end|>\n'
    "<|im_start|>user\n"
)
QWEN3_DOCUMENT_SUFFIX = "<|im_end|>\n<|im_start|>assistant\n<think>\n\n</think>\n\n"


@dataclass(frozen=True)
class PromptTemplate:
    """Prefix/suffix pairs wrapped around the query and each document."""

    query_prefix: str = ""
    query_suffix: str = ""
    document_prefix: str = ""
    document_suffix: str = ""

    def format_query(self, query: str) -> str:
        return f"{self.query_prefix}{query}{self.query_suffix}"

    def format_document(self, document: str) -> str:
        return f"{self.document_prefix}{document}{self.document_suffix}"


def qwen3_template(instruction: str) -> PromptTemplate:
    return PromptTemplate(
        query_prefix=f"{QWEN3_QUERY_PREFIX}<Instruct>: {instruction}\n<Query>: ",
        query_suffix="\n",
        document_prefix="<Document>: ",
        document_suffix=QWEN3_DOCUMENT_SUFFIX,
    )


def build_template(config: Optional[TemplateConfig]) -> Optional[PromptTemplate]:
    """Return the template selected by the config, or None when disabled."""
    if config is None or not config.enabled:
        return None
    if config.preset == "qwen3":
        return qwen3_template(config.instruction)
    return PromptTemplate(
        query_prefix=config.query_prefix,
        query_suffix=config.query_suffix,
        document_prefix=config.document_prefix,
        document_suffix=config.document_suffix,
    )
