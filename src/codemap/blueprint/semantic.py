"""
Semantic annotation capability.

Generation accepts any callable taking a CodeContext and returning a
SemanticInfo (or None to leave the item unannotated). NullAnnotator is the
default; OllamaAnnotator asks a local ollama model for a description.
"""

import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Protocol

import requests
from loguru import logger

from codemap.config import get_section

from .schemas import SemanticInfo


@dataclass
class CodeContext:
    """What an annotator gets to see about one module or symbol."""

    kind: Literal["module", "symbol"]
    id: str
    name: str
    language: str = "unknown"
    signature: Optional[str] = None
    symbol_kind: Optional[str] = None
    imports: List[str] = field(default_factory=list)
    member_names: List[str] = field(default_factory=list)


class SemanticAnnotator(Protocol):
    def __call__(self, context: CodeContext) -> Optional[SemanticInfo]:
        ...


class NullAnnotator:
    """Annotates nothing."""

    version: Optional[str] = None

    def __call__(self, context: CodeContext) -> Optional[SemanticInfo]:
        return None


PROMPT_TEMPLATE = """You are documenting a codebase. Describe the following {kind} in one or two sentences.

Name: {name}
Id: {id}
Language: {language}
{details}
Answer in exactly this format:
DESCRIPTION: <one or two sentences>
RESPONSIBILITY: <a short phrase>
DOMAIN: <business domain, or none>
TAGS: <comma separated keywords>
"""

FIELD_PATTERN = re.compile(r"^(DESCRIPTION|RESPONSIBILITY|DOMAIN|TAGS):\s*(.*)$", re.MULTILINE)


def build_prompt(context: CodeContext) -> str:
    details = []
    if context.symbol_kind:
        details.append(f"Kind: {context.symbol_kind}")
    if context.signature:
        details.append(f"Signature: {context.signature}")
    if context.imports:
        details.append(f"Imports: {', '.join(context.imports[:15])}")
    if context.member_names:
        details.append(f"Declares: {', '.join(context.member_names[:20])}")
    return PROMPT_TEMPLATE.format(
        kind=context.kind,
        name=context.name,
        id=context.id,
        language=context.language,
        details="\n".join(details) + ("\n" if details else ""),
    )


def parse_response(text: str, confidence: float = 0.6) -> Optional[SemanticInfo]:
    """Parse the labelled answer format; None when no description came back."""
    fields = {key: value.strip() for key, value in FIELD_PATTERN.findall(text or "")}
    description = fields.get("DESCRIPTION", "")
    if not description:
        return None

    domain = fields.get("DOMAIN") or None
    if domain and domain.lower() == "none":
        domain = None
    tags = [tag.strip() for tag in fields.get("TAGS", "").split(",") if tag.strip()]

    return SemanticInfo(
        description=description,
        responsibility=fields.get("RESPONSIBILITY") or None,
        business_domain=domain,
        tags=tags,
        confidence=confidence,
        generated_at=datetime.now(timezone.utc).isoformat(),
    )


class OllamaAnnotator:
    """Annotator backed by a local ollama server (/api/generate)."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = {**get_section("llm"), **(config or {})}
        self.version = f"ollama:{self.config['model']}"

    def generate(self, prompt: str) -> Optional[str]:
        url = f"{self.config['ollama_url'].rstrip('/')}/api/generate"
        payload = {
            "model": self.config["model"],
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.config["temperature"]},
        }

        start_time = time.time()
        try:
            response = requests.post(url, json=payload, timeout=self.config["timeout"])
        except requests.exceptions.Timeout:
            logger.error("LLM request timed out")
            return None
        except requests.exceptions.RequestException as e:
            logger.error(f"LLM request failed: {e}")
            return None

        if response.status_code != 200:
            logger.error(f"Ollama error: {response.status_code} - {response.text}")
            return None

        logger.debug(f"LLM generation completed in {time.time() - start_time:.2f}s")
        return response.json().get("response", "")

    def __call__(self, context: CodeContext) -> Optional[SemanticInfo]:
        return parse_response(self.generate(build_prompt(context)))


def create_annotator(config: Optional[Dict[str, Any]] = None) -> SemanticAnnotator:
    """Annotator for the configured llm.backend ("none" or "ollama")."""
    settings = {**get_section("llm"), **(config or {})}
    backend = settings["backend"]
    if backend == "none":
        return NullAnnotator()
    if backend == "ollama":
        return OllamaAnnotator(settings)
    logger.warning(f"Unsupported LLM backend: {backend}, semantic annotation disabled")
    return NullAnnotator()
