"""Instruction prompts and chat-message builders for both flows.

Prompts are versioned so a new wording can be rolled out through
LLM_PROMPT_VERSION without code churn elsewhere.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import MissingInputError
from ..pipeline.request_normalizer import ImagePart

NOTES_INSTRUCTIONS = (
    """### ROLE ###
You are an expert at reading handwritten notes (messy, rotated, sketchy) with
high accuracy.

### STEP 1: READ EVERYTHING ###
- Rotate mentally if needed and read text at any angle.
- Read every region: main area, margins, corners, annotations, circled items,
  crossed-out text, arrows and labels on drawn diagrams.
- Best-guess unclear words from context. Mark truly unreadable spots with (unclear).
- Identify structure: headings, sections, bullets, numbered steps, formulas, diagrams.

### STEP 2: STRUCTURE AS MARKDOWN ###
- # title, ## major section, ### sub-section
- **bold** key terms, *italic* emphasis, `code` for formulas or code
- - bullets, 1. numbered steps, --- dividers
Be complete. Every readable word should appear.
{page_guidance}
### STEP 3: FLOWCHART (always required) ###
Create a Mermaid flowchart of the content's logic or structure:
- Process notes: step-by-step flow with decisions
- Concept notes: concept map showing relationships
- Mixed notes: main topics and how they connect
- Always include a meaningful start and end node

Strict Mermaid rules:
- Start with: flowchart TD
- Node labels: plain words ONLY, max 5 words, no quotes, colons, equals
  signs or brackets inside labels
- Shapes: [step], {decision?}, ([start or end])
- Max 12 nodes

### OUTPUT ###
Return ONLY valid JSON, no markdown fences, no extra text:
{
  "title": "Descriptive title of the notes",
  "subject": "Subject area",
  "notes": "Complete markdown of everything you can read",
  "mermaidCode": "flowchart TD\\n  A([Start]) --> B[First step]\\n  B --> C{Decision?}\\n  C -->|Yes| D[Do this]\\n  C -->|No| E[Do that]\\n  D --> F([End])\\n  E --> F"
}
"""
)

MULTI_PAGE_GUIDANCE = """
### MULTIPLE PAGES ###
You received {count} images, in page order. Start the notes for each image
with a "## Page N" heading (N = 1..{count}) and keep content under its page.
Build ONE flowchart covering all pages.
"""

DOCUMENT_INSTRUCTIONS = (
    """### ROLE ###
You are a technical writer who documents AI voice and chat agents.

### OBJECTIVE ###
The user provides the agent's call prompt and/or its evaluation prompt.
Produce clear, structured documentation of what the agent does, how a call
flows, and how it is evaluated.

### JSON SCHEMA ###
{
  "title": "string",
  "subtitle": "string",
  "agentName": "string | null",
  "company": "string | null",
  "primaryGoal": "string | null",
  "tags": ["string"],
  "keyHighlights": ["string"],
  "sections": [
    {
      "id": "kebab-case-id",
      "heading": "string",
      "icon": "single emoji",
      "content": "markdown",
      "type": "overview | flow | rules | evaluation | other"
    }
  ],
  "callFlowMermaid": "flowchart TD\\n  A([Call starts]) --> B[Greeting]"
}

### RULES ###
- Only describe what the prompts actually say; do not invent policies.
- callFlowMermaid must start with "flowchart TD", use \\n between lines,
  max 15 nodes, plain-word labels without quotes or colons.
- Your response MUST be ONLY the JSON object. Do not wrap it in code fences.
"""
)

# Registry of prompts by version label.
PROMPTS: Dict[str, Dict[str, str]] = {
    "v1": {
        "notes": NOTES_INSTRUCTIONS,
        "document": DOCUMENT_INSTRUCTIONS,
    },
}


def get_prompts(version: Optional[str]) -> Dict[str, str]:
    return PROMPTS.get((version or "v1").strip(), PROMPTS["v1"])


def build_vision_messages(
    parts: Sequence[ImagePart],
    *,
    instructions: str = NOTES_INSTRUCTIONS,
    detail: str = "high",
) -> List[Dict[str, Any]]:
    """One user message: every image in order, then the instructions."""
    guidance = MULTI_PAGE_GUIDANCE.format(count=len(parts)) if len(parts) > 1 else ""
    content: List[Dict[str, Any]] = [
        {"type": "image_url", "image_url": {"url": part.data_url(), "detail": detail}}
        for part in parts
    ]
    # str.replace: the instructions contain literal JSON braces
    content.append({"type": "text", "text": instructions.replace("{page_guidance}", guidance)})
    return [{"role": "user", "content": content}]


def combine_agent_prompts(call_prompt: Optional[str], eval_prompt: Optional[str]) -> str:
    call_prompt = (call_prompt or "").strip()
    eval_prompt = (eval_prompt or "").strip()
    if not call_prompt and not eval_prompt:
        raise MissingInputError("Provide callPrompt and/or evalPrompt")
    blocks = []
    if call_prompt:
        blocks.append("---- CALL AGENT PROMPT ----\n" + call_prompt)
    if eval_prompt:
        blocks.append("---- EVALUATION PROMPT ----\n" + eval_prompt)
    return "\n\n".join(blocks)


def build_document_messages(
    call_prompt: Optional[str],
    eval_prompt: Optional[str],
    *,
    instructions: str = DOCUMENT_INSTRUCTIONS,
) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": instructions},
        {"role": "user", "content": combine_agent_prompts(call_prompt, eval_prompt)},
    ]
