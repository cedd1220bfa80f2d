"""Meta-prompt construction and submission.

The meta-prompt asks the model for code plus an explicit mapping between
fragments of the user's request and fragments of the generated code, and
pins the output shape down with a worked example.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import ModelInvocationError, ValidationError

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)


_META_PROMPT = """\
You are an expert code generation assistant. The user wants code in the following language: {language}
The user's request is: "{prompt}"

Your task is to:
1. Generate the requested code.
2. Provide a precise mapping between the meaningful segments of the user's prompt and the corresponding segments of the generated code.

You MUST return your response as a single JSON object. The JSON object must have two keys:
1. `code`: A string containing the full, complete generated code.
2. `mapping`: An array of objects. Each object must have:
    - `prompt_segment`: The text fragment from the user's prompt.
    - `code_segment`: The corresponding generated code fragment.
    - `id`: A unique string ID (e.g., "seg-1", "seg-2") to link them.

---
EXAMPLE:
User Request: "In JavaScript, create a variable 'user' with name 'Ali' and print it to console."
Language/Framework: JavaScript
Your JSON Output:
{{
  "code": "const user = {{\\n  name: 'Ali'\\n}};\\nconsole.log(user);",
  "mapping": [
    {{
      "prompt_segment": "create a variable 'user' with name 'Ali'",
      "code_segment": "const user = {{\\n  name: 'Ali'\\n}};",
      "id": "seg-1"
    }},
    {{
      "prompt_segment": "and print it to console",
      "code_segment": "console.log(user);",
      "id": "seg-2"
    }}
  ]
}}
---

Now, process the following user request:
Language/Framework: {language}
User's Prompt: {prompt}
"""


def compose(target_language: str, user_prompt: str) -> str:
    """Build the meta-prompt for one generation.

    Both inputs are trimmed and must be non-empty; the trimmed values are
    embedded verbatim.
    """
    language = (target_language or "").strip()
    prompt = (user_prompt or "").strip()
    if not language or not prompt:
        raise ValidationError("Both the language/framework and the prompt are required.")
    return _META_PROMPT.format(language=language, prompt=prompt)


async def submit(client: LLMClient, instruction: str) -> str:
    """Send a composed instruction to the model and return its raw text."""
    try:
        return await client.generate(instruction)
    except Exception as exc:
        logger.warning("Model invocation failed: %s", exc)
        raise ModelInvocationError(f"Model request failed: {exc}") from exc
