"""Prompt construction and Gemini pass-through.

Every public method returns a string. Failures, including a missing API key,
are logged and turned into a readable message so the caller can show it in
place of the generated text.
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
TEMPERATURE = 0.2
MAX_PROMPT_PATHS = 300
MAX_FILE_CHARS = 100_000

ARCHITECTURE_PROMPT = """\
You are a Senior Software Architect.
Analyze the following file structure of a GitHub repository and provide a concise technical summary.

File Structure (truncated):
{tree}

Please provide the output in Markdown format with the following sections:
1. **Tech Stack**: Detect languages, frameworks, and build tools.
2. **Architecture**: Guess the architectural pattern (e.g., Monorepo, MVC, Clean Architecture).
3. **Key Directories**: Explain the purpose of important folders (e.g., src, lib, api).
4. **Purpose**: Infer what this application does.

Keep it professional and concise.
"""

DOCUMENTATION_PROMPT = """\
You are an automated documentation generator tool (like Sphinx, Javadoc, or Docusaurus).

TASK: Generate comprehensive technical documentation for the following code file: "{file_name}".

INSTRUCTIONS:
1. Analyze the code, specifically looking for docstrings, comments, function signatures, and class definitions.
2. If docstrings exist, use them as the primary source of truth.
3. If docstrings are missing, infer the functionality based on the code logic.
4. Format the output as professional Markdown suitable for a developer portal.

OUTPUT FORMAT:
# [Filename]

## Overview
[Brief description of what this module/file does]

## Classes / Components (if applicable)
### [ClassName]
- Description...

## Functions / Methods
### `functionName(params)`
- **Description**: [What it does]
- **Parameters**:
  - `param`: [Type] - [Description]
- **Returns**: [Type] - [Description]

## Usage Example (Optional, if easy to infer)
```
[Code snippet]
```

CODE TO ANALYZE:
{code}
"""


class MissingAPIKeyError(Exception):
    """Raised when no Gemini API key is configured."""

    def __init__(self):
        super().__init__("API key is missing.")


class DocGenerator:
    """Thin client around ``google.genai`` for documentation prompts."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        client: genai.Client | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError()
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generate(self, prompt: str) -> str | None:
        response = self._get_client().models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=TEMPERATURE),
        )
        return response.text

    def analyze_architecture(self, paths: list[str]) -> str:
        tree = "\n".join(paths[:MAX_PROMPT_PATHS])
        try:
            text = self._generate(ARCHITECTURE_PROMPT.format(tree=tree))
        except Exception as exc:
            logger.error("Gemini analysis error: %s", exc)
            return f"Failed to analyze repository structure: {str(exc) or 'Unknown error'}"
        return text or "Could not generate analysis."

    def generate_documentation(self, file_name: str, content: str) -> str:
        if len(content) > MAX_FILE_CHARS:
            content = content[:MAX_FILE_CHARS] + "\n...[File Truncated]"
        prompt = DOCUMENTATION_PROMPT.format(file_name=file_name, code=content)
        try:
            text = self._generate(prompt)
        except Exception as exc:
            logger.error("Gemini doc generation error for %s: %s", file_name, exc)
            return f"Failed to generate documentation: {str(exc) or 'Unknown error'}"
        return text or "Could not generate documentation."
