"""
Process flow diagram structure extraction through the OpenAI chat API.

The model is treated as an opaque, possibly imprecise classifier. Its reply
is parsed as JSON and checked for shape only: it must be an object, and
"equipment", when present, must be a list. Entry contents are not
validated here.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"

# Characters of sheet text sent to the model
MAX_INPUT_CHARS = 15000

SYSTEM_PROMPT = (
    "You are an expert Chemical Engineer. Extract structured process flow "
    "diagram data from spreadsheet exports."
)

PFD_PROMPT = """
Extract the process equipment and material streams from the following
process flow diagram sheet, exported as comma-separated text.

For each piece of equipment give its descriptive name and, when the sheet
shows one, its equipment tag (for example "B-101", "R-201", "CT-1").

Text:
{text}

Format as JSON:
{{
    "equipment": [{{ "name": "string", "tag": "string" }}],
    "streams": [{{ "name": "string", "from": "string", "to": "string" }}]
}}
"""


class ExtractionError(RuntimeError):
    """The extraction service returned something that is not a structure object."""


class StructureExtractor:
    """
    Abstract document extraction interface.

    Implementations turn flat sheet text into an object with an "equipment"
    list of {name, tag?} entries. Other keys are passed through untouched.
    """

    def extract_structure(self, text: str) -> Dict[str, Any]:
        raise NotImplementedError


class OpenAIExtractor(StructureExtractor):
    """
    StructureExtractor backed by an OpenAI chat model in JSON mode.

    Configuration can be passed in or taken from the environment:
    OPENAI_API_KEY and PLANTKIT_OPENAI_MODEL (default gpt-4o).
    """

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 60
    ):
        """
        Initialize the extractor.

        Args:
            client: Preconfigured OpenAI client (api_key is ignored if given)
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Chat model name (defaults to PLANTKIT_OPENAI_MODEL or gpt-4o)
            timeout: Request timeout in seconds

        Raises:
            ValueError: If neither a client nor an API key is available
        """
        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError(
                    "Missing OpenAI API key. Pass api_key or set the "
                    "OPENAI_API_KEY environment variable."
                )
            client = OpenAI(api_key=api_key, timeout=timeout)

        self.client = client
        self.model = model or os.getenv("PLANTKIT_OPENAI_MODEL", DEFAULT_MODEL)

    def build_prompt(self, text: str) -> str:
        return PFD_PROMPT.format(text=text[:MAX_INPUT_CHARS])

    def extract_structure(self, text: str) -> Dict[str, Any]:
        """
        Ask the model for the equipment and streams described by `text`.

        Returns:
            The parsed JSON object

        Raises:
            ExtractionError: If the reply is empty, not JSON, or the wrong shape
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self.build_prompt(text)},
            ],
            temperature=0.0,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content
        if not content:
            raise ExtractionError("No content received from OpenAI")

        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"Failed to parse extraction response: {e}")

        if not isinstance(result, dict):
            raise ExtractionError(
                f"Extraction response is a {type(result).__name__}, expected an object"
            )
        if not isinstance(result.get("equipment", []), list):
            raise ExtractionError("Extraction response 'equipment' is not a list")

        logger.info(
            f"Extracted {len(result.get('equipment', []))} equipment entries "
            f"with {self.model}"
        )
        return result
