# bookgram/services/recommendation_service.py
import json
import logging
from typing import Optional

from google import genai
from google.genai import types

from bookgram.config import settings

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert librarian and book curator for a platform called Bookgram. "
    "Keep the tone helpful, encouraging, and intellectual. "
    "Format the response in Markdown with bold titles."
)

EMPTY_RESPONSE = "I couldn't find any recommendations right now."

MISSING_KEY_MESSAGE = (
    "I'm sorry, but the AI service is not configured with an API Key currently. "
    "Please contact the administrator to add the 'GEMINI_API_KEY' to the deployment settings."
)

APOLOGY = "I'm having trouble connecting to the library archives."


def build_prompt(query: str) -> str:
    return (
        f'The user is asking: "{query}". '
        "Recommend 2-3 specific books that would answer their request. "
        "For each book, give the Title, Author, and a 1-sentence reason why."
    )


def clean_api_key(key: Optional[str]) -> str:
    if not key:
        return ""
    return key.replace('"', "").replace("'", "").strip()


def describe_failure(error: Exception) -> str:
    details = getattr(error, "message", None) or str(error)

    # Google APIs often nest the real message in a JSON body
    if details.strip().startswith("{"):
        try:
            parsed = json.loads(details)
            details = parsed.get("error", {}).get("message") or details
        except ValueError:
            pass

    if "API key not valid" in details:
        return f"{APOLOGY} (Error: Invalid API Key. Please check for typos or extra spaces in your configuration.)"
    if "403" in details or getattr(error, "code", None) == 403:
        return f"{APOLOGY} (Access Denied: The API key does not have permission for this model.)"
    if "404" in details or getattr(error, "code", None) == 404:
        return f"{APOLOGY} (Model Unavailable: The AI service is temporarily offline.)"

    suffix = "..." if len(details) > 100 else ""
    return f"{APOLOGY} (Details: {details[:100]}{suffix})"


class RecommendationClient:
    """Book recommendations from Gemini; every failure ends in readable text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        client=None,
    ):
        self.api_key = clean_api_key(api_key if api_key is not None else settings.gemini_api_key)
        self.model = model or settings.gemini_model
        self.fallback_model = settings.gemini_fallback_model if fallback_model is None else fallback_model
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def _generate(self, model: str, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(system_instruction=SYSTEM_INSTRUCTION),
        )
        return response.text or EMPTY_RESPONSE

    async def recommend(self, query: str) -> str:
        if not self.api_key and self._client is None:
            logger.warning("Gemini API key is missing. Set GEMINI_API_KEY in the environment.")
            return MISSING_KEY_MESSAGE

        prompt = build_prompt(query)
        try:
            return await self._generate(self.model, prompt)
        except Exception as e:
            logger.warning(f"Primary model ({self.model}) failed: {e}")
            if not self.fallback_model:
                return describe_failure(e)

        try:
            return await self._generate(self.fallback_model, prompt)
        except Exception as e:
            logger.exception("Gemini API error (fallback)")
            return describe_failure(e)
