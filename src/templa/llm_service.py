# llm service using the gemini rest api for text generation
import requests
import logging
from typing import List, Dict, Any, Optional

from .config import Config

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Raised when the generative ai api fails or returns nothing usable"""


# service for interacting with the gemini generateContent api
class GeminiLLMService:
    """LLM service backed by Google Gemini"""

    # initialize service with api key, model and endpoint
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        self.api_key = api_key if api_key is not None else Config.GEMINI_API_KEY
        self.model = model or Config.MODEL
        self.base_url = (base_url or Config.GEMINI_BASE_URL).rstrip("/")
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.session = requests.Session()

        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is not set. Add it to your environment or .env file.")

    # generate text using the gemini api
    def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048
    ) -> str:
        """Generate text, as JSON when a response schema is given"""
        # prepare request payload
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens
            }
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if response_schema:
            payload["generationConfig"]["responseMimeType"] = "application/json"
            payload["generationConfig"]["responseSchema"] = response_schema

        try:
            response = self.session.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            raise LLMServiceError("Request timed out. The model might be overloaded.")
        except requests.exceptions.RequestException as e:
            logger.error(f"Error calling Gemini API: {str(e)}")
            raise LLMServiceError(f"Cannot reach Gemini API: {str(e)}")

        if response.status_code != 200:
            logger.error(f"Gemini API error: {response.status_code} - {response.text[:500]}")
            raise LLMServiceError(f"Gemini API error: {response.status_code}")

        return self._extract_text(response.json())

    # pull the text of the first candidate out of a response body
    def _extract_text(self, result: Dict[str, Any]) -> str:
        candidates = result.get("candidates") or []
        if not candidates:
            feedback = result.get("promptFeedback", {})
            raise LLMServiceError(f"Gemini returned no candidates: {feedback}")

        parts = candidates[0].get("content", {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if not text:
            raise LLMServiceError("Gemini returned an empty response")
        return text

    # list models available to this api key
    def list_models(self) -> List[str]:
        """List available model names"""
        try:
            response = self.session.get(
                f"{self.base_url}/models",
                params={"key": self.api_key},
                timeout=10
            )
        except requests.exceptions.RequestException as e:
            raise LLMServiceError(f"Cannot reach Gemini API: {str(e)}")

        if response.status_code != 200:
            raise LLMServiceError(f"Gemini API error: {response.status_code}")

        return [model.get("name", "") for model in response.json().get("models", [])]

    # test if the api key and model work
    def test_connection(self) -> bool:
        """Test if the LLM service is working"""
        try:
            models = self.list_models()
            if not any(name.endswith(self.model) for name in models):
                logger.warning(f"Model {self.model} not found. Available models: {models}")
                return False
            logger.info(f"✓ Gemini is reachable with model: {self.model}")
            return True
        except LLMServiceError as e:
            logger.error(f"✗ LLM test failed: {str(e)}")
            return False

# global instance for singleton pattern
llm_service = None

# get or create the global llm service instance
def get_llm_service() -> GeminiLLMService:
    """Get or create the global LLM service instance"""
    global llm_service
    if llm_service is None:
        llm_service = GeminiLLMService()
    return llm_service
