import httpx
from loguru import logger
from typing import Optional
from app.config import Settings


def extract_content(response: dict) -> str:
    """Pull the assistant text out of a chat-completions response."""
    try:
        return response["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"Unexpected chat completion shape: {str(response)[:300]}") from e


async def chat_completion(
    messages: list[dict],
    settings: Settings,
    model: Optional[str] = None,
    temperature: float = 0.3,
    max_tokens: int = 1500,
    json_mode: bool = False,
) -> dict:
    """
    Send one request to an OpenAI-compatible chat completions endpoint.

    Args:
        messages: [{"role": "system/user/assistant", "content": "..."}, ...]
        settings: application settings (key, URL, timeout)
        model: model name, defaults to QUALIFIER_MODEL
        json_mode: ask the API for a JSON object response

    Returns:
        dict: raw JSON response
    """
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
    }
    if settings.OPENAI_PROJECT:
        headers["OpenAI-Project"] = settings.OPENAI_PROJECT

    payload = {
        "model": model or settings.QUALIFIER_MODEL,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}

    logger.debug(f"📤 Sending chat request to {settings.OPENAI_API_URL}")
    logger.debug(f"   Model: {payload['model']}")
    logger.debug(f"   Messages count: {len(messages)}")

    async with httpx.AsyncClient(
        timeout=settings.LLM_TIMEOUT,
        verify=settings.LLM_VERIFY_SSL,
    ) as client:
        try:
            r = await client.post(settings.OPENAI_API_URL, json=payload, headers=headers)

            if r.status_code not in (200, 201):
                response_text = r.text
                logger.error(f"❌ Chat completions API error: {r.status_code}")
                logger.error(f"   URL: {settings.OPENAI_API_URL}")
                logger.error(f"   Response body: {response_text[:500] if response_text else '(empty)'}")

                if r.status_code == 400:
                    logger.error("   Possible causes: invalid request format, model name, or parameters")
                elif r.status_code == 401:
                    logger.error("   Authentication failed - check OPENAI_API_KEY")
                elif r.status_code == 403:
                    logger.error("   Access forbidden - check OPENAI_PROJECT and account permissions")
                elif r.status_code == 429:
                    logger.error("   Rate limit exceeded - too many requests")

            r.raise_for_status()
            return r.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"❌ HTTP error calling chat completions API: {e.response.status_code}")
            raise
        except Exception as e:
            logger.exception(f"❌ Error calling chat completions API: {type(e).__name__}: {e}")
            raise
