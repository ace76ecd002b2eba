import asyncio
import os
import sys
import uuid

from momopay.providers.mobile_money.http import HttpClient
from momopay.providers.mobile_money.sandbox import generate_sandbox_keys
from momopay.settings import settings


def _die(message, code=1):
    print(message)
    sys.exit(code)


def _require_env(name: str, fallback: str = "") -> str:
    value = (os.getenv(name) or fallback or "").strip()
    if not value:
        _die(f"Missing env var: {name}")
    return value


async def _bootstrap(api_user_id: str, subscription_key: str, callback_host: str):
    async with HttpClient(timeout_s=settings.MOMO_HTTP_TIMEOUT_S) as http:
        return await generate_sandbox_keys(
            reference_id=api_user_id,
            subscription_key=subscription_key,
            provider_callback_host=callback_host,
            transport=http,
        )


def main() -> None:
    callback_host = _require_env("MOMO_CALLBACK_HOST", settings.MOMO_CALLBACK_HOST)
    collection_key = _require_env("MOMO_COLLECTION_SUBSCRIPTION_KEY", settings.MOMO_COLLECTION_SUBSCRIPTION_KEY)

    api_user_id = str(uuid.uuid4())
    print(f"Using api_user_id={api_user_id}")

    print("Creating apiuser + apikey (collection key)...")
    result = asyncio.run(_bootstrap(api_user_id, collection_key, callback_host))
    if not result.ok:
        _die(f"Failed: {getattr(result.error, 'message', result.error)}")

    print("\nSnippet:")
    print(f"MOMO_API_USER={result.data.api_user}")
    print(f"MOMO_API_KEY={result.data.api_key}")


if __name__ == "__main__":
    main()
