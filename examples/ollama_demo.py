"""
Ollama Local Model Demo

This example streams a completion from a local Ollama model:
- Privacy-preserving inference (no data sent to cloud)
- Stall watchdog: the call is abandoned if the model goes quiet
- Both transports: streaming httpx and buffered

Prerequisites:
1. Install Ollama: https://ollama.ai
2. Pull a model: `ollama pull llama3.2`
3. Start Ollama server: `ollama serve`

Run this demo:
    python examples/ollama_demo.py
"""

import asyncio

from completekit import (
    CompleteKitError,
    ModelReference,
    ProviderDescriptor,
    ProviderFactory,
    Settings,
    VendorKind,
)


def build_settings(use_alternate_transport: bool) -> Settings:
    return Settings(
        providers=[
            ProviderDescriptor(
                id="local-ollama",
                name="Ollama (local)",
                kind=VendorKind.OLLAMA,
                # Ollama ignores the credential, but the factory requires one.
                api_key="ollama",
            )
        ],
        models=[
            ModelReference(
                id="llama",
                name="Llama 3.2",
                provider_id="local-ollama",
                model_name="llama3.2",
            )
        ],
        default_model_id="llama",
        use_alternate_transport=use_alternate_transport,
        query_timeout=30.0,
    )


async def run(use_alternate_transport: bool) -> None:
    label = "buffered" if use_alternate_transport else "streaming"
    factory = ProviderFactory(build_settings(use_alternate_transport))
    provider = factory.create()

    print(f"\n=== {factory.provider_name()} ({label} transport) ===")
    await provider.complete_streaming(
        "You are a concise assistant.",
        "Explain what a stall timeout is in two sentences.",
        lambda text: print(text, end="", flush=True),
        temperature=0.2,
        max_output_tokens=120,
    )
    print()


async def main() -> None:
    try:
        await run(use_alternate_transport=False)
        await run(use_alternate_transport=True)
    except CompleteKitError as exc:
        print(f"\nCompletion failed: {exc}")
        print("Is Ollama running? Start it with `ollama serve`.")


if __name__ == "__main__":
    asyncio.run(main())
