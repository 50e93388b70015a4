"""
Hello World: your first completekit completion.

No API key needed. Runs entirely offline: testing mode makes the factory hand
out the built-in StubProvider for models it cannot resolve.

Prerequisites: None
    pip install completekit

Run:
    python examples/01_hello_world.py
"""

import asyncio

from completekit import ProviderFactory, Settings


async def main() -> None:
    factory = ProviderFactory(Settings(testing_mode=True))
    provider = factory.create("any-model")

    print(f"Provider: {provider.name}\n")

    result = await provider.complete(
        "Correct the grammar of the text.",
        "teh cat sat on teh mat",
        user_prompt="Keep it short.",
    )
    print(f"Response: {result}\n")

    print("Streaming: ", end="")
    await provider.complete_streaming(
        "Correct the grammar of the text.",
        "teh cat sat on teh mat",
        lambda text: print(text, end="", flush=True),
    )
    print()


if __name__ == "__main__":
    asyncio.run(main())
