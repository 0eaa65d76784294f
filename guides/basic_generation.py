"""Simple example showing a headline program script generated end to end."""

import asyncio

from scriptflow import ScriptDispatcher, SpeakerMode, TriggerPayload, load_config


async def main():
    """Generate a two-host headline script with the offline test model."""
    # Use the offline test model so the example runs without API keys
    config = load_config()
    config.generation.summarize_model = "test"
    config.generation.script_model = "test"

    dispatcher = ScriptDispatcher(config=config)

    payload = TriggerPayload(
        program_date="2026-10-19",
        speaker_mode=SpeakerMode.MULTI,
        items=[
            {
                "id": "post-1",
                "title": "Structured concurrency with TaskGroup",
                "content": "asyncio.TaskGroup cancels sibling tasks when one fails...",
                "author": "alice",
                "tags": ["python", "asyncio"],
                "created_at": "2026-10-18T09:00:00Z",
            },
            {
                "id": "post-2",
                "title": "Validating LLM output with pydantic",
                "content": "Structured outputs turn free text into typed models...",
                "author": "bob",
                "tags": ["pydantic"],
                "created_at": "2026-10-18T11:30:00Z",
            },
        ],
        listener_notes=[
            {"id": "n1", "name": "night-owl", "text": "How do you test async code?"}
        ],
    )

    script = await dispatcher.generate_script("headline", payload)

    print(f"✅ Script generated: {script.title}")
    print(f"📋 Sections: {[post.id for post in script.posts]}")


if __name__ == "__main__":
    asyncio.run(main())
