from __future__ import annotations

import os

from . import (
    ChatMessage,
    ImageGeneration,
    InvalidModelError,
    MonicaApiError,
    MonicaClient,
    models_by_provider,
    supported_image_models,
)


def main() -> None:
    c = MonicaClient()
    print("OpenAI models:", ", ".join(models_by_provider("OpenAI")))
    print("Image models:", ", ".join(supported_image_models()))
    try:
        c.set_model("gpt-4.2")
    except InvalidModelError as e:
        print(e.user_friendly_message())

    if not c.api_key:
        print("\n[Set MONICA_API_KEY to run the API examples]")
        return

    try:
        print("\n--- Chat Example ---")
        reply = c.chat("Explain the theory of relativity simply", system="Be brief.", max_tokens=200)
        print(reply.content())
        print("Tokens used:", reply.total_tokens())

        print("\n--- Multimodal Chat Example ---")
        msgs = [
            ChatMessage.system("You are a helpful art critic."),
            ChatMessage.user_with_image(
                "Describe this picture.",
                "https://upload.wikimedia.org/wikipedia/commons/thumb/d/dd/Gfp-wisconsin-madison-the-nature-boardwalk.jpg/1024px-Gfp-wisconsin-madison-the-nature-boardwalk.jpg",
            ),
        ]
        print(c.chat_with_messages(msgs).content())

        print("\n--- FLUX Image Example ---")
        resp = c.generate_image_simple("flux_dev", "A beautiful sunset over mountains", steps=25, guidance=3.5, seed=42)
        print(resp)

        print("\n--- Stable Diffusion Image Example ---")
        req = (
            ImageGeneration("sd3_5", "A majestic dragon flying over a medieval castle")
            .set_negative_prompt("blurry, low quality")
            .set_steps(30)
            .set_cfg_scale(7.5)
        )
        resp = c.generate_image(req)
        saved = resp.save_all_images(os.path.join(os.getcwd(), "images"), prefix="dragon_")
        print("Saved:", saved)
    except MonicaApiError as e:
        print("\n[API error]", e.user_friendly_message())


if __name__ == "__main__":
    main()
