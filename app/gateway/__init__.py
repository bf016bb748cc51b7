"""Image Description Gateway.

Turns one logical operation ("describe this image") into a provider-specific
call and back into a uniform result:
  - Request validation & model routing (gateway)
  - Vendor-Specific Adapters (OpenAI, Gemini, Anthropic wire formats)
  - Response Normalizer (ALT TEXT / LONG DESCRIPTION split)
"""
