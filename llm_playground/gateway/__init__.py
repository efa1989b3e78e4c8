"""Multi-provider LLM dispatch layer.

Sends one prompt to several registered LLM endpoints concurrently and
normalizes their responses into a single result type:
  - Provider Adapters (OpenAI-style, Anthropic-style, custom endpoints)
  - Dispatcher (order-preserving scatter/gather over adapters)
"""
