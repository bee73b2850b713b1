"""Language-model orchestration: providers, prompts, and the chat orchestrator."""
