"""Chats feature package: entities, in-memory repository, DTOs, controller, router.

Chats hold an append-only list of messages and may reference a project.
Replies and titles are produced by ``ai.orchestrator.AIOrchestrator``.
"""
