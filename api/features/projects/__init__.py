"""Projects feature package: entities, in-memory repository, DTOs, controller, router.

Projects are named containers that chats may point at. Deleting a project
leaves its chats untouched.
"""
