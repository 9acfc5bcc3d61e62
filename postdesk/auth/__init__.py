from postdesk.auth.guard import can_mutate, ensure_can_mutate

__all__ = ["can_mutate", "ensure_can_mutate"]
