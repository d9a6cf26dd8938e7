from .roadmap import generate_roadmap, get_quiz_for_day, get_roadmap, list_user_roadmaps

__all__ = ["generate_roadmap", "get_quiz_for_day", "get_roadmap", "list_user_roadmaps"]
