from streakmap.features.streaks.service import compute_streaks

__all__ = ["compute_streaks"]
